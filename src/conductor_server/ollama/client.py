"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
communicating with the Ollama API. The client is designed to be created once
at startup and reused by every tool invocation.
"""

import logging
from typing import Any, AsyncIterator

import httpx
import ollama

from conductor_server.ollama.types import ModelInfo, OllamaBackendError

logger = logging.getLogger(__name__)


def _chunk_to_dict(chunk: Any) -> dict[str, Any] | None:
    """Convert a response object from the ollama library to a plain dict.

    Returns:
        The chunk as a dict, or None if it has no usable message
    """
    if hasattr(chunk, "model_dump"):
        chunk_dict = chunk.model_dump()
    elif isinstance(chunk, dict):
        chunk_dict = chunk
    else:
        return None

    message = chunk_dict.get("message")
    if not isinstance(message, dict):
        return None
    if not isinstance(message.get("content") or "", str):
        return None
    return chunk_dict


def _backend_error(action: str, error: Exception) -> OllamaBackendError:
    """Translate an ollama/httpx exception into an OllamaBackendError."""
    if isinstance(error, ollama.ResponseError):
        return OllamaBackendError(
            f"{action} failed with status {error.status_code}: {error.error}",
            status_code=error.status_code,
        )
    return OllamaBackendError(f"{action} failed: {error}")


class OllamaClient:
    """Async client for interacting with the Ollama API.

    This client wraps ollama.AsyncClient and provides high-level async methods
    for listing models, checking connectivity and running chat completions,
    either as a single response or as a stream of partial chunks.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host.rstrip("/")
        self._client = ollama.AsyncClient(host=self.host)
        logger.info(f"OllamaClient initialized with host: {self.host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def list_models(self) -> list[ModelInfo]:
        """List all installed models.

        Returns:
            list[ModelInfo]: Installed models in the order Ollama reports them

        Raises:
            OllamaBackendError: If the Ollama API request fails
        """
        try:
            response = await self._client.list()
        except (ollama.ResponseError, httpx.HTTPError, ConnectionError) as e:
            logger.error(f"Failed to list models: {e}")
            raise _backend_error("Listing models", e) from e

        if hasattr(response, "models"):
            models_list = response.models
        else:
            # Fallback for dict-like response
            models_list = response.get("models", [])

        model_infos = [ModelInfo.from_ollama_model(model) for model in models_list]
        logger.info(f"Listed {len(model_infos)} models")
        return model_infos

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run a single, non-streaming chat completion.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format:
                      [{"role": "user", "content": "..."}, ...]
            options: Optional model parameters (temperature, etc.)

        Returns:
            dict: The response containing model, created_at, message and done

        Raises:
            OllamaBackendError: If the Ollama API request fails
        """
        logger.debug(f"Starting chat with model {model} ({len(messages)} messages)")

        try:
            response = await self._client.chat(
                model=model,
                messages=messages,
                stream=False,
                options=options,
            )
        except (ollama.ResponseError, httpx.HTTPError, ConnectionError) as e:
            logger.error(f"Chat request failed: {e}")
            raise _backend_error("Chat request", e) from e

        response_dict = _chunk_to_dict(response)
        if response_dict is None:
            raise OllamaBackendError("Chat request returned no message")
        return response_dict

    async def chat_stream(
        self,
        model: str,
        messages: list[dict[str, Any]],
        options: dict[str, Any] | None = None,
    ) -> AsyncIterator[dict[str, Any]]:
        """Stream chat responses from Ollama.

        Chunks that cannot be interpreted are logged and skipped; the stream
        keeps going.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format
            options: Optional model parameters (temperature, etc.)

        Yields:
            dict: Response chunks from Ollama. Each chunk contains:
                  - model: str - The model name
                  - created_at: str - Timestamp
                  - message: dict - Contains role and partial content
                  - done: bool - True on the final chunk

        Raises:
            OllamaBackendError: If the Ollama API request fails

        Example:
            >>> async for chunk in client.chat_stream(
            ...     model="qwen2.5:latest",
            ...     messages=[{"role": "user", "content": "Hello"}]
            ... ):
            ...     print(chunk["message"]["content"], end="")
        """
        logger.debug(f"Starting chat stream with model {model} ({len(messages)} messages)")

        try:
            async for chunk in await self._client.chat(
                model=model,
                messages=messages,
                stream=True,
                options=options,
            ):
                chunk_dict = _chunk_to_dict(chunk)
                if chunk_dict is None:
                    logger.warning(f"Skipping malformed chunk: {chunk!r}")
                    continue

                yield chunk_dict

        except (ollama.ResponseError, httpx.HTTPError, ConnectionError) as e:
            logger.error(f"Chat stream failed: {e}")
            raise _backend_error("Chat stream", e) from e

        logger.debug("Chat stream completed")

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        inner = getattr(self._client, "_client", None)
        if isinstance(inner, httpx.AsyncClient):
            await inner.aclose()
        logger.debug("OllamaClient closed")
