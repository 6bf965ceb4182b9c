"""Unit tests for the OllamaClient wrapper."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import ollama
import pytest

from conductor_server.ollama import ModelInfo, OllamaBackendError, OllamaClient, build_options


@pytest.fixture
def mock_ollama_async_client():
    """Create a mock ollama.AsyncClient."""
    with patch("conductor_server.ollama.client.ollama.AsyncClient") as mock_class:
        mock_instance = AsyncMock()
        mock_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def ollama_client(mock_ollama_async_client):
    """Create an OllamaClient with mocked AsyncClient."""
    return OllamaClient(host="http://localhost:11434")


def _stream(*chunks):
    async def generator():
        for chunk in chunks:
            yield chunk

    return generator()


@pytest.mark.asyncio
async def test_client_initialization():
    """Test that OllamaClient initializes correctly."""
    with patch("conductor_server.ollama.client.ollama.AsyncClient") as mock_class:
        client = OllamaClient(host="http://test:11434/")
        assert client.host == "http://test:11434"
        mock_class.assert_called_once_with(host="http://test:11434")


@pytest.mark.asyncio
async def test_check_connection_success(ollama_client, mock_ollama_async_client):
    """Test successful connection check."""
    mock_ollama_async_client.list.return_value = {"models": []}

    result = await ollama_client.check_connection()

    assert result is True
    mock_ollama_async_client.list.assert_called_once()


@pytest.mark.asyncio
async def test_check_connection_failure(ollama_client, mock_ollama_async_client):
    """Test connection check when Ollama is unreachable."""
    mock_ollama_async_client.list.side_effect = Exception("Connection refused")

    result = await ollama_client.check_connection()

    assert result is False


@pytest.mark.asyncio
async def test_list_models_success(ollama_client, mock_ollama_async_client):
    """Test listing models from an object-like response."""
    mock_details = MagicMock()
    mock_details.format = "gguf"
    mock_details.family = "qwen2"
    mock_details.parameter_size = "7.6B"
    mock_details.quantization_level = "Q4_K_M"

    mock_model = MagicMock()
    mock_model.model = "qwen2.5:latest"
    mock_model.size = 4683087332
    mock_model.details = mock_details
    mock_model.modified_at = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)

    mock_list_response = MagicMock()
    mock_list_response.models = [mock_model]
    mock_ollama_async_client.list.return_value = mock_list_response

    models = await ollama_client.list_models()

    assert models == [
        ModelInfo(
            name="qwen2.5:latest",
            size_bytes=4683087332,
            format="gguf",
            family="qwen2",
            parameter_size="7.6B",
            quantization_level="Q4_K_M",
            modified_at="2025-01-15T10:30:00+00:00",
        )
    ]
    assert models[0].size_gb == 4.36


@pytest.mark.asyncio
async def test_list_models_dict_response(ollama_client, mock_ollama_async_client):
    """Test listing models from a dict response with missing details."""
    mock_ollama_async_client.list.return_value = {
        "models": [{"name": "tinyllama:latest", "size": 637700138}]
    }

    models = await ollama_client.list_models()

    assert len(models) == 1
    assert models[0].name == "tinyllama:latest"
    assert models[0].family == "unknown"
    assert models[0].modified_at is None


@pytest.mark.asyncio
async def test_list_models_error(ollama_client, mock_ollama_async_client):
    """Test that a failed listing raises OllamaBackendError."""
    mock_ollama_async_client.list.side_effect = httpx.ConnectError("Connection refused")

    with pytest.raises(OllamaBackendError, match="Listing models failed"):
        await ollama_client.list_models()


@pytest.mark.asyncio
async def test_chat_non_streaming(ollama_client, mock_ollama_async_client):
    """Test a single non-streaming chat completion."""
    mock_ollama_async_client.chat.return_value = {
        "model": "qwen2.5:latest",
        "message": {"role": "assistant", "content": "Hi!"},
        "done": True,
    }
    messages = [{"role": "user", "content": "Hello"}]

    response = await ollama_client.chat(
        model="qwen2.5:latest", messages=messages, options={"temperature": 0.5}
    )

    assert response["message"]["content"] == "Hi!"
    mock_ollama_async_client.chat.assert_called_once_with(
        model="qwen2.5:latest",
        messages=messages,
        stream=False,
        options={"temperature": 0.5},
    )


@pytest.mark.asyncio
async def test_chat_response_error(ollama_client, mock_ollama_async_client):
    """Test that an HTTP error from Ollama carries its status."""
    mock_ollama_async_client.chat.side_effect = ollama.ResponseError(
        "model 'nope' not found", status_code=404
    )

    with pytest.raises(OllamaBackendError) as exc_info:
        await ollama_client.chat(model="nope", messages=[])

    assert exc_info.value.status_code == 404
    assert "status 404" in str(exc_info.value)
    assert "model 'nope' not found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_chat_stream_yields_chunks(ollama_client, mock_ollama_async_client):
    """Test that streamed chunks are yielded in order."""
    mock_ollama_async_client.chat.return_value = _stream(
        {"message": {"role": "assistant", "content": "Hel"}, "done": False},
        {"message": {"role": "assistant", "content": "lo"}, "done": False},
        {"message": {"role": "assistant", "content": ""}, "done": True},
    )

    chunks = [
        chunk
        async for chunk in ollama_client.chat_stream(
            model="qwen2.5:latest", messages=[{"role": "user", "content": "Hi"}]
        )
    ]

    assert [chunk["message"]["content"] for chunk in chunks] == ["Hel", "lo", ""]
    assert chunks[-1]["done"] is True
    assert mock_ollama_async_client.chat.call_args.kwargs["stream"] is True


@pytest.mark.asyncio
async def test_chat_stream_skips_malformed_chunks(ollama_client, mock_ollama_async_client):
    """Test that chunks without a usable message are skipped."""
    mock_ollama_async_client.chat.return_value = _stream(
        {"message": {"role": "assistant", "content": "A"}},
        {"done": False},
        {"message": "not a dict"},
        {"message": {"role": "assistant", "content": 42}},
        "garbage",
        {"message": {"role": "assistant", "content": "B"}},
    )

    chunks = [
        chunk
        async for chunk in ollama_client.chat_stream(model="qwen2.5:latest", messages=[])
    ]

    assert [chunk["message"]["content"] for chunk in chunks] == ["A", "B"]


@pytest.mark.asyncio
async def test_chat_stream_converts_model_objects(ollama_client, mock_ollama_async_client):
    """Test that response objects of the ollama library are converted to dicts."""
    chunk = MagicMock()
    chunk.model_dump.return_value = {
        "message": {"role": "assistant", "content": "ok"},
        "done": True,
    }
    mock_ollama_async_client.chat.return_value = _stream(chunk)

    chunks = [
        c async for c in ollama_client.chat_stream(model="qwen2.5:latest", messages=[])
    ]

    assert chunks == [{"message": {"role": "assistant", "content": "ok"}, "done": True}]


@pytest.mark.asyncio
async def test_chat_stream_connection_error(ollama_client, mock_ollama_async_client):
    """Test that an unreachable backend raises OllamaBackendError."""
    mock_ollama_async_client.chat.side_effect = ConnectionError("Connection refused")

    with pytest.raises(OllamaBackendError, match="Chat stream failed"):
        async for _ in ollama_client.chat_stream(model="qwen2.5:latest", messages=[]):
            pass


@pytest.mark.asyncio
async def test_close_closes_http_client(ollama_client, mock_ollama_async_client):
    """Test that close() releases the underlying HTTP client."""
    inner = httpx.AsyncClient()
    mock_ollama_async_client._client = inner

    await ollama_client.close()

    assert inner.is_closed


def test_build_options_drops_unset_values():
    """Test that only set options are sent to Ollama."""
    assert build_options() is None
    assert build_options(temperature=0.0) == {"temperature": 0.0}
    assert build_options(temperature=0.7, num_predict=256) == {
        "temperature": 0.7,
        "num_predict": 256,
    }
