"""Pytest configuration and shared fixtures for conductor-server tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup, and a mocked Ollama client
wired into a tool registry.
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from conductor_server import create_app
from conductor_server.config import ConductorSettings
from conductor_server.conversations import ConversationStore
from conductor_server.ollama import ModelInfo
from conductor_server.tools import ToolRegistry


@pytest.fixture
def test_settings():
    """Create test settings.

    Returns:
        ConductorSettings: Settings instance configured for testing.
    """
    return ConductorSettings(
        transport="http",
        host="127.0.0.1",
        port=8000,
        ollama_base_url="http://localhost:11434",
        default_model="qwen2.5:latest",
        disabled_tools="",
        max_conversations=100,
        conversation_max_age_hours=24.0,
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture
def stream_reply():
    """Make a mocked client stream the given reply parts.

    Every call of chat_stream is recorded in client.stream_calls.

    Returns:
        Callable taking the mocked client followed by the reply parts.
    """

    def _set(client, *parts):
        client.stream_calls = []

        async def chat_stream(model, messages, options=None):
            client.stream_calls.append(
                {"model": model, "messages": messages, "options": options}
            )
            for part in parts:
                yield {
                    "model": model,
                    "message": {"role": "assistant", "content": part},
                    "done": False,
                }
            yield {
                "model": model,
                "message": {"role": "assistant", "content": ""},
                "done": True,
            }

        client.chat_stream = chat_stream

    return _set


@pytest.fixture
def sample_models():
    return [
        ModelInfo(
            name="qwen2.5:latest",
            size_bytes=4683087332,
            format="gguf",
            family="qwen2",
            parameter_size="7.6B",
            quantization_level="Q4_K_M",
            modified_at="2025-01-15T10:30:00+00:00",
        ),
        ModelInfo(
            name="llama3.2:latest",
            size_bytes=2019393189,
            format="gguf",
            family="llama",
            parameter_size="3.2B",
            quantization_level="Q4_K_M",
            modified_at=None,
        ),
    ]


@pytest.fixture
def mock_ollama(stream_reply, sample_models):
    """Create a mocked OllamaClient replying "Hello there" to every chat."""
    client = AsyncMock()
    client.host = "http://localhost:11434"
    client.check_connection.return_value = True
    client.list_models.return_value = sample_models
    client.chat.return_value = {
        "model": "qwen2.5:latest",
        "message": {"role": "assistant", "content": "Hello there"},
        "done": True,
    }
    stream_reply(client, "Hello", " there")
    return client


@pytest.fixture
def store():
    return ConversationStore(max_conversations=100, max_age_seconds=24 * 60 * 60)


@pytest.fixture
def registry(test_settings, mock_ollama, store):
    """Create a ToolRegistry backed by the mocked Ollama client."""
    return ToolRegistry(settings=test_settings, ollama_client=mock_ollama, store=store)
