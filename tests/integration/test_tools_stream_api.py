"""Integration tests for the streaming tool API endpoint.

This module tests the SSE streaming endpoint including:
- Content deltas followed by a done event
- Recording of the exchange in the conversation
- Error scenarios
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import Request
from httpx import AsyncClient

from conductor_server.ollama import OllamaBackendError


def parse_events(response) -> list[dict]:
    """Parse the SSE events of a response body."""
    events = []
    # Normalize line endings and split by double newline
    normalized_text = response.text.replace("\r\n", "\n")
    for block in normalized_text.strip().split("\n\n"):
        event_type = None
        event_data = None
        for part in block.split("\n"):
            if part.startswith("event:"):
                event_type = part.split(":", 1)[1].strip()
            elif part.startswith("data:"):
                event_data = part.split(":", 1)[1].strip()
        if event_type and event_data:
            events.append({"event": event_type, "data": json.loads(event_data)})
    return events


@pytest.mark.asyncio
async def test_stream_chat(async_client: AsyncClient, mock_ollama_client, stream_reply):
    """Test streaming a chat reply."""
    stream_reply(mock_ollama_client, "Hello", " there", "!")

    response = await async_client.post(
        "/api/v1/tools/chat/stream", json={"prompt": "Hi!"}
    )

    assert response.status_code == 200
    events = parse_events(response)

    content_events = [e for e in events if e["event"] == "content_delta"]
    assert [e["data"]["content"] for e in content_events] == ["Hello", " there", "!"]

    assert events[-1]["event"] == "done"
    done = events[-1]["data"]
    assert done["text"].startswith("Hello there!")
    assert f"*Conversation ID: {done['conversation_id']}*" in done["text"]

    # Verify the exchange was recorded
    conversation = await async_client.get(
        f"/api/v1/conversations/{done['conversation_id']}"
    )
    assert conversation.status_code == 200
    messages = conversation.json()["messages"]
    assert messages == [
        {"role": "user", "content": "Hi!"},
        {"role": "assistant", "content": "Hello there!"},
    ]


@pytest.mark.asyncio
async def test_stream_workflow_step_includes_trailer(
    async_client: AsyncClient, mock_ollama_client
):
    """Test that the done event of a workflow step carries the trailer."""
    response = await async_client.post(
        "/api/v1/tools/planner/stream",
        json={
            "step": "Plan the migration",
            "step_number": 1,
            "total_steps": 3,
            "next_step_required": True,
        },
    )

    events = parse_events(response)
    done = events[-1]
    assert done["event"] == "done"
    assert "**Planning Session Info**" in done["data"]["text"]
    assert f"- Continuation ID: {done['data']['conversation_id']}" in done["data"]["text"]


@pytest.mark.asyncio
async def test_stream_backend_error(async_client: AsyncClient, mock_ollama_client):
    """Test that a backend failure ends the stream with an error event."""

    async def failing_stream(*args, **kwargs):
        yield {"message": {"role": "assistant", "content": "partial"}, "done": False}
        raise OllamaBackendError("Chat stream failed: Connection reset")

    mock_ollama_client.chat_stream = failing_stream

    response = await async_client.post(
        "/api/v1/tools/chat/stream", json={"prompt": "Hi!"}
    )

    events = parse_events(response)
    assert events[0]["event"] == "content_delta"
    assert events[-1]["event"] == "error"
    error = events[-1]["data"]
    assert error["code"] == "ollama_error"
    assert "Connection reset" in error["message"]
    assert not [e for e in events if e["event"] == "done"]

    # Nothing was recorded
    conversation = await async_client.get(
        f"/api/v1/conversations/{error['details']['conversation_id']}"
    )
    assert conversation.json()["message_count"] == 0


@pytest.mark.asyncio
async def test_stream_unknown_tool(async_client: AsyncClient):
    """Test streaming an unknown tool."""
    response = await async_client.post("/api/v1/tools/nope/stream", json={})

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "tool_not_found"


@pytest.mark.asyncio
async def test_stream_utility_tool_not_supported(async_client: AsyncClient):
    """Test that tools without model output cannot be streamed."""
    response = await async_client.post("/api/v1/tools/version/stream", json={})

    assert response.status_code == 400
    assert response.json()["detail"]["error"]["code"] == "streaming_not_supported"


@pytest.mark.asyncio
async def test_stream_invalid_arguments(async_client: AsyncClient):
    """Test that invalid arguments are rejected before anything is stored."""
    response = await async_client.post("/api/v1/tools/chat/stream", json={})

    assert response.status_code == 400
    error = response.json()["detail"]["error"]
    assert error["code"] == "invalid_arguments"
    assert "prompt" in error["message"]

    health = await async_client.get("/api/v1/health")
    assert health.json()["active_conversations"] == 0


@pytest.mark.asyncio
async def test_stream_client_disconnect(async_client: AsyncClient, mock_ollama_client):
    """Test that a disconnect closes the backend stream and drops the new conversation."""
    closed = []

    async def chat_stream(*args, **kwargs):
        try:
            yield {"message": {"role": "assistant", "content": "Hel"}, "done": False}
            yield {"message": {"role": "assistant", "content": "lo"}, "done": False}
        finally:
            closed.append(True)

    mock_ollama_client.chat_stream = chat_stream

    with patch.object(Request, "is_disconnected", AsyncMock(return_value=True)):
        response = await async_client.post(
            "/api/v1/tools/chat/stream", json={"prompt": "Hi!"}
        )

    assert response.status_code == 200
    assert parse_events(response) == []
    assert closed == [True]

    health = await async_client.get("/api/v1/health")
    assert health.json()["active_conversations"] == 0
