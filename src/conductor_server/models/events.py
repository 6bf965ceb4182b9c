"""Pydantic models for the SSE events of streamed tool calls."""

from typing import Any

from pydantic import BaseModel, Field


class ContentDeltaEvent(BaseModel):
    """A chunk of model output, emitted as it arrives."""

    content: str = Field(description="Partial content")


class DoneEvent(BaseModel):
    """Emitted once the reply is complete and recorded in the conversation."""

    conversation_id: str = Field(description="Conversation the exchange was stored in")
    text: str = Field(description="Full tool response text, including any trailer")


class ErrorEvent(BaseModel):
    """Emitted when the backend call fails; nothing is recorded."""

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)
