"""Pydantic models for the conversation administration endpoints."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from conductor_server.conversations import Conversation


class MessageResponse(BaseModel):
    """A single message of a conversation."""

    role: str = Field(description="Message role (system, user or assistant)")
    content: str = Field(description="Message content")


class ConversationResponse(BaseModel):
    """Response model for a stored conversation."""

    conversation_id: str = Field(description="Conversation identifier")
    messages: list[MessageResponse] = Field(description="Messages in append order")
    metadata: dict[str, Any] = Field(description="Conversation metadata")
    created_at: datetime = Field(description="Creation time (UTC)")
    updated_at: datetime = Field(description="Time of the last change (UTC)")
    message_count: int = Field(description="Number of messages")

    @classmethod
    def from_conversation(cls, conversation: Conversation) -> "ConversationResponse":
        return cls(
            conversation_id=conversation.conversation_id,
            messages=[
                MessageResponse(role=message.role, content=message.content)
                for message in conversation.messages
            ],
            metadata=conversation.metadata,
            created_at=datetime.fromtimestamp(conversation.created_at, tz=timezone.utc),
            updated_at=datetime.fromtimestamp(conversation.updated_at, tz=timezone.utc),
            message_count=len(conversation.messages),
        )


class ClearConversationsResponse(BaseModel):
    """Response model for clearing the conversation store."""

    cleared: int = Field(description="Number of conversations removed")
