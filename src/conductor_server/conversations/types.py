"""Data types for conversation memory.

This module defines the message and conversation structures held by the
ConversationStore.
"""

from dataclasses import dataclass, field
from typing import Any

MESSAGE_ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class ChatMessage:
    """A single message in a conversation.

    Messages are immutable once created; a conversation only ever grows by
    appending new ones.

    Attributes:
        role: One of "system", "user" or "assistant"
        content: The message text
    """

    role: str
    content: str

    def __post_init__(self) -> None:
        """Validate the message role."""
        if self.role not in MESSAGE_ROLES:
            raise ValueError(f"Unknown message role: {self.role}")

    def to_ollama(self) -> dict[str, str]:
        """Convert the message to Ollama API format."""
        return {"role": self.role, "content": self.content}

    @classmethod
    def from_ollama(cls, data: dict[str, Any]) -> "ChatMessage":
        """Create a message from an Ollama message dict.

        Args:
            data: Message dict as returned by the Ollama chat API

        Returns:
            ChatMessage: The parsed message

        Raises:
            ValueError: If the role is unknown
        """
        return cls(
            role=data.get("role") or "assistant",
            content=data.get("content") or "",
        )


@dataclass
class Conversation:
    """A conversation tracked by the ConversationStore.

    Timestamps are seconds since the epoch.
    """

    conversation_id: str
    messages: list[ChatMessage] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: float = 0.0
    updated_at: float = 0.0

    def copy(self) -> "Conversation":
        """Return a copy whose message list and metadata are detached."""
        return Conversation(
            conversation_id=self.conversation_id,
            messages=list(self.messages),
            metadata=dict(self.metadata),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
