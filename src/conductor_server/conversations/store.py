"""In-memory conversation store.

This module provides the ConversationStore class which handles:
- Creating conversations with unique identifiers
- Appending messages and merging metadata
- Looking up and deleting conversations
- Bounding memory use with age- and count-based eviction
"""

import logging
import time
import uuid
from collections.abc import Callable, Iterable
from typing import Any

from conductor_server.conversations.types import ChatMessage, Conversation

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONVERSATIONS = 100
DEFAULT_MAX_AGE_SECONDS = 24 * 60 * 60


class ConversationStore:
    """Authoritative registry of active conversations.

    Missing ids are never an error: lookups return None or an empty list and
    mutations become no-ops. Eviction runs synchronously on every create.
    """

    def __init__(
        self,
        max_conversations: int = DEFAULT_MAX_CONVERSATIONS,
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the ConversationStore.

        Args:
            max_conversations: Capacity bound on tracked conversations
            max_age_seconds: Retention window for untouched conversations
            clock: Time source returning seconds since the epoch
        """
        if max_conversations < 1:
            raise ValueError("max_conversations must be at least 1")

        self.max_conversations = max_conversations
        self.max_age_seconds = max_age_seconds
        self._clock = clock
        self._conversations: dict[str, Conversation] = {}

    def generate_id(self) -> str:
        """Generate a new unique conversation ID.

        Returns:
            Identifier of the form conv_<millis>_<12 hex chars>
        """
        return f"conv_{int(self._clock() * 1000)}_{uuid.uuid4().hex[:12]}"

    def create(
        self,
        initial_messages: Iterable[ChatMessage] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> str:
        """Create a new conversation.

        Args:
            initial_messages: Messages to seed the conversation with
            metadata: Initial metadata

        Returns:
            The id of the new conversation
        """
        conversation_id = self.generate_id()
        while conversation_id in self._conversations:
            conversation_id = self.generate_id()

        # A new conversation is never older than the existing ones, so the
        # capacity pass cannot evict it even if the clock went backwards
        now = max(
            [self._clock(), *(c.updated_at for c in self._conversations.values())]
        )
        self._conversations[conversation_id] = Conversation(
            conversation_id=conversation_id,
            messages=list(initial_messages or []),
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )
        logger.info(f"Created conversation {conversation_id}")

        self._cleanup()
        return conversation_id

    def get(self, conversation_id: str) -> Conversation | None:
        """Get a copy of a conversation, or None if unknown or expired."""
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            logger.debug(f"Conversation not found: {conversation_id}")
            return None
        return conversation.copy()

    def get_messages(self, conversation_id: str) -> list[ChatMessage]:
        """Get the messages of a conversation.

        Args:
            conversation_id: The conversation ID

        Returns:
            The messages in append order, or an empty list for an unknown id
        """
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return []
        return list(conversation.messages)

    def add_message(self, conversation_id: str, message: ChatMessage) -> None:
        """Append a message to a conversation. No-op for an unknown id."""
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            logger.debug(f"Ignoring message for unknown conversation {conversation_id}")
            return

        conversation.messages.append(message)
        self._touch(conversation)

    def update_metadata(self, conversation_id: str, partial: dict[str, Any]) -> None:
        """Shallow-merge partial into a conversation's metadata.

        New keys are added, existing keys overwritten and untouched keys kept.
        No-op for an unknown id.
        """
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            return

        conversation.metadata = {**conversation.metadata, **partial}
        self._touch(conversation)

    def delete(self, conversation_id: str) -> bool:
        """Delete a conversation.

        Returns:
            True if the conversation existed, False for an unknown id
        """
        if self._conversations.pop(conversation_id, None) is None:
            return False
        logger.info(f"Deleted conversation {conversation_id}")
        return True

    def size(self) -> int:
        """Get the number of tracked conversations."""
        return len(self._conversations)

    def __len__(self) -> int:
        return self.size()

    def clear(self) -> None:
        """Remove all conversations."""
        count = len(self._conversations)
        self._conversations.clear()
        logger.info(f"Cleared {count} conversations")

    def _touch(self, conversation: Conversation) -> None:
        # updated_at must never move backwards, even if the clock does
        conversation.updated_at = max(self._clock(), conversation.updated_at)

    def _cleanup(self) -> None:
        """Evict expired conversations, then the oldest ones above capacity."""
        now = self._clock()

        expired = [
            conversation_id
            for conversation_id, conversation in self._conversations.items()
            if now - conversation.updated_at > self.max_age_seconds
        ]
        for conversation_id in expired:
            del self._conversations[conversation_id]

        overflow = len(self._conversations) - self.max_conversations
        evicted: list[str] = []
        if overflow > 0:
            # sorted() is stable, so ties keep insertion order (oldest first)
            oldest = sorted(
                self._conversations.values(), key=lambda c: c.updated_at
            )[:overflow]
            for conversation in oldest:
                del self._conversations[conversation.conversation_id]
                evicted.append(conversation.conversation_id)

        if expired or evicted:
            logger.info(
                f"Evicted {len(expired)} expired and {len(evicted)} "
                f"over-capacity conversations ({len(self._conversations)} remaining)"
            )
