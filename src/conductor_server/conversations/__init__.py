"""Conversation memory for conductor-server.

This package provides the in-memory store that lets independent tool calls
share a multi-turn dialogue through a continuation id.
"""

from conductor_server.conversations.store import ConversationStore
from conductor_server.conversations.types import ChatMessage, Conversation

__all__ = [
    "ChatMessage",
    "Conversation",
    "ConversationStore",
]
