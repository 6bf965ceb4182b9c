"""Conversation inspection endpoints.

Conversations are created implicitly by tool calls; these endpoints only
read and discard them.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from conductor_server.conversations import ConversationStore
from conductor_server.dependencies import get_conversation_store
from conductor_server.models.conversations import (
    ClearConversationsResponse,
    ConversationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/conversations", tags=["conversations"])


def _not_found(conversation_id: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "error": {
                "code": "conversation_not_found",
                "message": f"Conversation {conversation_id} not found",
                "details": {"conversation_id": conversation_id},
            }
        },
    )


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: str,
    store: ConversationStore = Depends(get_conversation_store),
) -> ConversationResponse:
    """Get a conversation with its full message history.

    Raises:
        HTTPException: 404 if the conversation does not exist or has expired
    """
    conversation = store.get(conversation_id)
    if conversation is None:
        raise _not_found(conversation_id)
    return ConversationResponse.from_conversation(conversation)


@router.delete("/{conversation_id}", status_code=204)
async def delete_conversation(
    conversation_id: str,
    store: ConversationStore = Depends(get_conversation_store),
) -> None:
    """Delete a conversation.

    Raises:
        HTTPException: 404 if the conversation does not exist
    """
    if not store.delete(conversation_id):
        raise _not_found(conversation_id)


@router.delete("", response_model=ClearConversationsResponse)
async def clear_conversations(
    store: ConversationStore = Depends(get_conversation_store),
) -> ClearConversationsResponse:
    """Delete all conversations."""
    cleared = store.size()
    store.clear()
    return ClearConversationsResponse(cleared=cleared)
