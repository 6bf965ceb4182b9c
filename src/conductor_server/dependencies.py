"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject the process-wide objects created at startup.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from conductor_server.config import ConductorSettings
from conductor_server.conversations import ConversationStore
from conductor_server.tools import ToolRegistry


@lru_cache
def get_settings() -> ConductorSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the CONDUCTOR_ prefix.

    Returns:
        ConductorSettings: The application configuration settings.
    """
    return ConductorSettings()


def _not_initialized(component: str) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={
            "error": {
                "code": "not_initialized",
                "message": f"{component} not initialized",
                "details": {},
            }
        },
    )


def get_conversation_store(request: Request) -> ConversationStore:
    """Get the process-wide ConversationStore from app state.

    Raises:
        HTTPException: If the store is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "conversation_store"):
        raise _not_initialized("Conversation store")
    return request.app.state.conversation_store


def get_tool_registry(request: Request) -> ToolRegistry:
    """Get the ToolRegistry created during application startup.

    Raises:
        HTTPException: If the registry is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "tool_registry"):
        raise _not_initialized("Tool registry")
    return request.app.state.tool_registry
