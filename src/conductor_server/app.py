"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from conductor_server.config import ConductorSettings
from conductor_server.conversations import ConversationStore
from conductor_server.ollama import OllamaClient
from conductor_server.routers import conversations, health, tools
from conductor_server.tools import ToolRegistry

logger = logging.getLogger(__name__)


def build_store(settings: ConductorSettings) -> ConversationStore:
    """Create the process-wide ConversationStore from settings."""
    return ConversationStore(
        max_conversations=settings.max_conversations,
        max_age_seconds=settings.conversation_max_age_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    The Ollama client, the conversation store and the tool registry are created
    once at startup and stored in app.state for reuse across all requests.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: ConductorSettings = app.state.settings
    app.state.ollama_client = OllamaClient(host=settings.ollama_base_url)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_base_url}")

    app.state.conversation_store = build_store(settings)
    app.state.tool_registry = ToolRegistry(
        settings=settings,
        ollama_client=app.state.ollama_client,
        store=app.state.conversation_store,
    )

    # Check initial connectivity
    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    yield

    # Shutdown: Clean up resources
    if hasattr(app.state, "ollama_client"):
        await app.state.ollama_client.close()
        logger.info("Ollama client closed")


def create_app(settings: ConductorSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional ConductorSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    from conductor_server import __version__

    if settings is None:
        from conductor_server.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="conductor-server",
        description="Tool server for multi-step workflows on local Ollama models",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(tools.router)
    app.include_router(conversations.router)

    return app
