"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of conductor-server.
        ollama_connected: Whether Ollama is reachable, None if no client exists.
        ollama_host: The Ollama host URL, None if no client exists.
        active_conversations: Number of conversations currently in memory.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of conductor-server")
    ollama_connected: bool | None = Field(
        default=None,
        description="Whether Ollama is connected",
    )
    ollama_host: str | None = Field(
        default=None,
        description="Ollama host URL",
    )
    active_conversations: int | None = Field(
        default=None,
        description="Number of conversations held in memory",
    )
