"""Configuration module for conductor-server using pydantic-settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConductorSettings(BaseSettings):
    """Main configuration settings for conductor-server.

    All settings can be overridden via environment variables with the CONDUCTOR_
    prefix. For example, CONDUCTOR_OLLAMA_BASE_URL will override the
    ollama_base_url setting.
    """

    # Transport
    transport: Literal["stdio", "http"] = "stdio"

    # HTTP server (only used with the http transport)
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_base_url: str = "http://localhost:11434"
    default_model: str = "qwen2.5:latest"

    # When enabled, tools consume the chat endpoint as a stream and assemble it
    stream_responses: bool = True

    # Tools (comma-separated names)
    disabled_tools: str = ""

    # Conversation memory
    max_conversations: int = Field(default=100, ge=1)
    conversation_max_age_hours: float = Field(default=24.0, gt=0)

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="CONDUCTOR_")

    @property
    def disabled_tool_names(self) -> frozenset[str]:
        """Get the set of disabled tool names parsed from disabled_tools."""
        return frozenset(
            name.strip() for name in self.disabled_tools.split(",") if name.strip()
        )

    @property
    def conversation_max_age_seconds(self) -> float:
        """Get the conversation retention window in seconds."""
        return self.conversation_max_age_hours * 60 * 60
