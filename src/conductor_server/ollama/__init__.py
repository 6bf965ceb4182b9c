"""Ollama client wrapper and integration layer.

This package provides the async client used by every model-backed tool to
reach the local Ollama inference server.
"""

from conductor_server.ollama.client import OllamaClient
from conductor_server.ollama.types import ModelInfo, OllamaBackendError, build_options

__all__ = ["ModelInfo", "OllamaBackendError", "OllamaClient", "build_options"]
