"""conductor-server: multi-step workflow tools for local Ollama models.

This package exposes chat, debugging, deep-thinking, planning, consensus and
review tools to an orchestrating host over MCP stdio or HTTP, and keeps the
conversation behind each multi-step workflow in memory.
"""

from conductor_server.app import create_app

__version__ = "0.1.0"

__all__ = ["create_app", "__version__"]
