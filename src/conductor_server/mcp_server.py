"""MCP stdio transport.

The host launches the server as a subprocess and speaks MCP over stdin and
stdout. Every tool of the registry is published via tools/list; tools/call
dispatches to the registry and returns the text of the tool response. Tool
failures are raised so the SDK reports them as error results.
"""

import logging
from typing import Any

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from conductor_server.config import ConductorSettings
from conductor_server.ollama import OllamaClient
from conductor_server.tools import ToolRegistry

logger = logging.getLogger(__name__)


class ToolExecutionError(Exception):
    """A tool call that produced an error response."""


def create_mcp_server(registry: ToolRegistry) -> Server:
    """Create an MCP server exposing the tools of a registry.

    Args:
        registry: The enabled tools

    Returns:
        Server: Low-level MCP server with the tools handlers registered
    """
    from conductor_server import __version__

    server = Server("conductor-server", version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=descriptor.name,
                description=descriptor.description,
                inputSchema=descriptor.input_schema,
            )
            for descriptor in registry.list_tools()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        response = await registry.call(name, arguments)
        if response.is_error:
            raise ToolExecutionError(response.joined_text)
        return [
            types.TextContent(type="text", text=content.text)
            for content in response.content
        ]

    return server


async def run_stdio(settings: ConductorSettings) -> None:
    """Serve the tools over MCP stdio until the host closes the stream."""
    from conductor_server.app import build_store

    ollama_client = OllamaClient(host=settings.ollama_base_url)
    registry = ToolRegistry(
        settings=settings,
        ollama_client=ollama_client,
        store=build_store(settings),
    )
    server = create_mcp_server(registry)

    if await ollama_client.check_connection():
        logger.info(f"Connected to Ollama at {settings.ollama_base_url}")
    else:
        logger.warning(
            f"Could not connect to Ollama at {settings.ollama_base_url} "
            "- check if server is running"
        )

    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Conductor MCP server running on stdio")
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )
    finally:
        await ollama_client.close()
        logger.info("Ollama client closed")
