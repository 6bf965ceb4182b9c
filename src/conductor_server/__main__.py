"""CLI entry point for conductor-server.

This module provides the command-line interface for starting the server.
It can be invoked as `conductor-server` (via the script entry point) or
`python -m conductor_server`. The default transport is MCP over stdio; with
`--transport http` the FastAPI app is served by uvicorn.
"""

import argparse
import asyncio
import logging
import sys

import uvicorn

from conductor_server import __version__, create_app
from conductor_server.config import ConductorSettings
from conductor_server.mcp_server import run_stdio

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conductor-server",
        description="Multi-step workflow tools for local Ollama models",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"conductor-server {__version__}",
    )

    parser.add_argument(
        "--transport",
        type=str,
        default=None,
        choices=["stdio", "http"],
        help="Transport to serve the tools on (default: stdio, can be set via CONDUCTOR_TRANSPORT)",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the HTTP server to (default: 127.0.0.1, can be set via CONDUCTOR_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the HTTP server to (default: 8000, can be set via CONDUCTOR_PORT)",
    )

    parser.add_argument(
        "--ollama-base-url",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via CONDUCTOR_OLLAMA_BASE_URL)",
    )

    parser.add_argument(
        "--default-model",
        type=str,
        default=None,
        help="Model used when a call names none (default: qwen2.5:latest, can be set via CONDUCTOR_DEFAULT_MODEL)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via CONDUCTOR_LOG_LEVEL)",
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development (uvicorn --reload, http transport only)",
    )
    return parser


def build_settings(args: argparse.Namespace) -> ConductorSettings:
    """Build settings, CLI args override environment variables."""
    settings_kwargs = {}
    if args.transport is not None:
        settings_kwargs["transport"] = args.transport
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.ollama_base_url is not None:
        settings_kwargs["ollama_base_url"] = args.ollama_base_url
    if args.default_model is not None:
        settings_kwargs["default_model"] = args.default_model
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    return ConductorSettings(**settings_kwargs)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the conductor-server CLI.

    Parses command-line arguments and serves the tools on the configured
    transport.

    Returns:
        int: Process exit code
    """
    args = build_parser().parse_args(argv)
    settings = build_settings(args)

    # stdout carries the MCP protocol, so logs always go to stderr
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if settings.transport == "stdio":
            asyncio.run(run_stdio(settings))
        else:
            app = create_app(settings=settings)
            uvicorn.run(
                app,
                host=settings.host,
                port=settings.port,
                log_level=settings.log_level.lower(),
                reload=args.reload,
            )
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
