"""Tools exposed to the orchestrating host.

This package contains the tool base classes, the individual tools and the
registry that dispatches calls to them by name.
"""

from conductor_server.tools.base import (
    BaseTool,
    ConversationalTool,
    PreparedCall,
    ToolContext,
    WorkflowTool,
)
from conductor_server.tools.registry import ALL_TOOLS, ToolRegistry, UnknownToolError

__all__ = [
    "ALL_TOOLS",
    "BaseTool",
    "ConversationalTool",
    "PreparedCall",
    "ToolContext",
    "ToolRegistry",
    "UnknownToolError",
    "WorkflowTool",
]
