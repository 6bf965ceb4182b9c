"""Registry of the tools exposed to the host.

The registry instantiates every tool not listed in the disabled tools setting
and dispatches calls by tool name. Both transports (HTTP and MCP stdio) share
one registry per process.
"""

import logging
from typing import Any

from conductor_server.config import ConductorSettings
from conductor_server.conversations import ConversationStore
from conductor_server.models.tools import ToolDescriptor, ToolResponse
from conductor_server.ollama import OllamaClient
from conductor_server.tools.base import BaseTool, ConversationalTool, ToolContext
from conductor_server.tools.chat import ChatTool
from conductor_server.tools.codereview import CodeReviewTool
from conductor_server.tools.consensus import ConsensusTool
from conductor_server.tools.debug import DebugTool
from conductor_server.tools.listmodels import ListModelsTool
from conductor_server.tools.planner import PlannerTool
from conductor_server.tools.precommit import PrecommitTool
from conductor_server.tools.thinkdeep import ThinkDeepTool
from conductor_server.tools.version import VersionTool

logger = logging.getLogger(__name__)

ALL_TOOLS: tuple[type[BaseTool], ...] = (
    # Core tools
    ChatTool,
    ListModelsTool,
    VersionTool,
    # Workflow tools
    DebugTool,
    ThinkDeepTool,
    PlannerTool,
    ConsensusTool,
    # Specialized tools
    CodeReviewTool,
    PrecommitTool,
)


class UnknownToolError(LookupError):
    """Raised when a call names a tool that is not enabled."""

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class ToolRegistry:
    """The enabled tools of this process, looked up by name."""

    def __init__(
        self,
        settings: ConductorSettings,
        ollama_client: OllamaClient,
        store: ConversationStore,
    ):
        """Initialize the ToolRegistry.

        Args:
            settings: Application settings (disabled tools, default model)
            ollama_client: Client shared by all model-backed tools
            store: Conversation store shared by all model-backed tools
        """
        disabled = settings.disabled_tool_names
        enabled_classes = [tool for tool in ALL_TOOLS if tool.name not in disabled]

        self.context = ToolContext(
            settings=settings,
            ollama_client=ollama_client,
            store=store,
            enabled_tools=[tool.name for tool in enabled_classes],
        )
        self._tools: dict[str, BaseTool] = {
            tool.name: tool(self.context) for tool in enabled_classes
        }

        unknown = disabled - {tool.name for tool in ALL_TOOLS}
        if unknown:
            logger.warning(f"Ignoring unknown disabled tools: {', '.join(sorted(unknown))}")
        logger.info(f"Enabled tools: {', '.join(self._tools)}")
        if disabled - unknown:
            logger.info(f"Disabled tools: {', '.join(sorted(disabled - unknown))}")

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, tool_name: str) -> bool:
        return tool_name in self._tools

    def get(self, tool_name: str) -> BaseTool:
        """Get an enabled tool by name.

        Raises:
            UnknownToolError: If no enabled tool has this name
        """
        tool = self._tools.get(tool_name)
        if tool is None:
            raise UnknownToolError(tool_name)
        return tool

    def get_conversational(self, tool_name: str) -> ConversationalTool | None:
        """Get an enabled model-backed tool, or None if the tool is not one.

        Raises:
            UnknownToolError: If no enabled tool has this name
        """
        tool = self.get(tool_name)
        return tool if isinstance(tool, ConversationalTool) else None

    def list_tools(self) -> list[ToolDescriptor]:
        """Describe all enabled tools."""
        return [tool.descriptor() for tool in self._tools.values()]

    async def call(self, tool_name: str, arguments: dict[str, Any] | None) -> ToolResponse:
        """Call a tool by name.

        Raises:
            UnknownToolError: If no enabled tool has this name; the
                conversation store is left untouched
        """
        tool = self.get(tool_name)
        return await tool.run(arguments)
