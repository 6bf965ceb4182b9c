"""Tool reporting the server version and configuration."""

from conductor_server.tools.base import BaseTool

CATEGORY_TITLES = {
    "core": "Core Tools",
    "workflow": "Workflow Tools",
    "specialized": "Specialized Tools",
}


class VersionTool(BaseTool):
    name = "version"
    description = (
        "Get server version, configuration details, and list of available tools."
    )

    async def execute(self, params) -> str:
        from conductor_server import __version__
        from conductor_server.tools.registry import ALL_TOOLS

        settings = self.settings
        connected = await self.ollama_client.check_connection()

        output = "# Conductor Server\n\n"
        output += f"**Version**: {__version__}\n\n"
        output += "## Configuration\n\n"
        output += f"- **Ollama URL**: {settings.ollama_base_url}\n"
        output += (
            f"- **Ollama Status**: {'✓ Connected' if connected else '✗ Not available'}\n"
        )
        output += f"- **Default Model**: {settings.default_model}\n"
        output += f"- **Max Conversations**: {settings.max_conversations}\n"
        output += f"- **Active Conversations**: {self.store.size()}\n"
        if settings.disabled_tool_names:
            output += (
                f"- **Disabled Tools**: {', '.join(sorted(settings.disabled_tool_names))}\n"
            )

        output += "\n## Available Tools\n"
        for category, title in CATEGORY_TITLES.items():
            names = [
                tool.name
                for tool in ALL_TOOLS
                if tool.category == category and tool.name in self.context.enabled_tools
            ]
            if names:
                output += f"\n### {title}\n"
                output += "".join(f"- **{name}**\n" for name in names)

        output += "\n## Features\n\n"
        output += (
            "- **Conversation Continuity**: Use `continuation_id` to maintain "
            "context across tool calls\n"
        )
        output += "- **Thinking Modes**: minimal, low, medium, high, max\n"
        output += (
            "- **Multi-Step Workflows**: Debug, plan, and analyze with iterative steps\n"
        )
        output += (
            "- **Multi-Model Consensus**: Consult multiple models for complex decisions\n"
        )
        return output
