"""Tool listing the models installed in Ollama."""

from datetime import datetime

from conductor_server.ollama import ModelInfo, OllamaBackendError
from conductor_server.tools.base import BaseTool


def _format_date(value: str | None) -> str:
    if not value:
        return "unknown"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return value


def format_model(model: ModelInfo) -> str:
    return (
        f"## {model.name}\n"
        f"- **Family**: {model.family}\n"
        f"- **Parameters**: {model.parameter_size}\n"
        f"- **Size**: {model.size_gb:.2f} GB\n"
        f"- **Last Modified**: {_format_date(model.modified_at)}\n"
    )


class ListModelsTool(BaseTool):
    name = "listmodels"
    description = "Shows available Ollama models, their names, and capabilities."

    async def execute(self, params) -> str:
        try:
            models = await self.ollama_client.list_models()
        except OllamaBackendError as e:
            raise OllamaBackendError(
                f"{e}. Make sure Ollama is running at {self.ollama_client.host}",
                status_code=e.status_code,
            ) from e

        if not models:
            return (
                "No models found. Make sure Ollama is running and has models "
                "installed.\n\nTo install a model, run: `ollama pull <model-name>`"
            )

        output = "# Available Ollama Models\n\n"
        output += f"Found {len(models)} model(s):\n\n"
        for model in sorted(models, key=lambda m: m.name):
            output += format_model(model) + "\n"
        output += "\n---\nUse any model name in the `model` parameter for other tools."
        return output
