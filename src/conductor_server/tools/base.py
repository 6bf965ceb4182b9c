"""Base classes shared by all tools.

This module provides:
- BaseTool: argument validation and conversion of failures into error responses
- ConversationalTool: conversation resolution, the backend call and the
  transcript update common to every model-backed tool
- WorkflowTool: the step-based tools, which append a status trailer
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from conductor_server.config import ConductorSettings
from conductor_server.conversations import ChatMessage, ConversationStore
from conductor_server.models.tools import (
    EmptyInput,
    Issue,
    ToolDescriptor,
    ToolResponse,
)
from conductor_server.ollama import OllamaBackendError, OllamaClient, build_options
from conductor_server.workflow import ResolvedConversation, WorkflowTrailer, resolve_conversation

logger = logging.getLogger(__name__)


@dataclass
class ToolContext:
    """Process-wide collaborators handed to every tool.

    Attributes:
        settings: Application settings
        ollama_client: Client for the Ollama backend
        store: The conversation store
        enabled_tools: Names of the tools enabled in this process
    """

    settings: ConductorSettings
    ollama_client: OllamaClient
    store: ConversationStore
    enabled_tools: list[str] = field(default_factory=list)


def format_validation_error(error: ValidationError) -> str:
    """Summarize a pydantic ValidationError, naming each failing field."""
    problems = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "arguments"
        problems.append(f"{location}: {detail['msg']}")
    return "; ".join(problems)


def bullet_list(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def format_issues(issues: list[Issue], include_line: bool = True) -> str:
    """Render issues grouped by severity, most severe first.

    Returns:
        Markdown section, or an empty string if there are no issues
    """
    if not issues:
        return ""

    text = "### Issues Identified\n"
    for severity in ("critical", "high", "medium", "low"):
        group = [issue for issue in issues if issue.severity == severity]
        if not group:
            continue
        text += f"\n**{severity.upper()}** ({len(group)}):\n"
        for issue in group:
            location = ""
            if issue.file:
                line = f":{issue.line}" if include_line and issue.line else ""
                location = f" [{issue.file}{line}]"
            text += f"- {issue.description}{location}\n"
    return text + "\n"


class BaseTool(ABC):
    """A callable tool exposed to the host.

    Subclasses declare name, description and input_model and implement
    execute(). run() is the entry point used by both transports.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    category: ClassVar[str] = "core"
    input_model: ClassVar[type[BaseModel]] = EmptyInput

    def __init__(self, context: ToolContext):
        self.context = context

    @property
    def settings(self) -> ConductorSettings:
        return self.context.settings

    @property
    def ollama_client(self) -> OllamaClient:
        return self.context.ollama_client

    @property
    def store(self) -> ConversationStore:
        return self.context.store

    def descriptor(self) -> ToolDescriptor:
        """Describe the tool with the JSON schema of its input model."""
        return ToolDescriptor(
            name=self.name,
            description=self.description,
            input_schema=self.input_model.model_json_schema(),
        )

    async def run(self, arguments: dict[str, Any] | None) -> ToolResponse:
        """Validate the arguments and execute the tool.

        Invalid arguments are rejected before anything else happens. Backend
        failures are returned as error responses; any other exception
        propagates.

        Args:
            arguments: Raw JSON arguments sent by the host

        Returns:
            ToolResponse: The response envelope
        """
        try:
            params = self.input_model.model_validate(arguments or {})
        except ValidationError as e:
            message = format_validation_error(e)
            logger.warning(f"Invalid arguments for tool {self.name}: {message}")
            return ToolResponse.text(
                f"Invalid arguments for tool {self.name}: {message}", is_error=True
            )

        logger.info(f"Executing tool {self.name}")
        try:
            text = await self.execute(params)
        except OllamaBackendError as e:
            logger.error(f"Tool {self.name} failed: {e}")
            return ToolResponse.text(
                f"Error executing tool {self.name}: {e}", is_error=True
            )

        return ToolResponse.text(text)

    @abstractmethod
    async def execute(self, params: Any) -> str:
        """Execute the tool with validated parameters and return its text."""


@dataclass
class PreparedCall:
    """Everything needed for the single backend call of a tool invocation.

    Attributes:
        conversation: The resolved conversation
        model: Model the request targets
        outbound: Messages this call adds to the conversation (an optional
                  system message followed by the user message)
        options: Ollama request options
    """

    conversation: ResolvedConversation
    model: str
    outbound: list[ChatMessage]
    options: dict[str, Any] | None = None

    @property
    def conversation_id(self) -> str:
        return self.conversation.conversation_id

    def ollama_messages(self) -> list[dict[str, str]]:
        """Full message list sent to Ollama: stored history, then outbound."""
        return [
            message.to_ollama()
            for message in [*self.conversation.history, *self.outbound]
        ]


class ConversationalTool(BaseTool):
    """A tool that talks to the model inside a resumable conversation.

    One invocation resolves a conversation, sends the stored history plus one
    new user message to Ollama, and appends the user and assistant messages
    to the conversation once the full reply is available.
    """

    def select_model(self, params: Any) -> str:
        """Model used for this call; the caller's choice or the default."""
        return params.model or self.settings.default_model

    def conversation_metadata(self, params: Any) -> dict[str, Any]:
        """Metadata stored on a conversation created by this call."""
        return {"tool": self.name, "model": self.select_model(params)}

    def system_prompt(self, params: Any) -> str | None:
        """System message opening a new conversation, if any."""
        return None

    def temperature(self, params: Any) -> float | None:
        return None

    @abstractmethod
    def build_prompt(self, params: Any, conversation: ResolvedConversation) -> str:
        """Compose the user message of this call."""

    @abstractmethod
    def render_response(
        self, params: Any, reply: str, conversation: ResolvedConversation
    ) -> str:
        """Format the text returned to the host."""

    def prepare(self, params: Any) -> PreparedCall:
        """Resolve the conversation and compose the outbound messages."""
        conversation = resolve_conversation(
            self.store, params.continuation_id, self.conversation_metadata(params)
        )

        outbound: list[ChatMessage] = []
        if not conversation.history:
            system_prompt = self.system_prompt(params)
            if system_prompt:
                outbound.append(ChatMessage(role="system", content=system_prompt))
        outbound.append(
            ChatMessage(role="user", content=self.build_prompt(params, conversation))
        )

        return PreparedCall(
            conversation=conversation,
            model=self.select_model(params),
            outbound=outbound,
            options=build_options(temperature=self.temperature(params)),
        )

    async def complete(self, call: PreparedCall) -> str:
        """Run the backend call and return the assembled reply text.

        With stream_responses enabled the reply is streamed and concatenated
        chunk by chunk; otherwise a single non-streaming request is made.
        """
        messages = call.ollama_messages()
        logger.info(
            f"Sending {len(messages)} messages to Ollama with model {call.model}"
        )

        if not self.settings.stream_responses:
            response = await self.ollama_client.chat(
                model=call.model, messages=messages, options=call.options
            )
            return response["message"].get("content") or ""

        content_parts = []
        async for chunk in self.ollama_client.chat_stream(
            model=call.model, messages=messages, options=call.options
        ):
            content = chunk["message"].get("content")
            if content:
                content_parts.append(content)
        return "".join(content_parts)

    def finalize(self, params: Any, call: PreparedCall, reply: str) -> str:
        """Record the exchange in the conversation and format the result."""
        for message in call.outbound:
            self.store.add_message(call.conversation_id, message)
        self.store.add_message(
            call.conversation_id, ChatMessage(role="assistant", content=reply)
        )
        self.store.update_metadata(call.conversation_id, {"last_model": call.model})

        logger.info(
            f"Recorded {len(call.outbound) + 1} messages in conversation "
            f"{call.conversation_id} ({len(reply)} characters of reply)"
        )
        return self.render_response(params, reply, call.conversation)

    async def execute(self, params: Any) -> str:
        call = self.prepare(params)
        reply = await self.complete(call)
        return self.finalize(params, call, reply)


class WorkflowTool(ConversationalTool):
    """A step-based tool following the workflow protocol.

    The reply of the model is followed by a WorkflowTrailer reporting the
    step, the conversation id and whether another step is expected.
    """

    category: ClassVar[str] = "workflow"
    trailer_title: ClassVar[str]

    def trailer_details(self, params: Any) -> list[tuple[str, str]]:
        """Tool-specific trailer lines shown after the step line."""
        return []

    def render_response(
        self, params: Any, reply: str, conversation: ResolvedConversation
    ) -> str:
        trailer = WorkflowTrailer(
            title=self.trailer_title,
            step_number=params.step_number,
            total_steps=params.total_steps,
            conversation_id=conversation.conversation_id,
            next_step_required=params.next_step_required,
            details=self.trailer_details(params),
        )
        return f"{reply}\n\n{trailer.render()}"
