"""Pydantic models for tool inputs and the tool response envelope.

Each tool validates its arguments against one of the input models below
before touching the conversation store or the Ollama backend. The JSON schema
of these models is what the tool listing publishes to the host.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ThinkingMode = Literal["minimal", "low", "medium", "high", "max"]

ConfidenceLevel = Literal[
    "exploring",
    "low",
    "medium",
    "high",
    "very_high",
    "almost_certain",
    "certain",
]

Severity = Literal["critical", "high", "medium", "low"]

Stance = Literal["for", "against", "neutral"]


# --- Response envelope ---


class TextContent(BaseModel):
    """A text block of a tool response."""

    type: Literal["text"] = "text"
    text: str = Field(..., description="Text content")


class ToolResponse(BaseModel):
    """Envelope returned by every tool call.

    Serialized with the host protocol's field names:
    {"content": [{"type": "text", "text": "..."}], "isError": false}
    """

    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "ToolResponse":
        """Build a response holding a single text block."""
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @property
    def joined_text(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(block.text for block in self.content)


class ToolDescriptor(BaseModel):
    """Description of an enabled tool as published to the host."""

    name: str = Field(..., description="Tool name")
    description: str = Field(..., description="What the tool does")
    input_schema: dict[str, Any] = Field(
        ..., alias="inputSchema", description="JSON schema of the tool input"
    )

    model_config = ConfigDict(populate_by_name=True)


class ToolListResponse(BaseModel):
    """Response model for listing the enabled tools."""

    tools: list[ToolDescriptor] = Field(..., description="Enabled tools")


# --- Simple tools ---


class ChatInput(BaseModel):
    """Input of the chat tool."""

    prompt: str = Field(
        ..., description="Your question or idea for collaborative thinking"
    )
    files: list[str] = Field(
        default_factory=list, description="Optional file paths for context"
    )
    images: list[str] = Field(
        default_factory=list, description="Optional image paths for visual context"
    )
    model: str | None = Field(
        default=None, description="Model to use (defaults to the server default)"
    )
    temperature: float | None = Field(
        default=None, ge=0, le=1, description="0 = deterministic, 1 = creative"
    )
    thinking_mode: ThinkingMode | None = Field(
        default=None, description="Reasoning depth"
    )
    continuation_id: str | None = Field(
        default=None,
        description="Thread continuation ID for multi-turn conversations",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"prompt": "Is SQLite a good fit for a job queue?"},
                {"prompt": "And with WAL enabled?", "continuation_id": "conv_..."},
            ]
        }
    )


class EmptyInput(BaseModel):
    """Input of tools that take no arguments (listmodels, version)."""


# --- Workflow tools ---


class WorkflowStepInput(BaseModel):
    """Fields shared by every step-based tool."""

    step: str = Field(..., description="Content of the current step")
    step_number: int = Field(..., ge=1, description="Current step number")
    total_steps: int = Field(..., ge=1, description="Estimated total steps")
    next_step_required: bool = Field(
        ..., description="Whether another step is needed"
    )
    findings: str = Field(..., description="Discoveries and evidence from this step")
    model: str | None = Field(
        default=None, description="Model to use (defaults to the server default)"
    )
    continuation_id: str | None = Field(
        default=None,
        description="Thread continuation ID for multi-turn conversations",
    )


class DebugInput(WorkflowStepInput):
    """Input of the debug tool."""

    files_checked: list[str] = Field(default_factory=list, description="Files examined")
    relevant_files: list[str] = Field(
        default_factory=list, description="Files relevant to the issue"
    )
    relevant_context: list[str] = Field(
        default_factory=list, description="Methods/functions involved"
    )
    hypothesis: str | None = Field(
        default=None, description="Current theory about the issue"
    )
    confidence: ConfidenceLevel | None = Field(
        default=None, description="Confidence in hypothesis"
    )
    backtrack_from_step: int | None = Field(
        default=None, ge=1, description="Step to backtrack from if needed"
    )
    images: list[str] = Field(default_factory=list, description="Screenshots or diagrams")
    thinking_mode: ThinkingMode | None = None


class ThinkDeepInput(WorkflowStepInput):
    """Input of the thinkdeep tool."""

    thinking_mode: ThinkingMode = Field(default="high", description="Reasoning depth")


class PlannerInput(WorkflowStepInput):
    """Input of the planner tool."""

    findings: str = Field(default="", description="Notes gathered for this step")
    is_step_revision: bool = Field(
        default=False, description="True when revising a previous step"
    )
    revises_step_number: int | None = Field(
        default=None, ge=1, description="Step being revised"
    )
    is_branch_point: bool = Field(
        default=False, description="True when creating a branch"
    )
    branch_id: str | None = Field(default=None, description="Branch identifier")
    branch_from_step: int | None = Field(
        default=None, ge=1, description="Step this branch starts from"
    )


class ParticipantModel(BaseModel):
    """A model consulted during a consensus deliberation."""

    model: str = Field(..., description="Model identifier")
    stance: Stance | None = Field(default=None, description="Argumentative stance")
    stance_prompt: str | None = Field(
        default=None, description="Custom framing replacing the stance default"
    )


class ModelResponseSummary(BaseModel):
    """Summary of one participant's answer, kept by the caller."""

    model: str = "unknown"
    stance: str = "neutral"
    summary: str = ""


class ConsensusInput(WorkflowStepInput):
    """Input of the consensus tool."""

    models: list[ParticipantModel] = Field(
        ..., min_length=2, description="Models to consult with their stances"
    )
    current_model_index: int = Field(
        default=0, ge=0, description="Index of next model to consult"
    )
    model_responses: list[ModelResponseSummary] = Field(
        default_factory=list, description="Summaries of the perspectives gathered"
    )
    relevant_files: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)


class Issue(BaseModel):
    """An issue found during a review or validation."""

    severity: Severity
    description: str
    file: str | None = None
    line: int | None = None


class CodeReviewInput(WorkflowStepInput):
    """Input of the codereview tool."""

    files_checked: list[str] = Field(default_factory=list, description="Files examined")
    relevant_files: list[str] = Field(
        default_factory=list, description="Files tied to key findings"
    )
    issues_found: list[Issue] = Field(
        default_factory=list, description="Issues identified"
    )
    review_type: Literal["full", "security", "performance", "quick"] = "full"


class PrecommitInput(WorkflowStepInput):
    """Input of the precommit tool."""

    path: str | None = Field(default=None, description="Repository path")
    relevant_files: list[str] = Field(
        default_factory=list, description="Files involved in changes"
    )
    issues_found: list[Issue] = Field(
        default_factory=list, description="Issues identified"
    )
    include_staged: bool = Field(default=True, description="Include staged changes")
    include_unstaged: bool = Field(
        default=True, description="Include unstaged changes"
    )
