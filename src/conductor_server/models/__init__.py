"""Pydantic models for tool inputs and API request and response schemas.

This package contains the input models validated by every tool, the tool
response envelope, and the schemas used by the HTTP endpoints.
"""

from conductor_server.models.tools import (
    ChatInput,
    CodeReviewInput,
    ConsensusInput,
    DebugInput,
    EmptyInput,
    PlannerInput,
    PrecommitInput,
    TextContent,
    ThinkDeepInput,
    ToolDescriptor,
    ToolListResponse,
    ToolResponse,
    WorkflowStepInput,
)

__all__ = [
    "ChatInput",
    "CodeReviewInput",
    "ConsensusInput",
    "DebugInput",
    "EmptyInput",
    "PlannerInput",
    "PrecommitInput",
    "TextContent",
    "ThinkDeepInput",
    "ToolDescriptor",
    "ToolListResponse",
    "ToolResponse",
    "WorkflowStepInput",
]
