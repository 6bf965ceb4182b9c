"""Multi-step workflow protocol shared by the step-based tools."""

from conductor_server.workflow.protocol import (
    DeliberationPhase,
    ResolvedConversation,
    StepKind,
    WorkflowTrailer,
    classify_step,
    deliberation_phase,
    resolve_conversation,
)

__all__ = [
    "DeliberationPhase",
    "ResolvedConversation",
    "StepKind",
    "WorkflowTrailer",
    "classify_step",
    "deliberation_phase",
    "resolve_conversation",
]
