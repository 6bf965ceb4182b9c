"""Shared contract of the step-based tools.

Every step-based tool (debug, thinkdeep, planner, consensus, codereview,
precommit) uses this module to:
- resolve the continuation id of a call to a conversation
- classify the call as an initial, revision, branch or continuation step
- track the deliberation phase of the consensus tool
- render the status trailer appended to every response

Step counters are trusted as sent by the caller. Nothing here checks that
step_number increases or ever reaches total_steps.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from conductor_server.conversations import ChatMessage, ConversationStore

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    """How a workflow call relates to the steps taken before it."""

    INITIAL = "initial"
    REVISION = "revision"
    BRANCH = "branch"
    CONTINUATION = "continuation"


class DeliberationPhase(str, Enum):
    """Phase of a multi-model deliberation."""

    FRAMING = "framing"
    CONSULTING = "consulting"
    SYNTHESIZING = "synthesizing"


@dataclass
class ResolvedConversation:
    """The conversation a call will append to.

    Attributes:
        conversation_id: Id of the reused or newly created conversation
        history: Messages stored before this call, in order
        is_new: True if the conversation was created for this call
    """

    conversation_id: str
    history: list[ChatMessage] = field(default_factory=list)
    is_new: bool = True


def resolve_conversation(
    store: ConversationStore,
    continuation_id: str | None,
    metadata: dict[str, Any] | None = None,
) -> ResolvedConversation:
    """Locate the conversation for a call or open a new one.

    A continuation id is only reused when it resolves to a conversation with
    at least one message. Unknown, expired or empty conversations silently
    start a fresh conversation.

    Args:
        store: The conversation store
        continuation_id: Continuation id supplied by the caller, if any
        metadata: Metadata for the conversation if a new one is created

    Returns:
        ResolvedConversation: The conversation id and its prior history
    """
    if continuation_id:
        history = store.get_messages(continuation_id)
        if history:
            logger.debug(
                f"Continuing conversation {continuation_id} ({len(history)} messages)"
            )
            return ResolvedConversation(
                conversation_id=continuation_id,
                history=history,
                is_new=False,
            )
        logger.info(
            f"Continuation id {continuation_id} is unknown or empty, "
            "starting a new conversation"
        )

    conversation_id = store.create(metadata=metadata)
    return ResolvedConversation(conversation_id=conversation_id)


def classify_step(
    step_number: int,
    *,
    is_step_revision: bool = False,
    revises_step_number: int | None = None,
    is_branch_point: bool = False,
    branch_id: str | None = None,
    branch_from_step: int | None = None,
) -> StepKind:
    """Classify a workflow call.

    The order is fixed: step 1 is always the initial step, then a complete
    revision marker, then a complete branch marker, otherwise a continuation.
    Incomplete markers (a flag without its target) are ignored.
    """
    if step_number == 1:
        return StepKind.INITIAL
    if is_step_revision and revises_step_number:
        return StepKind.REVISION
    if is_branch_point and branch_id and branch_from_step:
        return StepKind.BRANCH
    return StepKind.CONTINUATION


def deliberation_phase(
    step_number: int, current_model_index: int, participant_count: int
) -> DeliberationPhase:
    """Determine the phase of a deliberation call.

    The caller owns current_model_index and is expected to increment it after
    each consultation. Once it reaches participant_count the call synthesizes.
    """
    if step_number == 1:
        return DeliberationPhase.FRAMING
    if current_model_index < participant_count:
        return DeliberationPhase.CONSULTING
    return DeliberationPhase.SYNTHESIZING


def yes_no(value: bool) -> str:
    return "Yes" if value else "No"


@dataclass
class WorkflowTrailer:
    """Status block appended to the reply of every step-based tool.

    Attributes:
        title: Heading naming the tool session (e.g., "Debug Session Info")
        step_number: Current step as sent by the caller
        total_steps: Estimated total steps as sent by the caller
        conversation_id: The resolved conversation id
        next_step_required: Whether the caller intends another step
        details: Tool-specific (label, value) lines shown after the step line
    """

    title: str
    step_number: int
    total_steps: int
    conversation_id: str
    next_step_required: bool
    details: list[tuple[str, str]] = field(default_factory=list)

    def render(self) -> str:
        """Render the trailer as markdown."""
        lines = [
            "---",
            f"**{self.title}**",
            f"- Step: {self.step_number}/{self.total_steps}",
        ]
        lines.extend(f"- {label}: {value}" for label, value in self.details)
        lines.append(f"- Continuation ID: {self.conversation_id}")
        lines.append(f"- Next step required: {yes_no(self.next_step_required)}")
        return "\n".join(lines) + "\n"
