"""Unit tests for the workflow protocol shared by the step-based tools."""

import pytest

from conductor_server.conversations import ChatMessage, ConversationStore
from conductor_server.workflow import (
    DeliberationPhase,
    StepKind,
    WorkflowTrailer,
    classify_step,
    deliberation_phase,
    resolve_conversation,
)


@pytest.fixture
def store():
    return ConversationStore()


def test_resolve_without_id_creates_conversation(store):
    """Test that a call without a continuation id opens a new conversation."""
    resolved = resolve_conversation(store, None, {"tool": "debug"})

    assert resolved.is_new is True
    assert resolved.history == []
    assert store.get(resolved.conversation_id).metadata == {"tool": "debug"}


def test_resolve_known_id_reuses_conversation(store):
    """Test that a continuation id with history is reused."""
    conversation_id = store.create()
    store.add_message(conversation_id, ChatMessage(role="user", content="q"))
    store.add_message(conversation_id, ChatMessage(role="assistant", content="a"))

    resolved = resolve_conversation(store, conversation_id)

    assert resolved.is_new is False
    assert resolved.conversation_id == conversation_id
    assert [m.content for m in resolved.history] == ["q", "a"]
    assert store.size() == 1


def test_resolve_unknown_id_starts_fresh(store):
    """Test that an unknown continuation id silently starts a new conversation."""
    resolved = resolve_conversation(store, "does-not-exist")

    assert resolved.is_new is True
    assert resolved.conversation_id != "does-not-exist"
    assert store.get(resolved.conversation_id) is not None


def test_resolve_empty_conversation_starts_fresh(store):
    """Test that a conversation without messages is not reused."""
    empty_id = store.create()

    resolved = resolve_conversation(store, empty_id)

    assert resolved.is_new is True
    assert resolved.conversation_id != empty_id


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({"step_number": 1}, StepKind.INITIAL),
        (
            {"step_number": 1, "is_step_revision": True, "revises_step_number": 1},
            StepKind.INITIAL,
        ),
        ({"step_number": 3}, StepKind.CONTINUATION),
        (
            {"step_number": 3, "is_step_revision": True, "revises_step_number": 2},
            StepKind.REVISION,
        ),
        ({"step_number": 3, "is_step_revision": True}, StepKind.CONTINUATION),
        (
            {
                "step_number": 2,
                "is_branch_point": True,
                "branch_id": "alt-1",
                "branch_from_step": 1,
            },
            StepKind.BRANCH,
        ),
        (
            {"step_number": 2, "is_branch_point": True, "branch_id": "alt-1"},
            StepKind.CONTINUATION,
        ),
        (
            {
                "step_number": 4,
                "is_step_revision": True,
                "revises_step_number": 2,
                "is_branch_point": True,
                "branch_id": "alt-1",
                "branch_from_step": 1,
            },
            StepKind.REVISION,
        ),
    ],
)
def test_classify_step(kwargs, expected):
    """Test step classification, including its fixed priority order."""
    assert classify_step(**kwargs) is expected


def test_deliberation_phases():
    """Test that the phase follows the step number and the model index."""
    assert deliberation_phase(1, 0, 2) is DeliberationPhase.FRAMING
    assert deliberation_phase(2, 0, 2) is DeliberationPhase.CONSULTING
    assert deliberation_phase(3, 1, 2) is DeliberationPhase.CONSULTING
    assert deliberation_phase(4, 2, 2) is DeliberationPhase.SYNTHESIZING


def test_trailer_render():
    """Test the trailer layout."""
    trailer = WorkflowTrailer(
        title="Planning Session Info",
        step_number=2,
        total_steps=5,
        conversation_id="conv_1_abc",
        next_step_required=True,
        details=[("Branch", "alt-1 (from step 1)")],
    )

    assert trailer.render() == (
        "---\n"
        "**Planning Session Info**\n"
        "- Step: 2/5\n"
        "- Branch: alt-1 (from step 1)\n"
        "- Continuation ID: conv_1_abc\n"
        "- Next step required: Yes\n"
    )


def test_trailer_final_step():
    """Test that the final step reports no further step."""
    trailer = WorkflowTrailer(
        title="Debug Session Info",
        step_number=3,
        total_steps=3,
        conversation_id="conv_1_abc",
        next_step_required=False,
    )

    assert "- Next step required: No" in trailer.render()
