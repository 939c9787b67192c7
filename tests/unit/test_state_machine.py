"""
Unit tests for the dialogue state machine.
"""

import pytest

from wacky_pm.core.exceptions import StateTransitionError
from wacky_pm.orchestration.state_machine import StateMachine, create_dialogue_state_machine


@pytest.mark.parametrize(
    "from_state, to_state",
    [
        ("idle", "idle"),
        ("idle", "brainstorming"),
        ("brainstorming", "brainstorming"),
        ("brainstorming", "awaiting_confirm"),
        ("awaiting_confirm", "idle"),
    ],
)
def test_allowed_transitions(from_state: str, to_state: str) -> None:
    machine = create_dialogue_state_machine()

    assert machine.can_transition(from_state, to_state)
    machine.ensure_transition(from_state, to_state)


@pytest.mark.parametrize(
    "from_state, to_state",
    [
        ("idle", "awaiting_confirm"),
        ("brainstorming", "idle"),
        ("awaiting_confirm", "brainstorming"),
        ("awaiting_confirm", "awaiting_confirm"),
    ],
)
def test_rejected_transitions(from_state: str, to_state: str) -> None:
    machine = create_dialogue_state_machine()

    with pytest.raises(StateTransitionError) as exc_info:
        machine.ensure_transition(from_state, to_state)

    assert exc_info.value.code == "INVALID_TRANSITION"


def test_unknown_states_are_rejected_at_construction() -> None:
    with pytest.raises(ValueError):
        StateMachine(states=["a"], initial_state="b", transitions={})
    with pytest.raises(ValueError):
        StateMachine(states=["a"], initial_state="a", transitions={"a": ["c"]})


def test_next_states() -> None:
    machine = create_dialogue_state_machine()

    assert machine.initial_state == "idle"
    assert machine.get_next_states("awaiting_confirm") == ["idle"]
    assert machine.get_next_states("unknown") == []
