"""
State machine describing the legal moves of a brainstorming dialogue.
"""

from wacky_pm.core.constants import DialogueState
from wacky_pm.core.exceptions import StateTransitionError
from wacky_pm.core.logging import get_logger

logger = get_logger(__name__)


class StateMachine:
    """
    Table-driven state machine.
    """

    def __init__(
        self,
        states: list[str],
        initial_state: str,
        transitions: dict[str, list[str]],
    ) -> None:
        """
        Initialize the state machine.

        Args:
            states: List of valid states
            initial_state: Starting state
            transitions: Valid transitions {from_state: [to_states]}
        """
        self.states = set(states)
        self.initial_state = initial_state
        self.transitions = transitions

        if initial_state not in self.states:
            raise ValueError(f"Initial state '{initial_state}' not in states")
        for from_state, targets in transitions.items():
            unknown = {from_state, *targets} - self.states
            if unknown:
                raise ValueError(f"Unknown states in transitions: {sorted(unknown)}")

    def can_transition(self, from_state: str, to_state: str) -> bool:
        """Check if transition is valid."""
        if from_state not in self.transitions:
            return False
        return to_state in self.transitions[from_state]

    def get_next_states(self, current_state: str) -> list[str]:
        """Get valid next states from current state."""
        return self.transitions.get(current_state, [])

    def ensure_transition(self, from_state: str, to_state: str) -> None:
        """Raise StateTransitionError unless the move is allowed."""
        if not self.can_transition(from_state, to_state):
            logger.error("Rejected dialogue transition", from_state=from_state, to_state=to_state)
            raise StateTransitionError(from_state, to_state)


DIALOGUE_STATES = [state.value for state in DialogueState]

# Idle and brainstorming may stay put: an idle user gets help, a brainstorming
# user gets another idea or an issue link.
DIALOGUE_TRANSITIONS = {
    DialogueState.IDLE.value: [
        DialogueState.IDLE.value,
        DialogueState.BRAINSTORMING.value,
    ],
    DialogueState.BRAINSTORMING.value: [
        DialogueState.BRAINSTORMING.value,
        DialogueState.AWAITING_CONFIRM.value,
    ],
    DialogueState.AWAITING_CONFIRM.value: [
        DialogueState.IDLE.value,
    ],
}


def create_dialogue_state_machine() -> StateMachine:
    """Create state machine for the brainstorming dialogue."""
    return StateMachine(
        states=DIALOGUE_STATES,
        initial_state=DialogueState.IDLE.value,
        transitions=DIALOGUE_TRANSITIONS,
    )
