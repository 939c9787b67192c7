"""
Dialogue orchestration.
"""

from wacky_pm.orchestration.state_machine import (
    DIALOGUE_STATES,
    DIALOGUE_TRANSITIONS,
    StateMachine,
    create_dialogue_state_machine,
)

__all__ = [
    "StateMachine",
    "DIALOGUE_STATES",
    "DIALOGUE_TRANSITIONS",
    "create_dialogue_state_machine",
]
