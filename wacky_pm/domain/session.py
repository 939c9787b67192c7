"""
Brainstorming session domain model.

A user with no stored session is idle. An open dialogue is one of two
variants, so a session that waits for a PRD confirmation always has an idea
to confirm.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from wacky_pm.core.constants import DialogueState


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConfirmationSnapshot(BaseModel):
    """Session fields captured when a PRD confirmation is requested."""

    owner_id: str = Field(..., min_length=1)
    feature_idea: str = Field(..., min_length=1)
    suggestion: Optional[str] = None

    def to_metadata(self) -> dict[str, str]:
        """Metadata attached to the outgoing confirmation event."""
        return {
            "user": self.owner_id,
            "featureIdea": self.feature_idea,
            "suggestion": self.suggestion or "",
        }

    @classmethod
    def from_metadata(cls, metadata: dict[str, object]) -> "ConfirmationSnapshot":
        suggestion = metadata.get("suggestion") or None
        return cls(
            owner_id=str(metadata.get("user", "")),
            feature_idea=str(metadata.get("featureIdea", "")),
            suggestion=str(suggestion) if suggestion else None,
        )


class _OpenSession(BaseModel):
    owner_id: str = Field(..., min_length=1, description="GitHub login owning the dialogue")
    current_idea: str = Field(..., min_length=1, description="Latest generated idea")
    turn_count: int = Field(default=1, ge=1, description="Idea-producing turns so far")
    pending_suggestion: Optional[str] = Field(
        default=None, description="User suggestion carried into the next idea"
    )

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def snapshot(self) -> ConfirmationSnapshot:
        return ConfirmationSnapshot(
            owner_id=self.owner_id,
            feature_idea=self.current_idea,
            suggestion=self.pending_suggestion,
        )


class BrainstormingSession(_OpenSession):
    """Open dialogue accepting new ideas and suggestions."""

    state: Literal[DialogueState.BRAINSTORMING] = DialogueState.BRAINSTORMING

    def with_idea(self, idea: str, suggestion: Optional[str]) -> "BrainstormingSession":
        """Return the session after another idea-producing turn."""
        return self.model_copy(
            update={
                "current_idea": idea,
                "pending_suggestion": suggestion,
                "turn_count": self.turn_count + 1,
                "updated_at": utcnow(),
            }
        )

    def await_confirmation(self, confirmation_id: str) -> "AwaitingConfirmSession":
        return AwaitingConfirmSession(
            **self.model_dump(exclude={"state", "updated_at"}),
            confirmation_id=confirmation_id,
        )


class AwaitingConfirmSession(_OpenSession):
    """Open dialogue frozen until the user answers the PRD confirmation."""

    state: Literal[DialogueState.AWAITING_CONFIRM] = DialogueState.AWAITING_CONFIRM
    confirmation_id: str = Field(..., min_length=1)


Session = Annotated[
    Union[BrainstormingSession, AwaitingConfirmSession],
    Field(discriminator="state"),
]


def state_of(session: Optional[Session]) -> DialogueState:
    """Dialogue state for a stored session, or IDLE when there is none."""
    if session is None:
        return DialogueState.IDLE
    return session.state
