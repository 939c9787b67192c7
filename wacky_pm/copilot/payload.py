"""
Inbound Copilot agent request payload.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wacky_pm.core.constants import ConfirmationState
from wacky_pm.core.exceptions import ParseFailureError


class CopilotConfirmation(BaseModel):
    """A user's answer to a confirmation dialog, as reported by Copilot."""

    model_config = ConfigDict(extra="allow")

    state: str
    confirmation: dict[str, Any] = Field(default_factory=dict)


class CopilotMessage(BaseModel):
    """A message of the Copilot conversation."""

    model_config = ConfigDict(extra="allow")

    role: str
    content: Optional[str] = ""
    copilot_confirmations: Optional[list[CopilotConfirmation]] = None


class CopilotPayload(BaseModel):
    """Body of a Copilot agent request."""

    model_config = ConfigDict(extra="allow")

    copilot_thread_id: Optional[str] = None
    messages: list[CopilotMessage] = Field(default_factory=list)

    @classmethod
    def parse(cls, body: bytes | str) -> "CopilotPayload":
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            raise ParseFailureError(
                "Request body is not a Copilot agent payload.",
                expected='{"messages": [{"role": "user", "content": "..."}]}',
            ) from e

    def user_message(self) -> str:
        """Content of the latest user message."""
        for message in reversed(self.messages):
            if message.role == "user":
                return message.content or ""
        return ""

    def confirmation(self) -> Optional["ConfirmationResponse"]:
        """Confirmation answer carried by the latest message, if any."""
        if not self.messages:
            return None
        confirmations = self.messages[-1].copilot_confirmations
        if not confirmations:
            return None
        return ConfirmationResponse.from_copilot(confirmations[0])


class ConfirmationResponse(BaseModel):
    """Parsed confirmation answer: which dialog, which answer, its metadata."""

    id: str
    state: ConfirmationState
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        return self.state == ConfirmationState.ACCEPTED

    @classmethod
    def from_copilot(cls, confirmation: CopilotConfirmation) -> "ConfirmationResponse":
        metadata = dict(confirmation.confirmation)
        confirmation_id = metadata.pop("id", None)
        nested = metadata.pop("metadata", None)
        if isinstance(nested, dict):
            metadata.update(nested)
        try:
            state = ConfirmationState(confirmation.state)
        except ValueError:
            state = None
        if not confirmation_id or state is None:
            raise ParseFailureError(
                "Could not understand the confirmation answer.",
                expected="a confirmation with an id and a state of 'accepted' or 'dismissed'",
            )
        return cls(id=str(confirmation_id), state=state, metadata=metadata)
