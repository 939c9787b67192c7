"""
Outbound events of a Copilot agent reply and their server-sent-event framing.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from wacky_pm.core.constants import EventType
from wacky_pm.core.exceptions import WackyPMError
from wacky_pm.core.logging import get_logger

logger = get_logger(__name__)


def _frame(data: Any, event: Optional[str] = None) -> str:
    payload = json.dumps(data, ensure_ascii=False)
    if event:
        return f"event: {event}\ndata: {payload}\n\n"
    return f"data: {payload}\n\n"


@dataclass
class StreamEvent:
    """One event of a reply, in the order it must reach the client."""

    event_type: EventType
    content: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_terminal(self) -> bool:
        return self.event_type in (EventType.DONE, EventType.ERROR)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging and tests."""
        return {
            "type": self.event_type.value,
            "content": self.content,
            "metadata": self.metadata,
        }

    def to_sse(self) -> str:
        """Serialize as the SSE frame(s) the Copilot platform expects."""
        if self.event_type == EventType.ACK:
            return _frame({"choices": [{"delta": {"content": "", "role": "assistant"}}]})
        if self.event_type == EventType.TEXT:
            return _frame(
                {"choices": [{"index": 0, "delta": {"content": self.content, "role": "assistant"}}]}
            )
        if self.event_type == EventType.CONFIRMATION:
            return _frame(
                {
                    "type": "action",
                    "title": self.metadata["title"],
                    "message": self.content,
                    "confirmation": {
                        "id": self.metadata["id"],
                        **self.metadata.get("snapshot", {}),
                    },
                },
                event="copilot_confirmation",
            )
        if self.event_type == EventType.ERROR:
            return _frame(
                [
                    {
                        "type": "agent",
                        "code": self.metadata["code"],
                        "message": self.content,
                        "identifier": self.metadata["identifier"],
                    }
                ],
                event="copilot_errors",
            )
        return (
            _frame({"choices": [{"finish_reason": "stop", "delta": {"content": None}}]})
            + "data: [DONE]\n\n"
        )


def ack_event() -> StreamEvent:
    return StreamEvent(EventType.ACK)


def text_event(content: str) -> StreamEvent:
    return StreamEvent(EventType.TEXT, content=content)


def confirmation_event(
    confirmation_id: str,
    title: str,
    message: str,
    snapshot: dict[str, Any],
) -> StreamEvent:
    return StreamEvent(
        EventType.CONFIRMATION,
        content=message,
        metadata={"id": confirmation_id, "title": title, "snapshot": snapshot},
    )


def error_event(error: WackyPMError) -> StreamEvent:
    return StreamEvent(
        EventType.ERROR,
        content=error.message,
        metadata={"code": error.code, "identifier": error.identifier},
    )


def done_event() -> StreamEvent:
    return StreamEvent(EventType.DONE)


class EventStream:
    """
    Ordered event sink for one reply.

    Once a done or error event went out nothing else may follow.
    """

    def __init__(self) -> None:
        self._events: list[StreamEvent] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, event: StreamEvent) -> StreamEvent:
        if self._closed:
            raise RuntimeError(f"Cannot emit {event.event_type.value} after the reply ended")
        self._events.append(event)
        if event.is_terminal:
            self._closed = True
        return event

    def extend(self, events: Iterable[StreamEvent]) -> None:
        for event in events:
            self.emit(event)

    def events(self) -> list[StreamEvent]:
        return self._events.copy()

    def __iter__(self) -> Iterator[StreamEvent]:
        return iter(self._events)
