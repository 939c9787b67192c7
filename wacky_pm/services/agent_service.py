"""
Copilot agent request handling: from a verified request to a streamed reply.
"""

from typing import AsyncIterator, Protocol

from wacky_pm.copilot.payload import CopilotPayload
from wacky_pm.copilot.streaming import (
    EventStream,
    StreamEvent,
    ack_event,
    done_event,
    error_event,
)
from wacky_pm.core.exceptions import MissingCredentialError, WackyPMError
from wacky_pm.core.logging import bind_context, get_logger
from wacky_pm.services.command_parser import parse_command
from wacky_pm.services.dialogue_engine import DialogueEngine

logger = get_logger(__name__)


class IdentityResolver(Protocol):
    async def get_login(self, token: str) -> str:
        ...


class AgentService:
    """
    Runs one dialogue turn per request and streams its events.

    The reply always opens with an acknowledgment. It ends with ``done`` or,
    when the turn failed, with a single error event.
    """

    def __init__(self, engine: DialogueEngine, identity_resolver: IdentityResolver) -> None:
        self.engine = engine
        self.identity_resolver = identity_resolver

    @staticmethod
    def missing_credential_reply() -> str:
        return error_event(MissingCredentialError()).to_sse()

    async def run(self, payload: CopilotPayload, token: str) -> list[StreamEvent]:
        """Run the turn and return the full event sequence."""
        return [event async for event in self.events(payload, token)]

    async def stream_reply(self, payload: CopilotPayload, token: str) -> AsyncIterator[str]:
        """Run the turn, yielding each event as an SSE frame."""
        async for event in self.events(payload, token):
            yield event.to_sse()

    async def events(self, payload: CopilotPayload, token: str) -> AsyncIterator[StreamEvent]:
        stream = EventStream()
        yield stream.emit(ack_event())

        try:
            owner_id = await self.identity_resolver.get_login(token)
            bind_context(owner_id=owner_id)

            command = parse_command(payload.user_message())
            confirmation = payload.confirmation()
            result = await self.engine.run_turn(owner_id, command, token, confirmation)

            for event in result.events:
                yield stream.emit(event)
            yield stream.emit(done_event())

        except WackyPMError as e:
            logger.warning("Turn failed", error_code=e.code, error_message=e.message)
            yield stream.emit(error_event(e))

        except Exception as e:
            logger.exception("Unexpected error during turn", error=str(e))
            yield stream.emit(error_event(WackyPMError(str(e) or "Unknown error")))
