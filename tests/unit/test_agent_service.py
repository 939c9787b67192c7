"""
Unit tests for turning a request into an ordered event sequence.
"""

import pytest

from wacky_pm.copilot.payload import CopilotPayload
from wacky_pm.core.constants import EventType
from wacky_pm.services.agent_service import AgentService

from tests.conftest import FakeGitHub


def payload(content: str) -> CopilotPayload:
    return CopilotPayload.model_validate({"messages": [{"role": "user", "content": content}]})


@pytest.mark.asyncio
async def test_run_opens_with_ack_and_ends_with_done(agent_service: AgentService) -> None:
    events = await agent_service.run(payload("/feature"), "token-alice")

    types = [event.event_type for event in events]
    assert types[0] == EventType.ACK
    assert types[-1] == EventType.DONE
    assert types.count(EventType.TEXT) == 3


@pytest.mark.asyncio
async def test_identity_failure_becomes_error_event(
    agent_service: AgentService,
    github: FakeGitHub,
) -> None:
    async def broken(token: str) -> str:
        raise ConnectionError("github down")

    github.get_login = broken

    events = await agent_service.run(payload("/feature"), "token-alice")

    assert [event.event_type for event in events] == [EventType.ACK, EventType.ERROR]
    assert events[-1].metadata["code"] == "PROCESSING_ERROR"
    assert events[-1].content == "github down"


def test_missing_credential_reply() -> None:
    reply = AgentService.missing_credential_reply()

    assert reply.startswith("event: copilot_errors\n")
    assert "MISSING_GITHUB_TOKEN" in reply
