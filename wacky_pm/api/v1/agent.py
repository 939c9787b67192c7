"""
Copilot agent endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse, Response, StreamingResponse

from wacky_pm.api.deps import get_agent_service, get_request_verifier
from wacky_pm.copilot.payload import CopilotPayload
from wacky_pm.core.constants import (
    GITHUB_TOKEN_HEADER,
    KEY_ID_HEADER,
    SIGNATURE_HEADER,
    WELCOME_TEXT,
)
from wacky_pm.core.logging import bind_context, clear_context, get_logger
from wacky_pm.core.security import CopilotRequestVerifier, generate_request_id
from wacky_pm.services.agent_service import AgentService

logger = get_logger(__name__)

router = APIRouter()

EVENT_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Content-Type-Options": "nosniff",
}


@router.get("/", response_class=PlainTextResponse)
async def welcome() -> str:
    """Landing text for humans opening the agent URL."""
    return WELCOME_TEXT


@router.post("/")
async def handle_agent_request(
    request: Request,
    github_token: Optional[str] = Header(default=None, alias=GITHUB_TOKEN_HEADER),
    signature: Optional[str] = Header(default=None, alias=SIGNATURE_HEADER),
    key_id: Optional[str] = Header(default=None, alias=KEY_ID_HEADER),
    verifier: CopilotRequestVerifier = Depends(get_request_verifier),
    agent_service: AgentService = Depends(get_agent_service),
) -> Response:
    """
    Handle one Copilot chat request.

    Unverifiable requests are rejected with a plain 401 before anything else
    runs. A verified request without a user token gets a single error event.
    Everything else is answered with a Copilot event stream.
    """
    clear_context()
    bind_context(request_id=generate_request_id())

    body = await request.body()
    token = github_token or ""
    await verifier.verify(body, signature, key_id, token)

    if not token:
        logger.warning("Agent request without GitHub token")
        return Response(
            content=agent_service.missing_credential_reply(),
            media_type="text/event-stream",
            headers=EVENT_STREAM_HEADERS,
        )

    payload = CopilotPayload.parse(body)
    logger.info("Agent request accepted", message_count=len(payload.messages))

    return StreamingResponse(
        agent_service.stream_reply(payload, token),
        media_type="text/event-stream",
        headers=EVENT_STREAM_HEADERS,
    )
