"""
Idea generation through the GitHub Copilot chat completions API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import httpx

from wacky_pm.clients.base_client import BaseAPIClient
from wacky_pm.core.config import settings
from wacky_pm.core.constants import MessageRole
from wacky_pm.core.exceptions import GeneratorError, WackyPMError
from wacky_pm.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class IdeaResult:
    """Text produced by the idea generator."""

    content: str
    model: str = ""
    request_id: Optional[str] = None
    usage: dict[str, Any] = field(default_factory=dict)


class IdeaGenerator(Protocol):
    """Anything that turns a prompt into idea text on behalf of a user."""

    async def generate(self, prompt: str, token: str) -> IdeaResult:
        ...


class CopilotIdeaGenerator(BaseAPIClient):
    """
    Idea generator backed by the Copilot LLM the extension's user has access to.

    Every call is a single non-streaming completion authenticated with the
    user's own GitHub token. Calls are never retried here: a failed turn is
    retried by the user sending the same message again.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            base_url=api_url or settings.copilot.api_url,
            timeout=timeout or settings.copilot.timeout,
            transport=transport,
        )
        self.model = model or settings.copilot.model
        self.system_prompt = system_prompt or settings.copilot.system_prompt

    @property
    def service_name(self) -> str:
        return "Copilot"

    def _api_error(self, message: str, details: dict[str, Any]) -> WackyPMError:
        return GeneratorError(message, details)

    async def generate(self, prompt: str, token: str) -> IdeaResult:
        """
        Send one prompt and return the completion text.

        Raises:
            GeneratorError: If the API fails or returns no content
        """
        data = await self._post(
            "/chat/completions",
            token,
            data={
                "model": self.model,
                "stream": False,
                "messages": [
                    {"role": MessageRole.SYSTEM.value, "content": self.system_prompt},
                    {"role": MessageRole.USER.value, "content": prompt},
                ],
            },
        )

        choices = data.get("choices") if isinstance(data, dict) else None
        content = ""
        if choices:
            message = choices[0].get("message") or {}
            content = (message.get("content") or "").strip()
        if not content:
            raise GeneratorError("Completion contained no text")

        logger.debug(
            "Idea generated",
            model=data.get("model", self.model),
            content_length=len(content),
        )
        return IdeaResult(
            content=content,
            model=data.get("model", self.model),
            request_id=data.get("id"),
            usage=data.get("usage") or {},
        )
