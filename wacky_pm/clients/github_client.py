"""
GitHub REST API client: caller identity, Copilot signing keys and issues.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from wacky_pm.clients.base_client import BaseAPIClient
from wacky_pm.core.config import settings
from wacky_pm.core.exceptions import ExternalApiError, IssueCreationError
from wacky_pm.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PublicKey:
    """A key Copilot signs agent requests with."""

    key_identifier: str
    key: str
    is_current: bool = False


@dataclass
class CreatedIssue:
    """Issue created on GitHub."""

    number: int
    html_url: str
    repository: str


class GitHubClient(BaseAPIClient):
    """
    Thin client over the GitHub REST API.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        public_keys_path: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            base_url=base_url or settings.github.api_url,
            timeout=timeout or settings.github.timeout,
            transport=transport,
        )
        self.public_keys_path = public_keys_path or settings.github.public_keys_path

    @property
    def service_name(self) -> str:
        return "GitHub"

    async def get_login(self, token: str) -> str:
        """Resolve a user token to the user's login."""
        data = await self._get("/user", token)
        login = data.get("login") if isinstance(data, dict) else None
        if not login:
            raise ExternalApiError(self.service_name, "User lookup returned no login")
        return login

    async def get_public_keys(self, token: str) -> list[PublicKey]:
        """List the keys Copilot currently signs agent requests with."""
        data = await self._get(self.public_keys_path, token)
        keys = [
            PublicKey(
                key_identifier=entry["key_identifier"],
                key=entry["key"],
                is_current=bool(entry.get("is_current", False)),
            )
            for entry in data.get("public_keys", [])
            if "key_identifier" in entry and "key" in entry
        ]
        logger.debug("Fetched Copilot public keys", count=len(keys))
        return keys

    async def create_issue(
        self,
        token: str,
        owner: str,
        repo: str,
        title: str,
        body: str,
        labels: Optional[list[str]] = None,
    ) -> CreatedIssue:
        """
        Create an issue in ``owner/repo`` on behalf of the token's user.

        Raises:
            IssueCreationError: If GitHub rejects or cannot be reached
        """
        repository = f"{owner}/{repo}"
        try:
            data = await self._post(
                f"/repos/{owner}/{repo}/issues",
                token,
                data={"title": title, "body": body, "labels": labels or []},
            )
        except ExternalApiError as e:
            raise IssueCreationError(repository, e.message) from e

        issue = CreatedIssue(
            number=int(data["number"]),
            html_url=data["html_url"],
            repository=repository,
        )
        logger.info("Issue created", repository=repository, number=issue.number)
        return issue
