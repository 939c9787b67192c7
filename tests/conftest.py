"""
Pytest configuration and fixtures.
"""

import asyncio
import json
from datetime import date
from typing import Any, AsyncGenerator, Callable, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from wacky_pm.api.deps import get_agent_service, get_request_verifier, get_session_manager
from wacky_pm.clients.github_client import CreatedIssue, PublicKey
from wacky_pm.copilot.llm_client import IdeaResult
from wacky_pm.core.exceptions import IssueCreationError
from wacky_pm.core.security import CopilotRequestVerifier
from wacky_pm.main import app
from wacky_pm.repositories.session_repo import InMemorySessionRepository
from wacky_pm.services.agent_service import AgentService
from wacky_pm.services.dialogue_engine import DialogueEngine
from wacky_pm.services.session_manager import SessionManager

FIXED_DATE = date(2024, 5, 17)


class FakeIdeaGenerator:
    """Idea generator returning numbered ideas and recording prompts."""

    def __init__(self) -> None:
        self.prompts: list[str] = []
        self.tokens: list[str] = []
        self.ideas: list[str] = []
        self.error: Optional[Exception] = None
        self.delay: float = 0.0

    async def generate(self, prompt: str, token: str) -> IdeaResult:
        self.prompts.append(prompt)
        self.tokens.append(token)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.ideas:
            content = self.ideas.pop(0)
        else:
            content = f"Idea number {len(self.prompts)}: a toaster that tweets"
        return IdeaResult(content=content, model="fake")


class FakeGitHub:
    """Identity resolver, key source and issue tracker in one."""

    def __init__(self) -> None:
        self.logins: dict[str, str] = {"token-alice": "alice", "token-bob": "bob"}
        self.issues: list[dict[str, Any]] = []
        self.public_keys: list[PublicKey] = []
        self.key_fetches = 0
        self.fail_issues = False

    async def get_login(self, token: str) -> str:
        return self.logins.get(token, "octocat")

    async def get_public_keys(self, token: str) -> list[PublicKey]:
        self.key_fetches += 1
        return list(self.public_keys)

    async def create_issue(
        self,
        token: str,
        owner: str,
        repo: str,
        title: str,
        body: str,
        labels: Optional[list[str]] = None,
    ) -> CreatedIssue:
        repository = f"{owner}/{repo}"
        if self.fail_issues:
            raise IssueCreationError(repository, "HTTP 404: Not Found")
        self.issues.append(
            {"owner": owner, "repo": repo, "title": title, "body": body, "labels": labels}
        )
        number = len(self.issues)
        return CreatedIssue(
            number=number,
            html_url=f"https://github.com/{repository}/issues/{number}",
            repository=repository,
        )


@pytest.fixture
def idea_generator() -> FakeIdeaGenerator:
    return FakeIdeaGenerator()


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def session_manager(session_repository: InMemorySessionRepository) -> SessionManager:
    return SessionManager(session_repository)


@pytest.fixture
def engine(
    session_manager: SessionManager,
    idea_generator: FakeIdeaGenerator,
    github: FakeGitHub,
) -> DialogueEngine:
    return DialogueEngine(
        session_manager=session_manager,
        idea_generator=idea_generator,
        issue_tracker=github,
        generator_timeout=1.0,
        issue_labels=["feature-idea"],
        clock=lambda: FIXED_DATE,
    )


@pytest.fixture
def agent_service(engine: DialogueEngine, github: FakeGitHub) -> AgentService:
    return AgentService(engine=engine, identity_resolver=github)


@pytest.fixture
async def async_client(
    agent_service: AgentService,
    session_manager: SessionManager,
    github: FakeGitHub,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with faked collaborators."""
    app.dependency_overrides[get_agent_service] = lambda: agent_service
    app.dependency_overrides[get_session_manager] = lambda: session_manager
    app.dependency_overrides[get_request_verifier] = lambda: CopilotRequestVerifier(
        github, enabled=False
    )
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_payload() -> Callable[..., dict[str, Any]]:
    """Build a Copilot agent request body."""

    def _make(
        content: str,
        confirmation: Optional[dict[str, Any]] = None,
        history: Optional[list[dict[str, Any]]] = None,
    ) -> dict[str, Any]:
        message: dict[str, Any] = {"role": "user", "content": content}
        if confirmation is not None:
            message["copilot_confirmations"] = [confirmation]
        return {
            "copilot_thread_id": "thread-1",
            "messages": [*(history or []), message],
        }

    return _make


def parse_sse_frames(text: str) -> list[tuple[Optional[str], Any]]:
    """Split an SSE body into (event name, decoded data) pairs."""
    frames = []
    for block in text.split("\n\n"):
        if not block.strip():
            continue
        event = None
        data = None
        for line in block.splitlines():
            if line.startswith("event: "):
                event = line[len("event: "):]
            elif line.startswith("data: "):
                raw = line[len("data: "):]
                data = raw if raw == "[DONE]" else json.loads(raw)
        frames.append((event, data))
    return frames


@pytest.fixture
def parse_sse() -> Callable[[str], list[tuple[Optional[str], Any]]]:
    return parse_sse_frames
