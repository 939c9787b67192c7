"""
API dependencies for dependency injection.
"""

from typing import Optional

from wacky_pm.clients.github_client import GitHubClient
from wacky_pm.copilot.llm_client import CopilotIdeaGenerator
from wacky_pm.core.config import settings
from wacky_pm.core.security import CopilotRequestVerifier
from wacky_pm.repositories.session_repo import InMemorySessionRepository
from wacky_pm.services.agent_service import AgentService
from wacky_pm.services.dialogue_engine import DialogueEngine
from wacky_pm.services.session_manager import SessionManager


class ServiceContainer:
    """
    Container for all application services.
    Provides singleton instances of services.
    """

    _instance: Optional["ServiceContainer"] = None

    def __init__(self) -> None:
        self._initialized = False

    @classmethod
    def get_instance(cls) -> "ServiceContainer":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def initialize(self) -> None:
        """Initialize all services."""
        if self._initialized:
            return

        # External API clients
        self._github_client = GitHubClient()
        self._idea_generator = CopilotIdeaGenerator()

        # Sessions
        self._session_repository = InMemorySessionRepository()
        self._session_manager = SessionManager(self._session_repository)

        # Dialogue
        self._dialogue_engine = DialogueEngine(
            session_manager=self._session_manager,
            idea_generator=self._idea_generator,
            issue_tracker=self._github_client,
            generator_timeout=settings.brainstorm.generator_timeout,
            issue_labels=list(settings.brainstorm.issue_labels),
        )

        self._agent_service = AgentService(
            engine=self._dialogue_engine,
            identity_resolver=self._github_client,
        )
        self._request_verifier = CopilotRequestVerifier(self._github_client)

        self._initialized = True

    async def shutdown(self) -> None:
        """Close HTTP clients and drop in-memory sessions."""
        if not self._initialized:
            return
        await self._github_client.close()
        await self._idea_generator.close()
        await self._session_repository.clear()
        self._initialized = False

    @property
    def session_manager(self) -> SessionManager:
        """Get the session manager."""
        self.initialize()
        return self._session_manager

    @property
    def agent_service(self) -> AgentService:
        """Get the agent service."""
        self.initialize()
        return self._agent_service

    @property
    def request_verifier(self) -> CopilotRequestVerifier:
        """Get the request signature verifier."""
        self.initialize()
        return self._request_verifier


# Singleton container instance
container = ServiceContainer.get_instance()


# Dependency functions for FastAPI
def get_session_manager() -> SessionManager:
    """Get the session manager instance."""
    return container.session_manager


def get_agent_service() -> AgentService:
    """Get the agent service instance."""
    return container.agent_service


def get_request_verifier() -> CopilotRequestVerifier:
    """Get the request verifier instance."""
    return container.request_verifier
