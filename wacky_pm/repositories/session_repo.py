"""
Session repository for brainstorming dialogues.
"""

from __future__ import annotations

from typing import Optional

from wacky_pm.core.logging import get_logger
from wacky_pm.domain.session import Session
from wacky_pm.repositories.base import BaseRepository

logger = get_logger(__name__)


class InMemorySessionRepository(BaseRepository[Session]):
    """
    Process-lifetime session store keyed by the owner's GitHub login.

    Nothing expires: a session stays until its dialogue is closed or the
    process exits.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    async def get(self, id: str) -> Optional[Session]:
        """Get the open session of an owner."""
        return self._sessions.get(id)

    async def save(self, entity: Session) -> Session:
        """Store a session under its owner, replacing any previous one."""
        self._sessions[entity.owner_id] = entity
        logger.debug(
            "Session saved",
            owner_id=entity.owner_id,
            state=entity.state.value,
            turn_count=entity.turn_count,
        )
        return entity

    async def delete(self, id: str) -> bool:
        """Close the session of an owner."""
        if id in self._sessions:
            del self._sessions[id]
            logger.debug("Session deleted", owner_id=id)
            return True
        return False

    async def list(self, limit: int = 100, offset: int = 0) -> list[Session]:
        """List open sessions, most recently updated first."""
        sessions = sorted(self._sessions.values(), key=lambda s: s.updated_at, reverse=True)
        return sessions[offset : offset + limit]

    async def exists(self, id: str) -> bool:
        """Check if an owner has an open session."""
        return id in self._sessions

    async def clear(self) -> int:
        """Drop every session. Returns how many were open."""
        count = len(self._sessions)
        self._sessions.clear()
        if count:
            logger.info("Cleared sessions", count=count)
        return count
