"""
Session manager: access to brainstorming sessions, one turn per user at a time.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from wacky_pm.core.constants import DialogueState
from wacky_pm.core.logging import get_logger
from wacky_pm.domain.session import Session, state_of
from wacky_pm.repositories.base import BaseRepository
from wacky_pm.repositories.session_repo import InMemorySessionRepository

logger = get_logger(__name__)


class SessionManager:
    """
    Wraps the session repository with per-owner serialization.

    Turns of the same owner run one after the other: a second request waits
    for the first one's result instead of racing it. Turns of different owners
    never wait on each other.
    """

    def __init__(self, session_repository: Optional[BaseRepository[Session]] = None) -> None:
        self.session_repository = session_repository or InMemorySessionRepository()
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def exclusive(self, owner_id: str) -> AsyncIterator[None]:
        """Hold the owner's turn lock for the duration of the block."""
        lock = self._locks.setdefault(owner_id, asyncio.Lock())
        self._users[owner_id] = self._users.get(owner_id, 0) + 1
        if lock.locked():
            logger.info("Waiting for previous turn", owner_id=owner_id)
        try:
            async with lock:
                yield
        finally:
            self._users[owner_id] -= 1
            if self._users[owner_id] == 0:
                del self._users[owner_id]
                del self._locks[owner_id]

    def is_busy(self, owner_id: str) -> bool:
        """Whether a turn of this owner is running or queued."""
        return owner_id in self._locks

    async def get_session(self, owner_id: str) -> Optional[Session]:
        return await self.session_repository.get(owner_id)

    async def get_state(self, owner_id: str) -> DialogueState:
        return state_of(await self.get_session(owner_id))

    async def save_session(self, session: Session) -> Session:
        return await self.session_repository.save(session)

    async def close_session(self, owner_id: str) -> bool:
        """Delete the owner's session, closing the dialogue."""
        closed = await self.session_repository.delete(owner_id)
        if closed:
            logger.info("Session closed", owner_id=owner_id)
        return closed

    async def list_sessions(self, limit: int = 100) -> list[Session]:
        return await self.session_repository.list(limit=limit)
