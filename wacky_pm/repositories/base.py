"""
Base repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base class for repositories keyed by a string id.
    """

    @abstractmethod
    async def get(self, id: str) -> Optional[T]:
        """Get an entity by ID."""
        ...

    @abstractmethod
    async def save(self, entity: T) -> T:
        """Save an entity."""
        ...

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """Delete an entity by ID."""
        ...

    @abstractmethod
    async def list(self, limit: int = 100, offset: int = 0) -> list[T]:
        """List entities."""
        ...

    @abstractmethod
    async def exists(self, id: str) -> bool:
        """Check if an entity exists."""
        ...
