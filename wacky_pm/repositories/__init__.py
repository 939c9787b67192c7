"""
Repository implementations for data access.
"""

from wacky_pm.repositories.base import BaseRepository
from wacky_pm.repositories.session_repo import InMemorySessionRepository

__all__ = [
    "BaseRepository",
    "InMemorySessionRepository",
]
