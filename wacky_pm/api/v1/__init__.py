"""
API v1 routers.
"""

from wacky_pm.api.v1 import agent, health

__all__ = ["agent", "health"]
