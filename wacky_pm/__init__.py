"""
Wacky PM: a GitHub Copilot agent for brainstorming wacky product features.
"""

__version__ = "1.0.0"
