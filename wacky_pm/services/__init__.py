"""
Service layer implementations.
"""

from wacky_pm.services.agent_service import AgentService
from wacky_pm.services.command_parser import ParsedCommand, parse_command
from wacky_pm.services.dialogue_engine import DialogueEngine, TurnResult
from wacky_pm.services.session_manager import SessionManager

__all__ = [
    "AgentService",
    "DialogueEngine",
    "ParsedCommand",
    "SessionManager",
    "TurnResult",
    "parse_command",
]
