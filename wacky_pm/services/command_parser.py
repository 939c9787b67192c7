"""
Classification of raw chat text into dialogue intents.
"""

import re
from dataclasses import dataclass

from wacky_pm.core.constants import (
    COMMAND_PRIORITY,
    ISSUE_TOKEN,
    ISSUE_USAGE,
    Intent,
)
from wacky_pm.core.exceptions import ParseFailureError

# GitHub owners are alphanumerics and single hyphens; repository names also
# allow dots and underscores.
ISSUE_TARGET_PATTERN = re.compile(
    rf"^{re.escape(ISSUE_TOKEN)}\s+(?P<owner>[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)"
    r"/(?P<repo>[A-Za-z0-9._-]+)\s*$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ParsedCommand:
    """A user's message with its classified intent."""

    intent: Intent
    text: str
    normalized: str


def normalize(text: str) -> str:
    return text.strip().casefold()


def parse_command(text: str) -> ParsedCommand:
    """
    Classify a chat message.

    ``/issue`` only counts as a prefix so repository names can never trip
    another token. The remaining tokens are substring matches tested in
    ``COMMAND_PRIORITY`` order, so "/done /new" finalizes.
    """
    stripped = (text or "").strip()
    normalized = normalize(stripped)

    if normalized.startswith(ISSUE_TOKEN):
        return ParsedCommand(Intent.ISSUE, stripped, normalized)

    for token, intent in COMMAND_PRIORITY:
        if token in normalized:
            return ParsedCommand(intent, stripped, normalized)

    return ParsedCommand(Intent.FREEFORM, stripped, normalized)


def parse_issue_target(text: str) -> tuple[str, str]:
    """
    Extract ``(owner, repo)`` from an ``/issue owner/repo`` command.

    Raises:
        ParseFailureError: If the command does not name exactly one repository
    """
    match = ISSUE_TARGET_PATTERN.match(text.strip())
    if not match:
        raise ParseFailureError(
            "I couldn't tell which repository the issue belongs to.",
            expected=ISSUE_USAGE,
        )
    return match.group("owner"), match.group("repo")
