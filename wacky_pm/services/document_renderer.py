"""
Rendering of the finalized Product Requirements Document (PRD).

Everything here is pure: the same snapshot and date always give the same
markdown.
"""

import re
from datetime import date, datetime, timezone
from typing import Optional

from wacky_pm.core.constants import (
    ISSUE_TITLE_MAX_LENGTH,
    PRD_OBJECTIVE,
    PRD_PROJECT_NAME,
    PRD_REQUIREMENTS,
)
from wacky_pm.domain.session import ConfirmationSnapshot

FENCE_RUN = re.compile(r"`{3,}")
ZERO_WIDTH_SPACE = "\u200b"


def neutralize_fences(text: str) -> str:
    """Break up backtick runs that would close a surrounding code fence."""
    return FENCE_RUN.sub(lambda m: ZERO_WIDTH_SPACE.join(m.group(0)), text)


def today() -> date:
    return datetime.now(timezone.utc).date()


def render_prd(
    owner_id: str,
    feature_idea: str,
    suggestion: Optional[str] = None,
    on: Optional[date] = None,
) -> str:
    """
    Render the PRD markdown.

    The "User Suggestion" section only exists when a suggestion does, and the
    requirements section is numbered after it.
    """
    on = on or today()
    sections = [
        ("Objective", PRD_OBJECTIVE),
        ("Feature Idea", neutralize_fences(feature_idea.strip())),
    ]
    if suggestion:
        sections.append(("User Suggestion", neutralize_fences(suggestion.strip())))
    sections.append(("Requirements", "\n".join(f"- {line}" for line in PRD_REQUIREMENTS)))

    lines = [
        "# Product Requirements Document (PRD)",
        f"### Project: **{PRD_PROJECT_NAME}**",
        f"**Author:** {owner_id}",
        f"**Date:** {on.isoformat()}",
    ]
    for number, (title, body) in enumerate(sections, start=1):
        lines.extend(["", f"## {number}. {title}", "", body])

    return "\n".join(lines) + "\n"


def render_snapshot(snapshot: ConfirmationSnapshot, on: Optional[date] = None) -> str:
    return render_prd(snapshot.owner_id, snapshot.feature_idea, snapshot.suggestion, on)


def wrap_markdown(document: str) -> str:
    """Embed a document in a markdown code fence for the chat transcript."""
    return f"```markdown\n{document}```\n"


def issue_title(feature_idea: str) -> str:
    """Short issue title from the first meaningful line of an idea."""
    for line in feature_idea.splitlines():
        title = line.strip().strip("#*_`> ").strip()
        if title:
            break
    else:
        title = PRD_PROJECT_NAME

    if len(title) > ISSUE_TITLE_MAX_LENGTH:
        title = title[: ISSUE_TITLE_MAX_LENGTH - 3].rstrip() + "..."
    return title
