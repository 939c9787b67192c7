"""
Prompt templates for idea generation.
"""

from typing import Optional

BRAINSTORM_PROMPTS = {
    "start": (
        "Generate a wacky, humorous, but plausible product feature idea "
        "in a playful tone."
    ),
    "next": (
        "Generate another wacky, humorous, but plausible product feature idea. "
        'Make it different from this one: "{idea}". {suggestion_clause}Keep it playful!'
    ),
    "suggestion_clause": 'Incorporate this user suggestion: "{suggestion}". ',
    "refine": (
        'Refine this wacky, humorous, but plausible product feature idea: "{idea}". '
        'Incorporate this user suggestion: "{suggestion}". Keep it playful!'
    ),
}


def start_prompt() -> str:
    return BRAINSTORM_PROMPTS["start"]


def next_prompt(idea: str, suggestion: Optional[str] = None) -> str:
    """Ask for an idea unlike ``idea``, folding in a pending suggestion."""
    clause = ""
    if suggestion:
        clause = BRAINSTORM_PROMPTS["suggestion_clause"].format(suggestion=suggestion)
    return BRAINSTORM_PROMPTS["next"].format(idea=idea, suggestion_clause=clause)


def refine_prompt(idea: str, suggestion: str) -> str:
    return BRAINSTORM_PROMPTS["refine"].format(idea=idea, suggestion=suggestion)
