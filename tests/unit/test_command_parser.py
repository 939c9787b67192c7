"""
Unit tests for command classification.
"""

import pytest

from wacky_pm.core.constants import Intent
from wacky_pm.core.exceptions import ParseFailureError
from wacky_pm.services.command_parser import parse_command, parse_issue_target


@pytest.mark.parametrize(
    "text, intent",
    [
        ("/feature", Intent.START),
        ("  /FEATURE please ", Intent.START),
        ("/new", Intent.NEXT),
        ("give me a /new one", Intent.NEXT),
        ("/done", Intent.FINALIZE),
        ("I'm /Done here", Intent.FINALIZE),
        ("make it about cats", Intent.FREEFORM),
        ("", Intent.FREEFORM),
        ("/issue acme/widgets", Intent.ISSUE),
    ],
)
def test_parse_command_intents(text: str, intent: Intent) -> None:
    assert parse_command(text).intent == intent


def test_finalize_wins_over_next_and_start() -> None:
    assert parse_command("/feature /new /done").intent == Intent.FINALIZE
    assert parse_command("/feature /new").intent == Intent.NEXT


def test_issue_is_prefix_only() -> None:
    assert parse_command("/issue acme/newsroom").intent == Intent.ISSUE
    assert parse_command("please /issue acme/app").intent == Intent.FREEFORM


def test_parsed_command_keeps_original_text() -> None:
    command = parse_command("  Make It About CATS  ")

    assert command.text == "Make It About CATS"
    assert command.normalized == "make it about cats"


def test_parse_issue_target() -> None:
    assert parse_issue_target("/issue Acme-Corp/wacky.ideas_2") == ("Acme-Corp", "wacky.ideas_2")


@pytest.mark.parametrize("text", ["/issue", "/issue acme", "/issue acme/app extra", "/issue /app"])
def test_parse_issue_target_rejects_malformed(text: str) -> None:
    with pytest.raises(ParseFailureError) as exc_info:
        parse_issue_target(text)

    assert exc_info.value.code == "PARSE_FAILURE"
    assert "/issue owner/repo" in exc_info.value.message
