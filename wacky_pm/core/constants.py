"""
System-wide constants for the Wacky PM agent.
"""

from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class MessageRole(str, Enum):
    """Message roles in a completion request."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Intent(str, Enum):
    """Classified meaning of a user's message."""

    START = "start"
    NEXT = "next"
    FINALIZE = "finalize"
    ISSUE = "issue"
    FREEFORM = "freeform"


class DialogueState(str, Enum):
    """States of a user's brainstorming dialogue."""

    IDLE = "idle"
    BRAINSTORMING = "brainstorming"
    AWAITING_CONFIRM = "awaiting_confirm"


class ConfirmationState(str, Enum):
    """Answers Copilot reports for a confirmation dialog."""

    ACCEPTED = "accepted"
    DISMISSED = "dismissed"


class EventType(str, Enum):
    """Outbound stream event types."""

    ACK = "ack"
    TEXT = "text"
    CONFIRMATION = "confirmation"
    ERROR = "error"
    DONE = "done"


# =============================================================================
# API Constants
# =============================================================================

API_VERSION = "v1"
API_PREFIX = f"/api/{API_VERSION}"

GITHUB_TOKEN_HEADER = "X-GitHub-Token"
SIGNATURE_HEADER = "X-GitHub-Public-Key-Signature"
KEY_ID_HEADER = "X-GitHub-Public-Key-Identifier"

# =============================================================================
# Command Tokens
# =============================================================================

START_TOKEN = "/feature"
NEXT_TOKEN = "/new"
FINALIZE_TOKEN = "/done"
ISSUE_TOKEN = "/issue"

# Substring tokens in the order they are tested; the first hit wins.
COMMAND_PRIORITY = (
    (FINALIZE_TOKEN, Intent.FINALIZE),
    (NEXT_TOKEN, Intent.NEXT),
    (START_TOKEN, Intent.START),
)

ISSUE_USAGE = f"'{ISSUE_TOKEN} owner/repo'"

# =============================================================================
# Dialogue Texts
# =============================================================================

WELCOME_TEXT = "Welcome to the Wacky PM Copilot extension! \U0001F44B"

GREETING_TEXT = (
    "Hi {owner_id}! The options you have are asking me about a feature request "
    f"or a product idea. Type '{START_TOKEN}' to get a wacky product idea!"
)

START_TEXT = "No problem {owner_id}! Let's brainstorm.\n\n"
NEXT_TEXT = "Here's another idea:\n"
REFINE_TEXT = "Here's an improved idea based on your suggestion:\n"

NEXT_ACTION_TEXT = (
    f"Reply with '{NEXT_TOKEN}' to brainstorm another idea, or '{FINALIZE_TOKEN}' "
    "if you're happy, or suggest an improvement!"
)

CONFIRMATION_TITLE = "Generate PRD Document?"
CONFIRMATION_MESSAGE = (
    "Would you like to generate a markdown Product Requirements Document (PRD) "
    "for your finalized idea?"
)

DOCUMENT_INTRO_TEXT = "Here's your PRD document in markdown format:\n"

DECLINE_TEXT = (
    "Awesome! Glad you're happy with the feature. "
    f"If you want to brainstorm again, just type '{START_TOKEN}'."
)

ISSUE_CREATED_TEXT = "Created issue #{number} in {repository}: {url}\n"

# =============================================================================
# Document Constants
# =============================================================================

PRD_PROJECT_NAME = "Wacky Product Manager Feature"
PRD_OBJECTIVE = "Suggest a wacky and humorous product feature idea."
PRD_REQUIREMENTS = (
    "The feature should be absurd but plausible in a playful way.",
    "Should be generated in a humorous tone.",
)
ISSUE_TITLE_MAX_LENGTH = 80
