"""
Exception hierarchy for the Wacky PM agent.

Every error carries the code and identifier that end up in a Copilot
``copilot_errors`` event, plus an HTTP status for the few failures that are
answered outside the event stream.
"""

from typing import Any, Optional


class WackyPMError(Exception):
    """Base exception for all agent errors."""

    def __init__(
        self,
        message: str,
        code: str = "PROCESSING_ERROR",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
        identifier: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.status_code = status_code
        self.identifier = identifier or code.lower()

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Request Errors (raised before the dialogue runs)
# =============================================================================


class VerificationFailedError(WackyPMError):
    """Inbound request signature could not be verified."""

    def __init__(self, message: str = "Request could not be verified") -> None:
        super().__init__(
            message=message,
            code="VERIFICATION_FAILED",
            status_code=401,
        )


class MissingCredentialError(WackyPMError):
    """No GitHub token was supplied with the request."""

    def __init__(self) -> None:
        super().__init__(
            message="No GitHub token provided in the request headers.",
            code="MISSING_GITHUB_TOKEN",
            status_code=401,
        )


class ParseFailureError(WackyPMError):
    """A structured reply was required but could not be understood."""

    def __init__(self, message: str, expected: Optional[str] = None) -> None:
        details = {"expected": expected} if expected else {}
        if expected:
            message = f"{message} Expected format: {expected}"
        super().__init__(
            message=message,
            code="PARSE_FAILURE",
            details=details,
            status_code=400,
        )


# =============================================================================
# External Service Errors (502, 504)
# =============================================================================


class ExternalApiError(WackyPMError):
    """Error communicating with an external API."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=f"{service_name} error: {message}",
            code="EXTERNAL_API_FAILURE",
            details={"service": service_name, **(details or {})},
            status_code=502,
        )


class GeneratorError(ExternalApiError):
    """The idea generator failed or returned no usable content."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(service_name="Idea generator", message=message, details=details)
        self.code = "GENERATOR_FAILURE"
        self.identifier = "generator_failure"


class GeneratorTimeoutError(GeneratorError):
    """The idea generator did not answer in time."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            message=f"no idea arrived within {timeout_seconds:g} seconds, please try again",
            details={"timeout_seconds": timeout_seconds},
        )
        self.code = "GENERATOR_TIMEOUT"
        self.identifier = "generator_timeout"
        self.status_code = 504


class IssueCreationError(ExternalApiError):
    """Creating an issue on GitHub failed."""

    def __init__(self, repository: str, message: str) -> None:
        super().__init__(
            service_name="GitHub issues",
            message=message,
            details={"repository": repository},
        )
        self.code = "ISSUE_CREATION_FAILED"
        self.identifier = "issue_creation_failed"


# =============================================================================
# Dialogue Errors
# =============================================================================


class StateTransitionError(WackyPMError):
    """The dialogue attempted a transition its state machine does not allow."""

    def __init__(self, from_state: str, to_state: str) -> None:
        super().__init__(
            message=f"Invalid dialogue transition {from_state} -> {to_state}",
            code="INVALID_TRANSITION",
            details={"from_state": from_state, "to_state": to_state},
        )
