"""Domain-specific exceptions for slackgate.

Verification code raises one of these so that the HTTP layer can map each
failure kind to a status code without inspecting messages. Library code
never writes responses itself.
"""

from __future__ import annotations


class SlackVerificationError(Exception):
    """Base exception for every request verification failure."""

    status_code: int = 401

    def __init__(self, message: str = "") -> None:
        self.message = message or (self.__doc__ or "").strip()
        super().__init__(self.message)


# =============================================================================
# Signing
# =============================================================================


class SigningError(SlackVerificationError):
    """Signature could not be computed (missing or unusable key material)."""

    status_code = 500


class InvalidSignatureError(SlackVerificationError):
    """Recomputed signature does not match the one sent by Slack."""


# =============================================================================
# Timestamp
# =============================================================================


class InvalidTimestampError(SlackVerificationError):
    """Request timestamp is missing or not a base-10 integer."""


class MaxAllowedRequestAgeExceededError(SlackVerificationError):
    """Request timestamp is older than the allowed freshness window."""


# =============================================================================
# Request shape
# =============================================================================


class MalformedRequestError(SlackVerificationError):
    """Request never presented the headers needed for verification."""

    status_code = 400


class MethodNotAllowedError(MalformedRequestError):
    """Request used an HTTP method the gate does not accept."""

    status_code = 405
