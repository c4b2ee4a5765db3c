"""Request verification: timestamp freshness, then HMAC signature.

Both checks must pass.  The timestamp is checked first because it is cheap
and rejects stale requests before any HMAC work is done; the first failure
is raised immediately and the remaining check is skipped.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta

from slackgate.core import signature, timestamp
from slackgate.core.exceptions import SlackVerificationError


@dataclass(frozen=True)
class SlackRequestData:
    """Everything needed to verify one inbound Slack request.

    Built fresh for each request and discarded after the verdict.
    ``max_allowed_request_age`` of zero means the 5 minute default.
    """

    version: str = signature.DEFAULT_VERSION
    raw_body: bytes = b""
    signing_secret: str = field(default="", repr=False)
    timestamp: str = ""
    slack_signature: str = ""
    max_allowed_request_age: timedelta = timedelta(0)

    def __post_init__(self) -> None:
        if not self.version:
            object.__setattr__(self, "version", signature.DEFAULT_VERSION)

    def int_timestamp(self) -> int:
        return timestamp.int_timestamp(self.timestamp)

    def verify_timestamp(self, now: float | None = None) -> bool:
        return timestamp.verify_timestamp(self, now=now)

    def verify_signature(self) -> bool:
        return signature.verify_signature(self)

    def verify(self, now: float | None = None) -> bool:
        """Run both checks, timestamp first."""
        return self.verify_timestamp(now=now) and self.verify_signature()


@dataclass(frozen=True)
class Verdict:
    """Outcome of a verification run."""

    accepted: bool
    error: SlackVerificationError | None = None

    @property
    def reason(self) -> str:
        return self.error.message if self.error else ""


class RequestVerifier:
    """Stateless verifier composing the timestamp and signature checks.

    Args:
        clock: Returns the current Unix time; ``time.time`` by default.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock

    def verify(self, request: SlackRequestData) -> bool:
        """Verify a request, raising the first failure.

        Raises:
            InvalidTimestampError: Timestamp missing or unparsable.
            MaxAllowedRequestAgeExceededError: Request too old.
            InvalidSignatureError: Signature mismatch.
            SigningError: Signature could not be computed.
        """
        timestamp.verify_timestamp(request, now=self._clock())
        return signature.verify_signature(request)

    def check(self, request: SlackRequestData) -> Verdict:
        """Like :meth:`verify`, but returns a :class:`Verdict` instead of raising."""
        try:
            self.verify(request)
        except SlackVerificationError as exc:
            return Verdict(accepted=False, error=exc)
        return Verdict(accepted=True)
