"""Freshness check for the ``X-Slack-Request-Timestamp`` header.

A request whose timestamp is older than the allowed window is treated as a
possible replay.  Timestamps in the future are accepted.
"""

from __future__ import annotations

import re
import time
from datetime import timedelta
from typing import TYPE_CHECKING

from slackgate.core.exceptions import (
    InvalidTimestampError,
    MaxAllowedRequestAgeExceededError,
)

if TYPE_CHECKING:
    from slackgate.core.verifier import SlackRequestData

DEFAULT_MAX_REQUEST_AGE = timedelta(minutes=5)

# int() also accepts whitespace, underscores and non-ASCII digits.
# Nineteen digits covers the signed 64-bit range of a Unix timestamp.
_DECIMAL_RE = re.compile(r"[+-]?[0-9]{1,19}")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def int_timestamp(raw: str) -> int:
    """Parse a decimal Unix-seconds timestamp.

    Raises:
        InvalidTimestampError: If ``raw`` is empty, not a base-10 integer, or
            outside the signed 64-bit range.
    """
    if not raw or not _DECIMAL_RE.fullmatch(raw):
        raise InvalidTimestampError(f"Invalid request timestamp: {raw[:32]!r}")
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidTimestampError(f"Request timestamp out of range: {raw[:32]!r}")
    return value


def effective_max_age(max_age: timedelta | None) -> timedelta:
    """Return ``max_age``, or the 5 minute default when it is zero or unset."""
    if not max_age:
        return DEFAULT_MAX_REQUEST_AGE
    return max_age


def verify_timestamp(request: SlackRequestData, now: float | None = None) -> bool:
    """Check that the request is inside the freshness window.

    Args:
        request: The request data carrying ``timestamp`` and
            ``max_allowed_request_age``.
        now: Current Unix time; defaults to ``time.time()``.

    Returns:
        True when ``now - timestamp`` does not exceed the max age.

    Raises:
        InvalidTimestampError: If the timestamp cannot be parsed.
        MaxAllowedRequestAgeExceededError: If the request is too old.
    """
    max_age = effective_max_age(request.max_allowed_request_age)
    ts = int_timestamp(request.timestamp)

    current = int(time.time() if now is None else now)
    age = current - ts
    if age > max_age.total_seconds():
        raise MaxAllowedRequestAgeExceededError(
            f"Request is {age}s old, max allowed is {int(max_age.total_seconds())}s"
        )
    return True
