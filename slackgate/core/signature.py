"""HMAC-SHA256 signing for Slack webhook requests.

Slack signs every request with::

    X-Slack-Signature: v0=HMAC-SHA256(signing_secret, "v0:<timestamp>:<body>")

The signing string is built from the *raw* body bytes, so the body must be
captured before any JSON or form parsing.  Comparison uses
hmac.compare_digest() so the check takes the same time no matter where the
first differing byte is.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import TYPE_CHECKING

from slackgate.core.exceptions import InvalidSignatureError, SigningError

if TYPE_CHECKING:
    from slackgate.core.verifier import SlackRequestData

DEFAULT_VERSION = "v0"
SEPARATOR = b":"


def build_signing_string(version: str, timestamp: str, body: bytes) -> bytes:
    """Build the canonical ``version:timestamp:body`` string.

    The body is appended verbatim, with no decoding or re-encoding.
    """
    return SEPARATOR.join(
        [
            (version or DEFAULT_VERSION).encode("utf-8"),
            timestamp.encode("utf-8"),
            body,
        ]
    )


def generate_signature(
    version: str,
    timestamp: str,
    body: bytes | str,
    secret: str | bytes,
) -> str:
    """Compute the signature Slack would send for this request.

    Args:
        version: Signing scheme version; empty means ``v0``.
        timestamp: Value of the ``X-Slack-Request-Timestamp`` header.
        body: Raw request body.
        secret: The app's signing secret.

    Returns:
        ``"<version>=<lowercase hex digest>"``.

    Raises:
        SigningError: If the secret is empty or the inputs cannot be encoded.
    """
    if not secret:
        raise SigningError("Signing secret is empty")

    if not isinstance(secret, (str, bytes, bytearray)):
        raise SigningError("Signing secret must be str or bytes")
    if not isinstance(body, (str, bytes, bytearray)):
        raise SigningError("Request body must be str or bytes")

    version = version or DEFAULT_VERSION
    # The codec error text quotes the offending character, so it stays in __cause__.
    try:
        key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
        raw = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        message = build_signing_string(version, timestamp, raw)
    except UnicodeEncodeError as exc:
        raise SigningError("Signing secret or request cannot be encoded") from exc

    digest = hmac.new(key=key, msg=message, digestmod=hashlib.sha256).hexdigest()
    return f"{version}={digest}"


def verify_signature(request: SlackRequestData) -> bool:
    """Check ``request.slack_signature`` against the recomputed signature.

    Returns:
        True when the signatures match.

    Raises:
        InvalidSignatureError: On mismatch, including a wrong version prefix.
        SigningError: If the expected signature cannot be computed.
    """
    expected = generate_signature(
        request.version,
        request.timestamp,
        request.raw_body,
        request.signing_secret,
    )

    # Compare bytes: compare_digest rejects non-ASCII str input with TypeError.
    provided = (request.slack_signature or "").encode("utf-8")
    if not hmac.compare_digest(expected.encode("ascii"), provided):
        raise InvalidSignatureError("Invalid Slack signature")
    return True
