"""ASGI middleware that only lets signed Slack requests through.

For every guarded request:
  1. Reject any method other than the configured one (405)
  2. Require the timestamp and signature headers (400)
  3. Read the raw body once, before anything parses it
  4. Verify timestamp freshness, then the HMAC signature (401)
  5. Forward the request with the buffered body replayed downstream

The downstream response is passed through untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import timedelta

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from slackgate.core.exceptions import (
    MalformedRequestError,
    MethodNotAllowedError,
    SigningError,
    SlackVerificationError,
)
from slackgate.core.signature import DEFAULT_VERSION
from slackgate.core.verifier import RequestVerifier, SlackRequestData

logger = logging.getLogger(__name__)

TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_HEADER = "X-Slack-Signature"


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """Return a receive callable that yields ``body`` once, then defers."""
    sent = False

    async def replay() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        # Later calls wait for the client disconnect as usual.
        return await receive()

    return replay


class SlackVerificationMiddleware:
    """Verify Slack request signatures in front of an ASGI app.

    Args:
        app: Downstream ASGI application.
        signing_secret: The Slack app's signing secret.
        max_request_age: Freshness window; zero means 5 minutes.
        version: Signing scheme version.
        method: The only HTTP method accepted.
        paths: Request paths to guard; ``None`` guards every path.
        timestamp_header: Header carrying the request timestamp.
        signature_header: Header carrying the signature.
        verifier: Verifier to use; a default one is built if omitted.
    """

    def __init__(
        self,
        app: ASGIApp,
        signing_secret: str,
        *,
        max_request_age: timedelta = timedelta(0),
        version: str = DEFAULT_VERSION,
        method: str = "POST",
        paths: Iterable[str] | None = None,
        timestamp_header: str = TIMESTAMP_HEADER,
        signature_header: str = SIGNATURE_HEADER,
        verifier: RequestVerifier | None = None,
    ) -> None:
        self.app = app
        self._signing_secret = signing_secret
        self._max_request_age = max_request_age
        self._version = version or DEFAULT_VERSION
        self._method = method.upper()
        self._paths = frozenset(paths) if paths is not None else None
        self._timestamp_header = timestamp_header
        self._signature_header = signature_header
        self._verifier = verifier or RequestVerifier()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self._is_guarded(scope["path"]):
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        try:
            body = await self._verify(request)
        except SlackVerificationError as exc:
            response = self._reject(request, exc)
            await response(scope, receive, send)
            return

        await self.app(scope, _replay_body(body, receive), send)

    def _is_guarded(self, path: str) -> bool:
        return self._paths is None or path in self._paths

    async def _verify(self, request: Request) -> bytes:
        """Run all gate checks and return the buffered body on success."""
        if request.method != self._method:
            raise MethodNotAllowedError(f"Method {request.method} not allowed")

        timestamp = request.headers.get(self._timestamp_header)
        signature = request.headers.get(self._signature_header)
        if not timestamp or not signature:
            raise MalformedRequestError(
                f"Missing {self._timestamp_header} or {self._signature_header} header"
            )

        body = await request.body()
        data = SlackRequestData(
            version=self._version,
            raw_body=body,
            signing_secret=self._signing_secret,
            timestamp=timestamp,
            slack_signature=signature,
            max_allowed_request_age=self._max_request_age,
        )
        self._verifier.verify(data)

        logger.debug(
            "Slack request verified",
            extra={"path": request.url.path, "body_bytes": len(body)},
        )
        return body

    def _reject(self, request: Request, exc: SlackVerificationError) -> JSONResponse:
        context = {
            "path": request.url.path,
            "method": request.method,
            "reason": type(exc).__name__,
        }
        if isinstance(exc, SigningError):
            logger.error("Slack request rejected: %s", exc.message, extra=context)
        else:
            logger.warning("Slack request rejected: %s", exc.message, extra=context)

        # Server-side failures get a fixed detail; the cause stays in the log.
        detail = exc.message if exc.status_code < 500 else "Request verification unavailable"
        headers = {"Allow": self._method} if isinstance(exc, MethodNotAllowedError) else None
        return JSONResponse(
            {"detail": detail},
            status_code=exc.status_code,
            headers=headers,
        )
