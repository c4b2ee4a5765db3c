"""Slack webhook receiver.

POST /api/webhooks/slack receives Slack Events API / interactivity calls.
SlackVerificationMiddleware has already verified the signature by the time
this handler runs, and the raw body is still readable here.  The payload is
acknowledged without being interpreted.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, Request

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/slack", status_code=200)
async def receive_slack_webhook(
    request: Request,
    x_slack_request_timestamp: str = Header(default=""),
) -> dict[str, str]:
    """Acknowledge a verified Slack request.

    Returns:
        {"status": "accepted"}.
    """
    body = await request.body()

    logger.info(
        "Slack webhook accepted",
        extra={
            "timestamp": x_slack_request_timestamp,
            "content_type": request.headers.get("content-type", ""),
            "body_bytes": len(body),
        },
    )
    return {"status": "accepted"}
