"""Liveness endpoint.

Mounted outside the Slack signature check so probes need no headers.
Reports whether a signing secret is configured; without one every
webhook call is rejected with a 500.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, str | bool]:
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "signing_configured": bool(settings.slack_signing_secret),
    }
