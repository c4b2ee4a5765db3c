"""FastAPI application entry point.

Start with:
    uvicorn slackgate.main:app

The app wires SlackVerificationMiddleware in front of the webhook routes;
/health stays public.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from slackgate.api.health import router as health_router
from slackgate.api.webhooks import router as webhook_router
from slackgate.config import Settings, get_settings
from slackgate.core.middleware import SlackVerificationMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application from ``settings``."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logging.basicConfig(
            level=getattr(logging, settings.log_level.upper(), logging.INFO),
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        if not settings.slack_signing_secret:
            logger.warning("SLACK_SIGNING_SECRET is not set; every webhook will be rejected")
        logger.info("slackgate starting up")
        yield
        logger.info("slackgate shutting down")

    app = FastAPI(
        title="slackgate",
        description="Signature-verifying gateway for Slack webhooks",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        SlackVerificationMiddleware,
        signing_secret=settings.slack_signing_secret,
        max_request_age=settings.slack_max_request_age,
        version=settings.slack_signature_version,
        method=settings.slack_allowed_method,
        paths=settings.slack_protected_paths,
        timestamp_header=settings.slack_timestamp_header,
        signature_header=settings.slack_signature_header,
    )

    app.include_router(webhook_router, prefix="/api/webhooks")
    app.include_router(health_router)
    return app


app = create_app()
