"""Application configuration via pydantic-settings.

Loads all settings from environment variables (or .env file).  The signing
secret is the only value that must be provided; everything else has the
documented Slack default.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the slackgate service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Slack request signing ---
    slack_signing_secret: str = ""
    slack_signature_version: str = "v0"
    slack_max_request_age_seconds: int = 300
    slack_timestamp_header: str = "X-Slack-Request-Timestamp"
    slack_signature_header: str = "X-Slack-Signature"
    slack_allowed_method: str = "POST"
    slack_protected_paths: tuple[str, ...] = ("/api/webhooks/slack",)

    # --- Application ---
    log_level: str = "INFO"

    @property
    def slack_max_request_age(self) -> timedelta:
        """Freshness window as a timedelta (zero falls back to 5 minutes)."""
        return timedelta(seconds=self.slack_max_request_age_seconds)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton."""
    return Settings()
