"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

METADATA_MODES = {"auto", "local"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    database_url: str | None = None
    discogs_token: str | None = None
    discogs_base_url: str = "https://api.discogs.com"
    metadata_mode: str = "auto"
    session_secret: str = "vinyl-vault-secret-key"
    session_max_age_seconds: int = 30 * 24 * 60 * 60
    session_cookie_name: str = "vinyl_vault.sid"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("metadata_mode")
    @classmethod
    def _known_metadata_mode(cls, value: str) -> str:
        mode = value.strip().lower()
        if mode not in METADATA_MODES:
            raise ValueError(f"metadata_mode must be one of {sorted(METADATA_MODES)}")
        return mode

    @property
    def secure_cookies(self) -> bool:
        """Only send the session cookie over HTTPS in production."""
        return self.environment == "production"

    @property
    def remote_metadata_enabled(self) -> bool:
        """Return true when the external catalog should be queried."""
        return bool(self.discogs_token) and self.metadata_mode != "local"


def normalize_database_url(raw: str | None) -> str | None:
    """Return a usable SQLAlchemy URL, or None when no database is configured."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned:
        return None
    # Hosted Postgres providers still hand out the legacy scheme.
    if cleaned.startswith("postgres://"):
        cleaned = "postgresql://" + cleaned.removeprefix("postgres://")
    return cleaned
