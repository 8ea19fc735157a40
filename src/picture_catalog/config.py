"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    storage_bucket: str = "pictures"
    allowed_licenses: str = "CC-BY,CC-BY-SA,CC-BY-NC,CC0,All rights reserved"
    default_license: str = "All rights reserved"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_licenses(
    raw: str | None, default: str | None = None
) -> frozenset[str]:
    """Parse the comma-separated license allow-list.

    The default license is always accepted, so a misconfigured list cannot
    make every new picture invalid.
    """
    names: set[str] = set()
    for chunk in (raw or "").split(","):
        value = chunk.strip()
        if value:
            names.add(value)
    if default:
        names.add(default)
    return frozenset(names)
