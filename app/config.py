"""Application configuration settings."""
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Runtime toggles -----------------------------------------------------
# Execution environment: "dev" | "test" | "staging" | "prod"
ENV = os.getenv("PAYHUB_ENV", "dev").lower()


class Settings(BaseSettings):
    """Environment configuration for the PayHub backend."""

    app_env: str = ENV
    database_url: str = "sqlite:///payhub.db"
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: list[str] = [
        "http://localhost:5000",
        "http://localhost:5173",
    ]
    SENTRY_DSN: str | None = None
    PROMETHEUS_ENABLED: bool = True
    ALLOW_DB_CREATE_ALL: bool = False

    # --- MercadoPago -----------------------------------------------------
    MERCADOPAGO_ACCESS_TOKEN: str | None = None
    MERCADOPAGO_BASE_URL: str = "https://api.mercadopago.com"
    MERCADOPAGO_TIMEOUT_SECONDS: float = 30.0
    MERCADOPAGO_NOTIFICATION_URL: str | None = None

    # --- Failed webhook replay -------------------------------------------
    SCHEDULER_ENABLED: bool = False
    WEBHOOK_REPLAY_INTERVAL_MINUTES: int = 15
    WEBHOOK_REPLAY_WINDOW_HOURS: int = 24
    WEBHOOK_REPLAY_MAX_ATTEMPTS: int = 5

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="", env_file_encoding="utf-8"
    )

    @field_validator("MERCADOPAGO_ACCESS_TOKEN", "MERCADOPAGO_NOTIFICATION_URL")
    @classmethod
    def _strip_empty(cls, value: str | None) -> str | None:
        """Normalise empty strings to ``None`` so feature checks stay boolean."""

        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class AppInfo(BaseModel):
    name: str = "payhub-backend"
    version: str = "0.1.0"


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return settings


__all__ = [
    "ENV",
    "Settings",
    "AppInfo",
    "settings",
    "get_settings",
]
