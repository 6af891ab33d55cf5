from __future__ import annotations

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from config import (
    BROWSER_NAVIGATION_TIMEOUT_SECONDS as DEFAULT_NAVIGATION_TIMEOUT,
    BROWSER_RESPONSE_TIMEOUT_SECONDS as DEFAULT_RESPONSE_TIMEOUT,
    HTTP_TIMEOUT_SECONDS as DEFAULT_HTTP_TIMEOUT,
    LOG_FILE_PATH as DEFAULT_LOG_FILE_PATH,
    LOG_LEVEL as DEFAULT_LOG_LEVEL,
    MONGO_COLLECTION_NAME as DEFAULT_COLLECTION_NAME,
    MONGO_DATABASE as DEFAULT_MONGO_DATABASE,
    MONGO_URL as DEFAULT_MONGO_URL,
    PAYLOAD_SHAPE as DEFAULT_PAYLOAD_SHAPE,
    TOKEN_EXPIRY_HOURS as DEFAULT_TOKEN_EXPIRY_HOURS,
)
from data_ingestion.models import PayloadShape


class Settings(BaseSettings):
    """Application settings loaded from environment variables (.env).

    Every field has a default from ``config.py`` so a bare environment
    produces a working local configuration.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Logging ---
    log_level: str = DEFAULT_LOG_LEVEL
    log_file_path: str = DEFAULT_LOG_FILE_PATH

    # --- Database ---
    mongo_url: str = DEFAULT_MONGO_URL
    mongo_database: str = DEFAULT_MONGO_DATABASE
    collection_name: str = DEFAULT_COLLECTION_NAME

    # --- Credentials ---
    # When set, the browser is never launched.
    lunarcrush_api_token: Optional[str] = None
    token_expiry_hours: float = DEFAULT_TOKEN_EXPIRY_HOURS

    # --- Payload ---
    payload_shape: PayloadShape = PayloadShape(DEFAULT_PAYLOAD_SHAPE)

    # --- Browser ---
    browser_headless: bool = True
    browser_navigation_timeout_seconds: float = DEFAULT_NAVIGATION_TIMEOUT
    browser_response_timeout_seconds: float = DEFAULT_RESPONSE_TIMEOUT

    # --- HTTP ---
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT

    @field_validator("token_expiry_hours")
    @classmethod
    def _positive_expiry(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("token_expiry_hours must be positive")
        return value

    @field_validator("lunarcrush_api_token")
    @classmethod
    def _blank_token_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


def load_settings() -> Settings:
    """Load and validate settings from environment variables (.env)."""
    return Settings()
