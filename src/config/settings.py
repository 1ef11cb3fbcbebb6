"""Application-wide configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    environment: Literal["local", "dev", "prod"] = Field(default="local")
    log_level: str = Field(default="INFO")

    # HTTP server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Twilio REST credentials
    twilio_account_sid: str | None = Field(default=None)
    twilio_auth_token: str | None = Field(default=None)

    # Twilio Voice SDK token signing
    twilio_api_key: str | None = Field(default=None, description="API key SID (SK...).")
    twilio_api_secret: str | None = Field(default=None)
    twilio_twiml_app_sid: str | None = Field(
        default=None,
        description="TwiML application SID used for outgoing Voice SDK calls (AP...).",
    )

    twilio_phone_number: str | None = Field(default=None, description="E.164, e.g. +1555...")
    public_base_url: str | None = Field(
        default=None,
        description="Public base URL for Twilio callbacks. Falls back to the request host.",
    )
    twilio_say_voice: str = Field(default="alice")
    twilio_say_language: str = Field(default="en-US")

    brand_name: str = Field(default="TORRZ", description="Name used in outbound OTP messages.")

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/") or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
