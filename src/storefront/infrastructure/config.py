"""Client settings loaded from the environment (prefix ``STOREFRONT_``)."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    gateway_url: str = Field(
        default="http://localhost:8080", description="API gateway in front of every service"
    )
    request_timeout: float = Field(default=10.0, description="Per-request timeout (seconds)")
    revalidation_delay: float = Field(
        default=0.5, description="Quiet period before a discount is re-checked (seconds)"
    )
    catalog_limit: int = Field(default=1000, description="Products fetched to price a cart")
    session_file: Path = Field(
        default=Path.home() / ".storefront" / "session.json",
        description="Session written by the sign-in flow",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Render logs as JSON lines")

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("gateway_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("revalidation_delay", "request_timeout")
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
