from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LANDING_PAGE = Path(__file__).resolve().parent / "public" / "index.html"


class Settings(BaseSettings):
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    host: str = "0.0.0.0"
    port: int = 3000
    forwarded_allow_ips: str = "127.0.0.1"

    service_name: str = "vedabeam-pitch-onepager"
    service_version: str = "1.0.0"
    api_name: str = "VedaBeam Pitch One-Pager API"
    cors_allow_origins: str = "https://vedabeam.com,https://www.vedabeam.com"
    landing_page_path: Path = DEFAULT_LANDING_PAGE
    landing_page_max_age_seconds: int = 86400

    waitlist_rate_limit_max_requests: int = 5
    waitlist_rate_limit_window_seconds: float = 15 * 60
    email_min_length: int = 5
    email_max_length: int = 254

    shutdown_timeout_seconds: int = 10
    log_level: str = "INFO"
    ops_event_buffer_size: int = 500
    ops_console_enabled: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, value: str) -> str:
        cleaned = value.strip().lower()
        if not cleaned:
            raise ValueError("ENVIRONMENT must not be blank")
        return cleaned

    @field_validator("waitlist_rate_limit_max_requests", "email_min_length")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("value must be at least 1")
        return value

    @field_validator("email_max_length")
    @classmethod
    def validate_max_length(cls, value: int) -> int:
        if value < 3:
            raise ValueError("EMAIL_MAX_LENGTH must be at least 3")
        return value

    def is_production(self) -> bool:
        return self.environment == "production"

    def ops_console_available(self) -> bool:
        return self.ops_console_enabled and not self.is_production()

    def cors_allow_origin_list(self) -> list[str]:
        if not self.is_production():
            return ["*"]
        return [item.strip() for item in self.cors_allow_origins.split(",") if item.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
