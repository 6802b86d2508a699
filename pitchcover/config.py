"""
PitchCover Configuration.

Pydantic Settings v2 — loads from .env, environment variables.
Pricing constants live in engine.pricing.PricingConfig, not here.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────────────
    app_name: str = "PitchCover"
    app_version: str = "1.0.0"
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # ── API ───────────────────────────────────────────────────────────────
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8010, alias="PITCHCOVER_API_PORT")
    api_prefix: str = "/api/v1"
    allowed_origins: List[str] = Field(
        default=["http://localhost:3000"],
        alias="CORS_ORIGINS",
    )

    # ── Forecast Source ───────────────────────────────────────────────────
    forecast_url: str = Field(
        default="https://api.open-meteo.com/v1/forecast",
        alias="FORECAST_URL",
    )
    forecast_timeout_seconds: float = Field(default=10.0, alias="FORECAST_TIMEOUT_SECONDS")
    forecast_retry_attempts: int = Field(default=2, alias="FORECAST_RETRY_ATTEMPTS")
    forecast_days: int = Field(default=2, alias="FORECAST_DAYS")

    # ── Demo Session ──────────────────────────────────────────────────────
    starting_wallet: int = Field(default=25000, alias="STARTING_WALLET")
    default_ticket_value: int = Field(default=2500, alias="DEFAULT_TICKET_VALUE")
    preferences_path: str = Field(default=".pitchcover_prefs.json", alias="PREFERENCES_PATH")

    # ── Operational ────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="console", alias="LOG_FORMAT")


settings = Settings()
