from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = "local"
    service_name: str = "numberting-match"
    log_level: str = "INFO"

    # Unset is allowed at startup; match requests then fail with 500
    GEMINI_API_KEY: Optional[str] = None

    gemini_model: str = Field(default="gemini-2.5-flash-lite-preview-09-2025")
    gemini_api_base: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    upstream_timeout_s: Optional[float] = Field(
        default=60.0,
        description="Client-side timeout for the Gemini call in seconds. None disables it.",
    )
    validate_upstream_json: bool = Field(
        default=False,
        description="If true, the generated text must parse as a list of match results before it is relayed.",
    )

    otlp_endpoint: Optional[str] = None
    metrics_export_interval_ms: int = Field(default=60_000)

    host: str = "0.0.0.0"
    port: int = 8888


def get_settings() -> Settings:
    return Settings()
