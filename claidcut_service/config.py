"""
Configuration loader for the ClaidCut background-removal gateway.

Environment variables are centralized here to keep the rest of the code
focused on the provider call and to make operational tuning clear.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .providers import OUTPUT_FORMATS, Provider

DEFAULT_ENDPOINT = "https://api.edenai.run/v2/image/background_removal"
DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Eden AI
    eden_ai_api_key: Optional[str] = None
    eden_ai_endpoint: str = DEFAULT_ENDPOINT
    removal_provider: Provider = Provider.CLIPDROP
    output_format: str = "png"

    # Input limits
    max_image_bytes: int = Field(DEFAULT_MAX_IMAGE_BYTES, gt=0)

    # Outbound call
    connect_timeout_seconds: float = Field(5.0, gt=0)
    request_timeout_seconds: float = Field(60.0, gt=0)
    retry_attempts: int = Field(1, ge=1)
    retry_backoff_seconds: float = Field(1.0, ge=0)

    # API
    cors_allow_origins: str = "*"  # comma separated
    log_level: str = "INFO"

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        v = v.lower()
        if v not in OUTPUT_FORMATS:
            raise ValueError("OUTPUT_FORMAT must be one of png|jpg|webp")
        return v

    @field_validator("eden_ai_api_key")
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def timeout(self) -> tuple[float, float]:
        """(connect, read) pair in the shape `requests` expects."""
        return (self.connect_timeout_seconds, self.request_timeout_seconds)

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings to avoid reparsing env on every call."""
    return Settings()
