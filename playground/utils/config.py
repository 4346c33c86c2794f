"""
Settings loaded from environment variables or a local .env file.
"""
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigurationError


class Settings(BaseSettings):
    """Client settings, read once at startup."""

    # Base URL of the sheet API server. Empty or relative means same-origin mode.
    SERVER_URL: Optional[str] = None
    # scheme://host the playground is served from, used in same-origin mode
    PUBLIC_ORIGIN: Optional[str] = None
    LOG_LEVEL: str = Field(default="INFO")
    HTTP_RETRIES: int = Field(default=1, ge=1)
    HTTP_BACKOFF: float = Field(default=1.0, ge=0)
    EXPORT_PATH: str = Field(default="./export")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def display_base(self) -> str:
        """Base URL as configured, used when building the displayed API url."""
        return (self.SERVER_URL or "").rstrip("/")

    def request_base(self) -> str:
        """Absolute base URL the HTTP requests are sent to."""
        base = self.display_base
        if base.startswith("http"):
            return base
        if self.PUBLIC_ORIGIN:
            return self.PUBLIC_ORIGIN.rstrip("/") + base
        raise ConfigurationError(
            "SERVER_URL is not an absolute URL and PUBLIC_ORIGIN is not set"
        )


settings = Settings()
