"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """accesslog configuration — loaded from env vars / .env file."""

    default_format: str = Field(
        default="combined",
        description="Named format (common|vhost_common|combined|referer|agent) or LogFormat string",
    )
    log_level: str = Field(default="WARNING", description="Logging level for the CLI")
    max_rows: int = Field(default=100, description="Row cap for table output")

    class Config:
        env_prefix = "ACCESSLOG_"
        env_file = ".env"


settings = Settings()
