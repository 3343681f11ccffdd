"""Application settings.

Values are read from ``CHESSMATCH_*`` environment variables by pydantic-settings, falling back to the defaults below.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# loguru's built-in levels
LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Configuration for persistence and logging."""

    model_config = SettingsConfigDict(env_prefix="CHESSMATCH_", env_ignore_empty=True)

    database_url: str = Field(default="sqlite:///chessmatch.db", min_length=1)
    echo_sql: bool = False
    log_level: LogLevel = "INFO"
    log_file: str | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept level names in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value


def load_settings() -> Settings:
    """Build Settings from the process environment."""
    return Settings()
