"""
CuraChef - Configuration and settings.

Settings are read from the environment and an optional `.env` file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CurachefSettings(BaseSettings):
    """
    Application settings.

    The OpenAI key is optional at load time so that offline commands
    (sign-up, preferences, health) work without one. Generation calls
    fail with a readable error when it is missing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str | None = None
    curachef_model: str = "gpt-4.1-mini"

    # Application
    curachef_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Prompt logging
    # CURACHEF_LOG_PROMPTS=1 - log to local files (dev only)
    curachef_log_prompts: bool = False
    curachef_prompt_log_dir: Path = Path("prompt_logs")

    # User store
    curachef_user_store: Path = Path("users.json")
    curachef_seed_users: Path | None = None  # Copied into an empty store on first read

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> CurachefSettings:
    """Get cached settings instance."""
    return CurachefSettings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: CurachefSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
