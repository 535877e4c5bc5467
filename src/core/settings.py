from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from .constraint import DEFAULT_CONFIG_PATH, ENV_PREFIX


class Settings(BaseSettings):
    """Application runtime settings sourced from environment variables.

    Every field except ``config_path`` and ``log_level`` defaults to ``None``
    so that an unset variable leaves the TOML configuration untouched.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_file=".env", extra="ignore")

    config_path: Path = DEFAULT_CONFIG_PATH
    strategy: str | None = None
    host: str | None = None
    port: int | None = None
    cors_origins: str | None = None
    request_timeout_s: float | None = None
    rate_limit_max: int | None = None
    rate_limit_window_s: float | None = None
    expose_error_details: bool | None = None
    log_level: str = "INFO"

    def cors_origin_list(self) -> list[str] | None:
        if self.cors_origins is None:
            return None
        return [item.strip() for item in self.cors_origins.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
