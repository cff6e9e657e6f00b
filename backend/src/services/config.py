"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_DATABASE_PATH = PROJECT_ROOT / "data" / "notes.db"
DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:3000"


class AppConfig(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    database_path: Path = Field(
        default=DEFAULT_DATABASE_PATH, description="SQLite file holding users, notes and logs"
    )
    activity_log_capacity: int = Field(
        default=100, ge=1, description="Maximum number of activity log entries retained"
    )
    active_window_seconds: int = Field(
        default=300, ge=1, description="Presence window for counting a user as active"
    )
    openai_api_key: Optional[str] = Field(
        default=None, description="OpenAI key for note generation (preferred provider)"
    )
    openai_model: str = Field(default="gpt-4o-mini")
    gemini_api_key: Optional[str] = Field(
        default=None, description="Google Gemini key, used when no OpenAI key is set"
    )
    gemini_model: str = Field(default="gemini-2.5-pro")
    generator_timeout_seconds: float = Field(default=30.0, gt=0)
    cors_origins: list[str] = Field(
        default_factory=lambda: DEFAULT_CORS_ORIGINS.split(",")
    )

    @field_validator("database_path", mode="before")
    @classmethod
    def _normalize_database_path(cls, value: str | Path | None) -> Path:
        if value is None or value == "":
            raise ValueError("DATABASE_PATH cannot be empty")
        path = value if isinstance(value, Path) else Path(value)
        return path.expanduser().resolve()

    @field_validator("openai_api_key", "gemini_api_key", mode="before")
    @classmethod
    def _blank_key_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def active_window_ms(self) -> int:
        return self.active_window_seconds * 1000


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration."""
    config = AppConfig(
        database_path=_read_env("DATABASE_PATH", str(DEFAULT_DATABASE_PATH)),
        activity_log_capacity=int(_read_env("ACTIVITY_LOG_CAPACITY", "100")),
        active_window_seconds=int(_read_env("ACTIVE_WINDOW_SECONDS", "300")),
        openai_api_key=_read_env("OPENAI_API_KEY"),
        openai_model=_read_env("OPENAI_MODEL", "gpt-4o-mini"),
        gemini_api_key=_read_env("GEMINI_API_KEY"),
        gemini_model=_read_env("GEMINI_MODEL", "gemini-2.5-pro"),
        generator_timeout_seconds=float(_read_env("GENERATOR_TIMEOUT_SECONDS", "30")),
        cors_origins=_read_env("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
    )
    # Ensure the data directory exists for downstream services.
    config.database_path.parent.mkdir(parents=True, exist_ok=True)
    return config


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "PROJECT_ROOT",
    "DEFAULT_DATABASE_PATH",
]
