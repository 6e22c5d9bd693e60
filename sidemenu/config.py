from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

from dotenv import find_dotenv, load_dotenv


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path, override=False)


_load_env()


def _get_env(key: str, default: str | None = None) -> str | None:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_list(key: str, default: list[str] | None = None) -> list[str]:
    value = os.getenv(key)
    if value is None or not value.strip():
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    database_url: str = field(
        default_factory=lambda: _get_env("DATABASE_URL", "sqlite:///./floating-side-menu.db")
    )
    site_url: str = field(default_factory=lambda: _get_env("SITE_URL", "http://localhost"))
    history_limit: int = field(default_factory=lambda: _get_int("HISTORY_LIMIT", 20))

    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO") or "INFO")
    log_dir: str | None = field(default_factory=lambda: _get_env("LOG_DIR"))

    cors_allow_origins: list[str] = field(default_factory=lambda: _get_list("CORS_ALLOW_ORIGINS", ["*"]))
    cors_allow_credentials: bool = field(default_factory=lambda: _get_bool("CORS_ALLOW_CREDENTIALS", False))


_settings: Settings | None = None
_runtime_overrides: dict[str, Any] = {}


def _apply_runtime_overrides(settings: Settings) -> None:
    if not _runtime_overrides:
        return
    for key, value in _runtime_overrides.items():
        if value is None:
            continue
        if hasattr(settings, key):
            setattr(settings, key, value)


def update_runtime_overrides(overrides: dict[str, Any]) -> None:
    if not overrides:
        return
    for key, value in overrides.items():
        if value is None:
            continue
        _runtime_overrides[key] = value
    if _settings is not None:
        _apply_runtime_overrides(_settings)


def get_runtime_overrides() -> dict[str, Any]:
    return dict(_runtime_overrides)


def clear_runtime_overrides() -> None:
    _runtime_overrides.clear()


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    _apply_runtime_overrides(_settings)
    return _settings


def refresh_settings() -> Settings:
    """Rebuild settings from environment variables."""
    global _settings
    _settings = Settings()
    _apply_runtime_overrides(_settings)
    return _settings


__all__ = [
    "Settings",
    "get_settings",
    "refresh_settings",
    "update_runtime_overrides",
    "get_runtime_overrides",
    "clear_runtime_overrides",
]
