"""Configuration management for people-admin.

Loads environment variables from ~/.people-admin/.env and provides
getters for the people API location, request timeout, and server port.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_PORT: int = 8394
DEFAULT_API_BASE_URL: str = "http://localhost:3000"
DEFAULT_API_TIMEOUT: float = 10.0

ENV_FILENAME: str = ".env"


def get_base_dir() -> Path:
    return Path("~/.people-admin").expanduser()


def get_env_path() -> Path:
    """Return the path to ~/.people-admin/.env."""
    return get_base_dir() / ENV_FILENAME


def ensure_base_dir() -> None:
    """Create ~/.people-admin/ if it does not exist."""
    get_base_dir().mkdir(parents=True, exist_ok=True)


def get_port() -> int:
    _ensure_env_loaded()
    raw = os.getenv("PEOPLE_ADMIN_PORT")
    if raw is not None:
        try:
            return int(raw)
        except ValueError:
            pass
    return DEFAULT_PORT


def get_api_base_url() -> str:
    """Return the people API root, without a trailing slash."""
    _ensure_env_loaded()
    raw = os.getenv("PEOPLE_API_BASE_URL", "").strip()
    return (raw or DEFAULT_API_BASE_URL).rstrip("/")


def get_api_timeout() -> float:
    _ensure_env_loaded()
    raw = os.getenv("PEOPLE_API_TIMEOUT")
    if raw is not None:
        try:
            return float(raw)
        except ValueError:
            pass
    return DEFAULT_API_TIMEOUT


_env_loaded: bool = False


def _ensure_env_loaded() -> None:
    global _env_loaded
    if _env_loaded:
        return
    env_path = get_env_path()
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)
    _env_loaded = True


def reload_env() -> None:
    global _env_loaded
    _env_loaded = False
    _ensure_env_loaded()
