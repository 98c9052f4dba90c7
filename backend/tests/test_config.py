"""Tests for configuration loading."""

from __future__ import annotations

import pytest

from people_admin import config

ENV_VARS = ("PEOPLE_API_BASE_URL", "PEOPLE_API_TIMEOUT", "PEOPLE_ADMIN_PORT")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Point the config dir at a temp dir and hide any real settings."""
    monkeypatch.setattr(config, "get_base_dir", lambda: tmp_path)
    monkeypatch.setattr(config, "_env_loaded", False)
    for name in ENV_VARS:
        # setenv first so monkeypatch restores the original state afterwards,
        # including variables that load_dotenv adds during the test.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return tmp_path


def test_defaults():
    assert config.get_api_base_url() == "http://localhost:3000"
    assert config.get_api_timeout() == 10.0
    assert config.get_port() == 8394


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PEOPLE_API_BASE_URL", "https://people.example.com/")
    monkeypatch.setenv("PEOPLE_API_TIMEOUT", "2.5")
    monkeypatch.setenv("PEOPLE_ADMIN_PORT", "9000")

    assert config.get_api_base_url() == "https://people.example.com"
    assert config.get_api_timeout() == 2.5
    assert config.get_port() == 9000


def test_invalid_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("PEOPLE_API_TIMEOUT", "soon")
    monkeypatch.setenv("PEOPLE_ADMIN_PORT", "eighty")

    assert config.get_api_timeout() == config.DEFAULT_API_TIMEOUT
    assert config.get_port() == config.DEFAULT_PORT


def test_env_file_is_loaded(isolated_env):
    (isolated_env / ".env").write_text(
        "PEOPLE_API_BASE_URL=http://api.internal:3000\nPEOPLE_ADMIN_PORT=8500\n",
        encoding="utf-8",
    )

    config.reload_env()

    assert config.get_api_base_url() == "http://api.internal:3000"
    assert config.get_port() == 8500


def test_ensure_base_dir_creates_directory(monkeypatch, tmp_path):
    target = tmp_path / "nested" / ".people-admin"
    monkeypatch.setattr(config, "get_base_dir", lambda: target)

    config.ensure_base_dir()

    assert target.is_dir()
    assert config.get_env_path() == target / ".env"
