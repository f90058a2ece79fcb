"""Tests for application settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from rgbreg.config import Settings
from rgbreg.registry.database import normalize_database_url


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.api_port == 3001
    assert settings.conflict_status_code == 409
    assert settings.keepalive_interval_seconds == 600
    assert not settings.keepalive_enabled


def test_port_from_env(monkeypatch):
    """Test the PORT variable used by hosting platforms is honoured."""
    monkeypatch.setenv("PORT", "8080")

    assert Settings(_env_file=None).api_port == 8080


def test_origin_enables_keepalive(monkeypatch):
    monkeypatch.setenv("ORIGIN", "https://reg.example.com")
    monkeypatch.setenv("KEEPALIVE_INTERVAL_SECONDS", "30")

    settings = Settings(_env_file=None)

    assert settings.keepalive_enabled
    assert settings.keepalive_interval_seconds == 30
    assert settings.get_safe_dict()["keepalive"]["origin"] == "https://reg.example.com"


def test_database_url_is_redacted():
    settings = Settings(
        _env_file=None, database_url="postgresql+asyncpg://reg:hunter2@db:5432/reg"
    )

    safe = settings.get_safe_dict()

    assert safe["database_url"] == "postgresql+asyncpg://reg:***@db:5432/reg"
    assert settings.sqlite_path is None


def test_sqlite_path_and_data_dir(tmp_path):
    """Test the SQLite parent directory is created on demand."""
    db_file = tmp_path / "nested" / "data" / "registrations.db"
    settings = Settings(_env_file=None, database_url=f"sqlite:///{db_file}")

    settings.ensure_data_dir()

    assert settings.sqlite_path == Path(str(db_file))
    assert db_file.parent.is_dir()


def test_memory_database_has_no_path():
    settings = Settings(_env_file=None, database_url="sqlite+aiosqlite:///:memory:")

    assert settings.sqlite_path is None
    settings.ensure_data_dir()


def test_sqlite_url_upgraded_to_async_driver():
    assert normalize_database_url("sqlite:///./data/r.db") == "sqlite+aiosqlite:///./data/r.db"
    assert normalize_database_url("sqlite+aiosqlite:///x.db") == "sqlite+aiosqlite:///x.db"
    assert normalize_database_url("postgresql+asyncpg://h/db") == "postgresql+asyncpg://h/db"


@pytest.mark.parametrize("code", [200, 399, 600, 1000])
def test_conflict_status_must_be_an_error_code(code):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, conflict_status_code=code)


def test_legacy_conflict_status_accepted():
    settings = Settings(_env_file=None, conflict_status_code=500)

    assert settings.conflict_status_code == 500
