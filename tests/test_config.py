import pytest
from pydantic import ValidationError

from revisor.config import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("REVISOR_WEEKLY_AVAILABLE_DAYS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.weekly_available_days == 5
    assert settings.lock_timeout_seconds == 5.0
    assert settings.log_level == "WARNING"
    assert settings.db_path.endswith("revisor.db")


def test_env_override(monkeypatch, tmp_db):
    monkeypatch.setenv("REVISOR_DB_PATH", tmp_db)
    monkeypatch.setenv("REVISOR_WEEKLY_AVAILABLE_DAYS", "3")
    settings = Settings(_env_file=None)
    assert settings.db_path == tmp_db
    assert settings.weekly_available_days == 3


def test_rejects_more_than_a_week(monkeypatch):
    monkeypatch.setenv("REVISOR_WEEKLY_AVAILABLE_DAYS", "8")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
