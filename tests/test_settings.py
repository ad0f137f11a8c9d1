"""Tests for configuration settings."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from config.settings import Settings

pytestmark = pytest.mark.unit


def test_defaults(monkeypatch):
    for name in ("KINSHIP_DATA_PATH", "KINSHIP_DEFAULT_CLOSENESS", "KINSHIP_NOTIFY_ON_SUGGESTIONS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)

    assert settings.data_path == Path("./data")
    assert settings.port == 8000
    assert settings.default_closeness == 3
    assert settings.notify_on_suggestions is True
    assert settings.default_reminder_frequency_days == 7


def test_env_aliases(monkeypatch, tmp_path):
    monkeypatch.setenv("KINSHIP_DATA_PATH", str(tmp_path))
    monkeypatch.setenv("KINSHIP_NOTIFY_ON_SUGGESTIONS", "false")
    monkeypatch.setenv("KINSHIP_REMINDER_FREQUENCY_DAYS", "14")
    settings = Settings(_env_file=None)

    assert settings.people_db_path == tmp_path / "kinship.db"
    assert settings.notifications_db_path == tmp_path / "notifications.db"
    assert settings.notify_on_suggestions is False
    assert settings.default_reminder_frequency_days == 14


def test_field_names_accepted():
    settings = Settings(_env_file=None, default_closeness=5)
    assert settings.default_closeness == 5


def test_closeness_must_be_on_scale(monkeypatch):
    monkeypatch.setenv("KINSHIP_DEFAULT_CLOSENESS", "9")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
