"""
Tests for config.settings and config.validation.
"""
from __future__ import annotations

import pytest

from config.settings import Settings
from config.validation import ValidationConfig


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setattr(Settings, "DB_USER", "etl")
    monkeypatch.setattr(Settings, "DB_PASSWORD", "s3cret")


def test_missing_credentials_raise(monkeypatch):
    """Test that missing database credentials are reported by name."""
    monkeypatch.setattr(Settings, "DB_USER", None)
    monkeypatch.setattr(Settings, "DB_PASSWORD", "")

    with pytest.raises(ValueError) as exc_info:
        Settings()

    error_msg = str(exc_info.value)
    assert "DB_USER" in error_msg
    assert "DB_PASSWORD" in error_msg


def test_invalid_thresholds_raise(credentials, monkeypatch):
    """Test that a negative tolerance or a ceiling below 1.0 is rejected."""
    monkeypatch.setattr(Settings, "VALIDATION_COUNT_TOLERANCE", -1)
    with pytest.raises(ValueError):
        Settings()

    monkeypatch.setattr(Settings, "VALIDATION_COUNT_TOLERANCE", 2)
    monkeypatch.setattr(Settings, "VALIDATION_PERCENTAGE_CEILING", 0.9)
    with pytest.raises(ValueError):
        Settings()


def test_empty_home_team_raises(credentials, monkeypatch):
    """Test that the tracked team name is required."""
    monkeypatch.setattr(Settings, "HOME_TEAM_NAME", "  ")

    with pytest.raises(ValueError) as exc_info:
        Settings()

    assert "HOME_TEAM_NAME" in str(exc_info.value)


def test_validation_config_from_settings(credentials, monkeypatch):
    """Test that environment tolerances flow into the validation thresholds."""
    monkeypatch.setattr(Settings, "VALIDATION_COUNT_TOLERANCE", 0)
    monkeypatch.setattr(Settings, "VALIDATION_DEFAULT_COUNT_MAX", 50)

    config = Settings().validation_config()

    assert config.count_tolerance == 0
    assert config.count_max("tp") == 50
    assert config.count_max("red_cards") == 2


def test_repr_hides_password(credentials):
    """Test that the password never appears in the settings repr."""
    assert "s3cret" not in repr(Settings())


def test_validation_config_defaults():
    """Test the default thresholds."""
    config = ValidationConfig()

    assert config.count_tolerance == 2
    assert config.percentage_ceiling == 1.05
    assert config.count_max("yellow_cards") == 5
    assert config.count_max("total_engagements") == 100
