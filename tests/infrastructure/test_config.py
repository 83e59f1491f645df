"""Tests for global configuration."""

import logging
from datetime import UTC

import pytest
from pydantic import ValidationError

from checkmate.domain.sprint import HealthThresholds
from checkmate.global_config import (
    CheckmateConfig,
    get_config_dir,
    get_global_config,
    save_global_config,
)


@pytest.fixture(autouse=True)
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("CHECKMATE_HOME", str(tmp_path / "home"))
    return tmp_path / "home"


def test_defaults_when_missing(home):
    config = get_global_config()

    assert config.default_session_minutes == 25
    assert config.default_tag_capacity == 10
    assert config.health == HealthThresholds(at_risk=0.85, off_track=1.0)
    assert config.upcoming_sprint_limit == 4
    assert config.resolve_data_dir() == home / "data"


def test_save_and_reload(home):
    save_global_config(CheckmateConfig(default_session_minutes=50, data_dir=str(home / "elsewhere")))

    config = get_global_config()

    assert config.default_session_minutes == 50
    assert config.resolve_data_dir() == home / "elsewhere"


def test_invalid_file_falls_back_to_defaults(home):
    get_config_dir()
    (home / "config.json").write_text('{"default_session_minutes": -5}', encoding="utf-8")

    assert get_global_config().default_session_minutes == 25


def test_corrupt_file_falls_back_to_defaults(home):
    get_config_dir()
    (home / "config.json").write_text("{{{", encoding="utf-8")

    assert get_global_config() == CheckmateConfig()


def test_invalid_file_is_logged(home, caplog):
    get_config_dir()
    (home / "config.json").write_text('{"upcoming_sprint_limit": "many"}', encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="checkmate.global_config"):
        config = get_global_config()

    assert config.upcoming_sprint_limit == 4
    assert "Ignoring invalid config file" in caplog.text


def test_timezone_setting():
    assert CheckmateConfig().zone() is None
    assert CheckmateConfig(timezone="utc").zone() is UTC


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError, match="Unknown timezone"):
        CheckmateConfig(timezone="Nowhere/Atlantis")
