"""Settings loading and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from keyreport.config import ReportSettings, load_settings
from keyreport.errors import ConfigError
from keyreport.utils import log as log_utils


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults() -> None:
    settings = load_settings()

    assert settings.metadata_sheet == "REPORT_KEYS"
    assert settings.counter_key == "key_counter"
    assert settings.content_sheet == "Sheet1"
    assert settings.timezone == "UTC"
    assert settings.log_dir is None


def test_yaml_section_and_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(
        tmp_path / "settings.yaml",
        "keyreport:\n  metadata_sheet: KEYS\n  counter_key: row_no\n  timezone: Europe/Berlin\n",
    )
    monkeypatch.setenv("KEYREPORT_COUNTER_KEY", "idx")

    settings = load_settings(path)

    assert settings.metadata_sheet == "KEYS"
    assert settings.counter_key == "idx"
    assert settings.timezone == "Europe/Berlin"
    assert settings.tzinfo.key == "Europe/Berlin"


def test_plain_mapping_without_section(tmp_path: Path) -> None:
    path = _write(tmp_path / "settings.yaml", "content_sheet: Main\nlog_dir: logs\n")

    settings = load_settings(path)

    assert settings.content_sheet == "Main"
    assert settings.log_dir == Path("logs")


@pytest.mark.parametrize(
    "text",
    [
        "timezone: Mars/Olympus\n",
        "counter_key: '   '\n",
        "unknown_option: 1\n",
        "- just\n- a list\n",
        "keyreport: 5\n",
    ],
)
def test_invalid_settings_raise_config_error(tmp_path: Path, text: str) -> None:
    path = _write(tmp_path / "settings.yaml", text)

    with pytest.raises(ConfigError):
        load_settings(path)


def test_invalid_env_value_raises_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KEYREPORT_TIMEZONE", "Nowhere/City")

    with pytest.raises(ConfigError):
        load_settings()


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_settings(tmp_path / "absent.yaml")


def test_settings_are_frozen() -> None:
    settings = ReportSettings()

    with pytest.raises(ValidationError):
        settings.counter_key = "other"  # type: ignore[misc]


def test_log_dir_adds_rotating_file(tmp_path: Path) -> None:
    log_utils.reset_logging()
    try:
        log_utils.configure_logging(tmp_path / "logs", level=logging.DEBUG)
        logger = log_utils.get_logger("tests")
        logger.info("hello from tests")
        for handler in logging.getLogger("keyreport").handlers:
            handler.flush()

        assert logger.name == "keyreport.tests"
        content = (tmp_path / "logs" / "keyreport.log").read_text(encoding="utf-8")
        assert "hello from tests" in content
    finally:
        log_utils.reset_logging()
        log_utils.configure_logging()
