"""Settings for report generation.

Values come from defaults, an optional YAML file and ``KEYREPORT_*``
environment variables, in that order of precedence (env wins).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

METADATA_SHEET = "REPORT_KEYS"
COUNTER_KEY = "key_counter"
CONTENT_SHEET = "Sheet1"

ENV_OVERRIDES: Dict[str, str] = {
    "KEYREPORT_METADATA_SHEET": "metadata_sheet",
    "KEYREPORT_COUNTER_KEY": "counter_key",
    "KEYREPORT_CONTENT_SHEET": "content_sheet",
    "KEYREPORT_TIMEZONE": "timezone",
    "KEYREPORT_LOG_DIR": "log_dir",
}


class ReportSettings(BaseModel):
    """Reserved names and conversion options shared by schema, template and filler."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    metadata_sheet: str = METADATA_SHEET
    counter_key: str = COUNTER_KEY
    content_sheet: str = CONTENT_SHEET
    timezone: str = "UTC"
    log_dir: Path | None = Field(default=None)

    @field_validator("metadata_sheet", "counter_key", "content_sheet")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("reserved names must not be blank")
        return value

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown time zone: {value}") from exc
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Settings file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        payload = yaml.safe_load(fh) or {}
    if not isinstance(payload, dict):
        raise ConfigError("Invalid settings YAML structure (expected mapping)")
    return payload


def load_settings(path: str | Path | None = None) -> ReportSettings:
    """Load settings from YAML (optional) and apply environment overrides.

    Args:
        path: Optional settings YAML. A ``keyreport`` top-level section is used
            when present, otherwise the whole document.

    Returns:
        Validated ``ReportSettings``.

    Raises:
        ConfigError: When the file is missing or a value is invalid.
    """

    data: Dict[str, Any] = {}
    if path is not None:
        payload = _read_yaml(Path(path))
        section = payload.get("keyreport", payload)
        if not isinstance(section, dict):
            raise ConfigError("Invalid 'keyreport' section (expected mapping)")
        data.update(section)

    for env_key, field_name in ENV_OVERRIDES.items():
        value = os.getenv(env_key)
        if value is not None and value.strip():
            data[field_name] = value.strip()

    try:
        return ReportSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid keyreport settings: {exc}") from exc


__all__ = ["ReportSettings", "load_settings", "METADATA_SHEET", "COUNTER_KEY", "CONTENT_SHEET"]
