"""`keyreport` binds annotated data classes to spreadsheet templates."""

# Module responsibilities:
# - Re-export the report facade, key declarations and error types so consumers have a stable API surface.
# - Provide the package version.

from __future__ import annotations

from .config import ReportSettings, load_settings
from .errors import (
    ConfigError,
    DuplicateKeyError,
    InvalidKeyPlacementError,
    ReportError,
    ReportKeyError,
    TemplateStructureError,
    ValueFormatError,
)
from .filler import TemplateFiller, fill_template
from .keys import DataType, KeyType, ReportKey, report_key
from .report import Report
from .schema import KeyBinding, KeySchema, build_schema
from .validator import TemplateValidator, validate_template

__all__ = [
    "Report",
    "ReportKey",
    "report_key",
    "KeyType",
    "DataType",
    "KeyBinding",
    "KeySchema",
    "build_schema",
    "TemplateValidator",
    "validate_template",
    "TemplateFiller",
    "fill_template",
    "ReportSettings",
    "load_settings",
    "ReportError",
    "ReportKeyError",
    "DuplicateKeyError",
    "InvalidKeyPlacementError",
    "TemplateStructureError",
    "ValueFormatError",
    "ConfigError",
]

__version__ = "0.1.0"
