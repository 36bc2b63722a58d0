"""Custom exceptions used across keyreport."""


class ReportError(Exception):
    """Base error for the library."""


class ConfigError(ReportError):
    """Configuration related error."""


class ReportKeyError(ReportError):
    """Raised when the key schema cannot be built from the annotated types."""


class DuplicateKeyError(ReportKeyError):
    """Two reachable annotated fields resolve to the same key name."""


class InvalidKeyPlacementError(ReportKeyError):
    """A complex key annotates a field that is not a list."""


class TemplateStructureError(ReportError):
    """Raised when a template uses keys in an illegal place."""


class ValueFormatError(ReportError):
    """Raised when a value cannot be coerced to the declared data type."""
