"""Declarations that mark fields of data classes as report keys."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

REPORT_KEY_METADATA = "keyreport.report_key"

DEFAULT_DATE_FORMAT = "dd.MM.yyyy"
DEFAULT_TIME_FORMAT = "HH:mm:ss"


class KeyType(str, Enum):
    """How a key is bound: one scalar or a list of sub-objects."""

    SINGLE = "SINGLE"
    COMPLEX = "COMPLEX"


class DataType(str, Enum):
    """Target representation of a single key's value."""

    TEXT = "TEXT"
    NUMERIC = "NUMERIC"
    DATE = "DATE"
    TIME = "TIME"
    IMAGE = "IMAGE"


@dataclass(frozen=True)
class ReportKey:
    """Key options attached to a field.

    Use it as ``Annotated`` metadata or through :func:`report_key` on dataclass
    fields. ``name`` and ``description`` are derived from the declaring class and
    field name when left as ``None``.
    """

    name: str | None = None
    description: str | None = None
    key_type: KeyType = KeyType.SINGLE
    data_type: DataType = DataType.TEXT
    temporary: bool = False
    date_format: str = DEFAULT_DATE_FORMAT
    time_format: str = DEFAULT_TIME_FORMAT


def report_key(
    name: str | None = None,
    *,
    description: str | None = None,
    key_type: KeyType = KeyType.SINGLE,
    data_type: DataType = DataType.TEXT,
    temporary: bool = False,
    date_format: str = DEFAULT_DATE_FORMAT,
    time_format: str = DEFAULT_TIME_FORMAT,
    default: Any = None,
    default_factory: Callable[[], Any] | None = None,
) -> Any:
    """Return a ``dataclasses.field`` carrying a :class:`ReportKey`.

    The field defaults to ``None`` unless ``default`` or ``default_factory`` is given.
    """

    key = ReportKey(
        name=name,
        description=description,
        key_type=key_type,
        data_type=data_type,
        temporary=temporary,
        date_format=date_format,
        time_format=time_format,
    )
    metadata = {REPORT_KEY_METADATA: key}
    if default_factory is not None:
        return dataclasses.field(default_factory=default_factory, metadata=metadata)
    return dataclasses.field(default=default, metadata=metadata)


__all__ = [
    "KeyType",
    "DataType",
    "ReportKey",
    "report_key",
    "REPORT_KEY_METADATA",
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_TIME_FORMAT",
]
