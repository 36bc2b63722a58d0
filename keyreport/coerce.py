"""Type-directed conversion of field values into cell values."""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import Decimal
from typing import Any, Callable, Dict, List

from .errors import ValueFormatError

FORMAT_ERROR = "Field datatype does not match the ReportKey datatype."

NAN_MARKER = "#NUM!"
INFINITY_MARKER = "#DIV/0!"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
_WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

_TOKEN_RE = re.compile(r"'(?:[^']|'')*'|([A-Za-z])\1*|[^A-Za-z']+")


def to_text(value: Any) -> str:
    return "" if value is None else str(value)


def to_number(value: Any) -> float | str:
    """Parse ``value`` as a float; NaN and infinities become error markers."""

    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError as exc:
            raise ValueFormatError(FORMAT_ERROR) from exc
    if math.isnan(number):
        return NAN_MARKER
    if math.isinf(number):
        return INFINITY_MARKER
    return number


def to_datetime(value: Any, tz: tzinfo) -> datetime:
    """Interpret ``value`` as epoch milliseconds (or a date/datetime) in ``tz``.

    The result is naive, expressed as wall time in ``tz``.
    """

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        millis = int(str(value).strip())
    except ValueError as exc:
        raise ValueFormatError(FORMAT_ERROR) from exc
    try:
        moment = _EPOCH + timedelta(milliseconds=millis)
        return moment.astimezone(tz).replace(tzinfo=None)
    except OverflowError as exc:
        raise ValueFormatError(f"Timestamp out of range: {millis}") from exc


def _pad(number: int, width: int) -> str:
    return str(number).zfill(width)


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


def _render_year(moment: datetime, width: int) -> str:
    if width == 2:
        return _pad(moment.year % 100, 2)
    return _pad(moment.year, width)


def _render_month(moment: datetime, width: int) -> str:
    if width >= 4:
        return _MONTHS[moment.month - 1]
    if width == 3:
        return _MONTHS[moment.month - 1][:3]
    return _pad(moment.month, width)


def _render_weekday(moment: datetime, width: int) -> str:
    name = _WEEKDAYS[moment.weekday()]
    return name if width >= 4 else name[:3]


_FIELDS: Dict[str, Callable[[datetime, int], str]] = {
    "y": _render_year,
    "M": _render_month,
    "d": lambda m, w: _pad(m.day, w),
    "H": lambda m, w: _pad(m.hour, w),
    "k": lambda m, w: _pad(m.hour or 24, w),
    "h": lambda m, w: _pad(_hour12(m), w),
    "K": lambda m, w: _pad(m.hour % 12, w),
    "m": lambda m, w: _pad(m.minute, w),
    "s": lambda m, w: _pad(m.second, w),
    "S": lambda m, w: _pad(m.microsecond // 1000, w),
    "a": lambda m, w: "AM" if m.hour < 12 else "PM",
    "E": _render_weekday,
}


def format_pattern(moment: datetime, pattern: str) -> str:
    """Render ``moment`` with a ``dd.MM.yyyy``-style pattern.

    Letters repeat to set width (``d`` vs ``dd``); text in single quotes is
    literal and ``''`` is a quote. Unknown letters raise ``ValueFormatError``.
    """

    parts: List[str] = []
    for match in _TOKEN_RE.finditer(pattern):
        token = match.group(0)
        if token.startswith("'"):
            parts.append(token[1:-1].replace("''", "'") if token != "''" else "'")
        elif match.group(1):
            render = _FIELDS.get(token[0])
            if render is None:
                raise ValueFormatError(f"Unsupported pattern letter '{token[0]}' in {pattern!r}")
            parts.append(render(moment, len(token)))
        else:
            parts.append(token)
    return "".join(parts)


__all__ = [
    "to_text",
    "to_number",
    "to_datetime",
    "format_pattern",
    "NAN_MARKER",
    "INFINITY_MARKER",
    "FORMAT_ERROR",
]
