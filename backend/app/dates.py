"""Scalar date codec.

Clients send dates as ``YYYY-MM-DD`` strings, full RFC 3339 timestamps, or
placeholders such as ``""``/``"undefined"``. Everything is normalized to a
``datetime.date`` in Python, persisted as the instant at midnight UTC, and
written back out as ``YYYY-MM-DD``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Annotated, Any, Callable, Optional

from pydantic import BeforeValidator, PlainSerializer
from sqlalchemy import DateTime, String
from sqlalchemy.types import TypeDecorator

from .errors import ValidationError

# purpose: single source of truth for date parsing/formatting across wire and storage
# status: active

ABSENT_TOKENS = frozenset({"", "undefined", "null"})

_DATE_ONLY = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$", re.ASCII)
_TIMESTAMP = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(Z|z|[+-]\d{2}:\d{2})$",
    re.ASCII,
)
_TIMESTAMP_FRACTIONAL = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})\.(\d{1,9})(Z|z|[+-]\d{2}:\d{2})$",
    re.ASCII,
)


class DateDecodeError(ValidationError, ValueError):
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"invalid date format: {value!r}, expected YYYY-MM-DD")


def _offset(token: str) -> timezone:
    if token in ("Z", "z"):
        return timezone.utc
    sign = -1 if token[0] == "-" else 1
    hours, minutes = int(token[1:3]), int(token[4:6])
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _parse_date_only(raw: str) -> date | None:
    match = _DATE_ONLY.match(raw)
    if not match:
        return None
    try:
        return date(*(int(part) for part in match.groups()))
    except ValueError:
        return None


def _parse_timestamp(raw: str) -> date | None:
    match = _TIMESTAMP.match(raw)
    if not match:
        return None
    *parts, offset = match.groups()
    try:
        stamp = datetime(*(int(p) for p in parts), tzinfo=_offset(offset))
    except ValueError:
        return None
    return stamp.date()


def _parse_timestamp_fractional(raw: str) -> date | None:
    match = _TIMESTAMP_FRACTIONAL.match(raw)
    if not match:
        return None
    *parts, fraction, offset = match.groups()
    micro = int(fraction[:6].ljust(6, "0"))
    try:
        stamp = datetime(*(int(p) for p in parts), micro, tzinfo=_offset(offset))
    except ValueError:
        return None
    return stamp.date()


# Order matters: a string valid as both a date and a timestamp is a date.
PARSERS: tuple[Callable[[str], date | None], ...] = (
    _parse_date_only,
    _parse_timestamp,
    _parse_timestamp_fractional,
)


def decode(raw: Any) -> date | None:
    """Return the date carried by ``raw`` or ``None`` when it is absent.

    Timestamps keep the calendar date they were written with; the time of
    day and the offset are dropped. Aware ``datetime`` objects (as returned
    by the database driver) are read in UTC.
    """

    if raw is None:
        return None
    if isinstance(raw, datetime):
        if raw.tzinfo is not None:
            raw = raw.astimezone(timezone.utc)
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, bytes):
        raw = raw.decode()
    if not isinstance(raw, str):
        raise DateDecodeError(raw)
    text = raw.strip()
    if text in ABSENT_TOKENS:
        return None
    for parser in PARSERS:
        parsed = parser(text)
        if parsed is not None:
            return parsed
    raise DateDecodeError(raw)


def encode(value: date | datetime | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        value = decode(value)
    return value.isoformat()


def to_instant(value: date) -> datetime:
    """Canonical stored instant: midnight UTC of ``value``."""
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


class ScalarDate(TypeDecorator):
    """Date column stored as a midnight-UTC instant.

    SQLite has no native timestamp type, so the instant is kept as ISO text
    there. Reads go through :func:`decode`, which also accepts legacy rows
    holding full timestamps.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(40))
        return dialect.type_descriptor(DateTime(timezone=True))

    def process_bind_param(self, value, dialect):
        value = decode(value)
        if value is None:
            return None
        instant = to_instant(value)
        if dialect.name == "sqlite":
            return instant.isoformat()
        return instant

    def process_result_value(self, value, dialect):
        return decode(value)


WireDate = Annotated[
    Optional[date],
    BeforeValidator(decode),
    PlainSerializer(encode, return_type=Optional[str]),
]
