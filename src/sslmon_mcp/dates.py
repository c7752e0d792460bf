"""
Date normalization for registry data.

WHOIS servers print dates in whatever shape their software prefers.
normalize_date() maps the shapes we know about onto one canonical UTC
timestamp, e.g. "2018-05-18T23:33:35.000Z", and hands back the input
untouched when none of them fits.
"""

import re
from datetime import datetime, timezone

from dateutil import parser as dtparser

ISO_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T")
ZONED_TIME_RE = re.compile(r"\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?\s*(?:Z|[+-]\d{2}:?\d{2})$", re.IGNORECASE)
DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
SPACED_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}\s+\d{2}:\d{2}:\d{2}$")
MONTH_ABBR_RE = re.compile(r"\d{2}-[A-Za-z]{3}-\d{4}")


def to_iso8601(dt: datetime) -> str:
    """Format a datetime as UTC with millisecond precision and a Z suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
        f".{dt.microsecond // 1000:03d}Z"
    )


def _parse_ymd(value: str) -> datetime | None:
    try:
        return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def _parse_generic(value: str) -> datetime | None:
    try:
        return dtparser.parse(value)
    except (ValueError, OverflowError):
        return None


def _parse_iso(value: str) -> datetime | None:
    try:
        return dtparser.isoparse(value)
    except (ValueError, OverflowError):
        return None


def _parse_spaced(value: str) -> datetime | None:
    # Registries in double-byte locales print "YYYY-MM-DD HH:MM:SS" without a zone; read it as UTC.
    try:
        dt = datetime.strptime(re.sub(r"\s+", "T", value, count=1), "%Y-%m-%dT%H:%M:%S")
    except ValueError:
        return None
    return dt.replace(tzinfo=timezone.utc)


def _parse_slashed(value: str) -> datetime | None:
    """
    Read DD/MM/YYYY or MM/DD/YYYY.

    The two layouts cannot be told apart from the text, so month-first is
    tried and day-first is the fallback. "03/04/2020" therefore always
    comes out as March 4th.
    """
    parts = value.split("/")
    if len(parts) != 3:
        return None
    return (
        _parse_ymd(f"{parts[2]}-{parts[0]}-{parts[1]}")
        or _parse_ymd(f"{parts[2]}-{parts[1]}-{parts[0]}")
    )


def parse_date(value: str) -> datetime | None:
    """Interpret a raw date string, or return None if no known shape fits."""
    value = value.strip()
    if not value:
        return None

    if ISO_DATETIME_RE.match(value) or ZONED_TIME_RE.search(value):
        if dt := _parse_iso(value):
            return dt

    if DATE_ONLY_RE.match(value):
        if dt := _parse_ymd(value):
            return dt

    if SPACED_DATETIME_RE.match(value):
        if dt := _parse_spaced(value):
            return dt

    if "/" in value:
        if dt := _parse_slashed(value):
            return dt

    if MONTH_ABBR_RE.search(value):
        if dt := _parse_generic(value):
            return dt

    return _parse_generic(value)


def normalize_date(value: str) -> str:
    """
    Normalize a registry date string to the canonical UTC form.

    Never raises: an unrecognized value comes back stripped but otherwise
    unchanged.

    >>> normalize_date("2018-05-18 23:33:35")
    '2018-05-18T23:33:35.000Z'
    >>> normalize_date("invalid-date")
    'invalid-date'
    """
    dt = parse_date(value)
    if dt is None:
        return value.strip()
    return to_iso8601(dt)
