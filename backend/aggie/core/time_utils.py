"""Timestamp helpers shared by the store and the query layer."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

_DIGITS = re.compile(r"\d+")


def date_from_iso8601(value: str) -> datetime:
    """Read the numeric runs of ``value`` as year, month, day, hour, minute, second.

    Anything after the seconds (fractions, zone offsets) is ignored and the
    result is naive. Missing time components default to zero.

    Raises:
        ValueError: fewer than three numeric components, or an impossible date.
    """
    parts = [int(p) for p in _DIGITS.findall(str(value or ""))]
    if len(parts) < 3:
        raise ValueError(f"not a date-time: {value!r}")
    parts = (parts + [0, 0, 0])[:6]
    return datetime(*parts)


def to_timestamp(value: Any) -> str:
    """Normalise a datetime or date-time string to the stored sortable form."""
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    return date_from_iso8601(value).strftime(TIMESTAMP_FORMAT)


def utcnow_timestamp() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)
