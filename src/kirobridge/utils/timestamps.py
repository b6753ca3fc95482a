# src/kirobridge/utils/timestamps.py
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(dt: datetime) -> str:
    """Formats a datetime as UTC ISO-8601 with millisecond precision and a Z suffix.

    Example: 2026-10-19T08:15:30.123Z
    """
    u = dt.astimezone(timezone.utc)
    return u.strftime("%Y-%m-%dT%H:%M:%S.") + f"{u.microsecond // 1000:03d}Z"


def filesystem_safe_timestamp(dt: datetime) -> str:
    """Returns iso_timestamp() with ':' and '.' replaced by '-'.

    Names built this way sort lexicographically in chronological order.
    """
    return iso_timestamp(dt).replace(":", "-").replace(".", "-")
