from __future__ import annotations

from datetime import date, datetime
from typing import Any


def local_now() -> datetime:
    """Server-side 'now' in local time (naive), second precision."""
    return datetime.now().replace(microsecond=0)


def today_iso() -> str:
    """Submission date stored as YYYY-MM-DD."""
    return date.today().isoformat()


def timestamp_iso(dt: datetime | None = None) -> str:
    """Creation timestamp stored as 'YYYY-MM-DD HH:MM:SS'."""
    return (dt or local_now()).isoformat(sep=" ", timespec="seconds")


def to_json_value(value: Any) -> Any:
    """
    Make a column value JSON friendly.

    Dates and datetimes become ISO-8601 strings; bytes are decoded when
    possible. Everything else passes through untouched.
    """
    if isinstance(value, datetime):
        return value.isoformat(sep=" ", timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return value
