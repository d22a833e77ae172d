from __future__ import annotations

from datetime import datetime, timezone


def parse_ymd(value: str) -> int:
    """Convert a "yyyy-mm-dd" date (UTC) into seconds since the epoch."""
    parts = value.strip().split("-")
    if len(parts) != 3:
        raise ValueError(f"Invalid date '{value}'. Use yyyy-mm-dd.")
    year, month, day = (int(p) for p in parts)
    return int(datetime(year, month, day, tzinfo=timezone.utc).timestamp())


def utc_date_parts(ts: int) -> tuple[int, int, int]:
    """Return (year, month, day) for a timestamp, with the month 0-indexed."""
    dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    return dt.year, dt.month - 1, dt.day


def iso_date(ts: int) -> str:
    """Format a timestamp as a UTC "yyyy-mm-dd" date."""
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d")


def utc_midnight(ts: float) -> int:
    """Floor a timestamp to 00:00 UTC of its day."""
    return int(ts) // 86400 * 86400
