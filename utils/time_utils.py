"""Centralized timestamp parsing and day-boundary utilities.

All functions in this module return timezone-aware, UTC-normalized datetime
objects. Day boundaries are UTC midnight: they form half of the
``(symbol, fetchedAt)`` storage key, so every component must agree on them.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

__all__ = [
    "parse_to_utc",
    "utc_now",
    "start_of_day_utc",
    "day_bounds_utc",
]


def utc_now() -> datetime:
    """Return the current instant as a UTC-aware datetime."""
    return datetime.now(timezone.utc)


def parse_to_utc(timestamp: Any) -> datetime:
    """Parse various timestamp representations into a UTC-aware datetime.

    Supported inputs:
    - ISO 8601 strings (e.g., "2025-09-05T04:13:00Z", "2024-01-01")
    - Numeric seconds since UNIX epoch (int or float)
    - Numeric milliseconds since UNIX epoch (int or float)
    - datetime instances (naive assumed as UTC)
    - date instances (interpreted as UTC midnight)

    Args:
        timestamp: The input timestamp in one of the supported formats.

    Returns:
        A timezone-aware ``datetime`` object in UTC.

    Raises:
        ValueError: If the input cannot be parsed into a datetime.
    """
    # 1) datetime input
    if isinstance(timestamp, datetime):
        dt = timestamp
        if dt.tzinfo is None:
            # Treat naive datetimes as UTC by convention of this utility
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt

    # 2) date input (must come after datetime, which subclasses date)
    if isinstance(timestamp, date):
        return datetime(
            timestamp.year, timestamp.month, timestamp.day, tzinfo=timezone.utc
        )

    # 3) Numeric input (seconds or milliseconds)
    if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
        value = float(timestamp)
        # Heuristic: values >= 1e12 are considered milliseconds
        if abs(value) >= 1_000_000_000_000:
            value /= 1000.0
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError) as exc:  # platform-dependent errors
            raise ValueError(
                f"Numeric timestamp out of valid range: {timestamp}"
            ) from exc

    # 4) String input (ISO 8601 or numeric as string)
    if isinstance(timestamp, str):
        s = timestamp.strip()

        if s.replace("_", "").replace(".", "", 1).lstrip("-+").isdigit():
            try:
                num = float(s.replace("_", ""))
                return parse_to_utc(num)
            except ValueError:
                pass  # fall through to ISO 8601 parsing

        # Normalize 'Z' suffix to +00:00 for fromisoformat
        if s.endswith("Z") or s.endswith("z"):
            s = s[:-1] + "+00:00"

        try:
            dt = datetime.fromisoformat(s)
        except ValueError as exc:
            raise ValueError(
                f"Unsupported timestamp string format: {timestamp}"
            ) from exc

        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt

    raise ValueError(
        f"Unsupported timestamp type: {type(timestamp).__name__}. "
        "Expected ISO 8601 string, numeric seconds/milliseconds, date or datetime."
    )


def start_of_day_utc(value: Any) -> datetime:
    """Truncate ``value`` to UTC midnight of the same UTC calendar day."""
    dt = parse_to_utc(value)
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def day_bounds_utc(value: Any) -> tuple[datetime, datetime]:
    """Return the half-open ``[start, end)`` UTC interval covering ``value``'s day."""
    start = start_of_day_utc(value)
    return start, start + timedelta(days=1)
