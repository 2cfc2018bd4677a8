"""
Recency formatting for dashboard rows: "5 minutes ago", "€12.50".
"""

from __future__ import annotations

from datetime import datetime, timezone

_MINUTES_PER_HOUR = 60
_MINUTES_PER_DAY = 1440


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Coerce a Supabase timestamp (ISO string or datetime) to an aware datetime.

    Naive values are taken as UTC.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_relative_age(
    timestamp: datetime | str | None, now: datetime | None = None
) -> str:
    """Coarse age label for a timestamp relative to `now` (default: current time).

    Whole elapsed minutes are banded: under 1 → "just now", under an hour →
    minutes, under a day → hours, otherwise days. Future timestamps read as
    "just now".
    """
    ts = parse_timestamp(timestamp)
    if ts is None:
        return "unknown"
    current = parse_timestamp(now) or datetime.now(timezone.utc)

    elapsed_minutes = int((current - ts).total_seconds() // 60)

    if elapsed_minutes < 1:
        return "just now"
    if elapsed_minutes < _MINUTES_PER_HOUR:
        return f"{elapsed_minutes} minutes ago"
    if elapsed_minutes < _MINUTES_PER_DAY:
        return f"{elapsed_minutes // _MINUTES_PER_HOUR} hours ago"
    return f"{elapsed_minutes // _MINUTES_PER_DAY} days ago"


def format_currency(amount: float, symbol: str = "€") -> str:
    """Two-decimal, symbol-prefixed amount, e.g. "€1234.50"."""
    return f"{symbol}{amount:.2f}"
