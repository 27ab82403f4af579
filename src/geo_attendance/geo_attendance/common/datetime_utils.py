from __future__ import annotations

from datetime import date, datetime, time
from typing import Any


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: Any) -> time:
    """Parse an ``HH:MM`` setting value (a ``time`` passes through)."""
    if isinstance(value, time):
        return value
    return datetime.strptime(str(value).strip(), "%H:%M").time()


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime.

    Aware values are converted to local time first so they compare with ``now_local()``.
    A trailing ``Z`` is accepted.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def minute_of_day(value: datetime | time) -> int:
    """Clock position in whole minutes since midnight (seconds ignored)."""
    return value.hour * 60 + value.minute


def now_local() -> datetime:
    """Current local time; the default clock for services that accept ``clock=``."""
    return datetime.now()
