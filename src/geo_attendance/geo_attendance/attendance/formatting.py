from __future__ import annotations

from typing import Optional


def format_work_hours(hours: Optional[float]) -> str:
    """7.5 -> "7h 30m", 8.0 -> "8h"."""
    if hours is None:
        return "-"
    whole = int(hours)
    minutes = int(round((hours - whole) * 60))
    if minutes == 60:
        whole, minutes = whole + 1, 0
    if minutes == 0:
        return f"{whole}h"
    return f"{whole}h {minutes}m"


def format_late_minutes(minutes: int) -> str:
    if minutes <= 0:
        return "On time"
    hours, rest = divmod(int(minutes), 60)
    if hours == 0:
        return f"{rest}m late"
    if rest == 0:
        return f"{hours}h late"
    return f"{hours}h {rest}m late"
