from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..common.datetime_utils import format_hhmm, minute_of_day
from .model import ShiftWindow


@dataclass(frozen=True)
class WindowCheck:
    ok: bool
    message: Optional[str] = None
    boundary: Optional[str] = None  # "earliest" | "latest"


_PASS = WindowCheck(ok=True)


def _check(t: datetime, *, label: str, earliest: time, latest: time) -> WindowCheck:
    minutes = minute_of_day(t)
    if minutes < minute_of_day(earliest):
        return WindowCheck(
            ok=False,
            message=f"{label} is only allowed after {format_hhmm(earliest)}",
            boundary="earliest",
        )
    if minutes > minute_of_day(latest):
        return WindowCheck(
            ok=False,
            message=f"{label} is only allowed before {format_hhmm(latest)}",
            boundary="latest",
        )
    return _PASS


def validate_check_in_time(t: datetime, window: ShiftWindow) -> WindowCheck:
    if not window.check_in_window_enabled:
        return _PASS
    return _check(t, label="Check-in", earliest=window.check_in_earliest, latest=window.check_in_latest)


def validate_check_out_time(t: datetime, window: ShiftWindow) -> WindowCheck:
    if not window.check_out_window_enabled:
        return _PASS
    return _check(t, label="Check-out", earliest=window.check_out_earliest, latest=window.check_out_latest)
