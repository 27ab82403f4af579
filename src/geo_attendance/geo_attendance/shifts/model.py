from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core import constants
from ..common.datetime_utils import parse_hhmm


@dataclass(frozen=True)
class ShiftWindow:
    """Work schedule: allowed clock ranges plus the thresholds used for status."""

    check_in_earliest: time
    check_in_latest: time
    check_out_earliest: time
    check_out_latest: time
    min_work_hours: float = constants.DEFAULT_MIN_WORK_HOURS
    max_work_hours: float = constants.DEFAULT_MAX_WORK_HOURS
    late_tolerance_minutes: int = constants.DEFAULT_LATE_TOLERANCE_MINUTES
    standard_check_in: time = parse_hhmm(constants.DEFAULT_STANDARD_CHECK_IN)
    standard_work_hours: float = constants.DEFAULT_STANDARD_WORK_HOURS
    check_in_window_enabled: bool = True
    check_out_window_enabled: bool = True


def default_shift_window() -> ShiftWindow:
    return ShiftWindow(
        check_in_earliest=parse_hhmm(constants.DEFAULT_CHECK_IN_START),
        check_in_latest=parse_hhmm(constants.DEFAULT_CHECK_IN_END),
        check_out_earliest=parse_hhmm(constants.DEFAULT_CHECK_OUT_START),
        check_out_latest=parse_hhmm(constants.DEFAULT_CHECK_OUT_END),
    )
