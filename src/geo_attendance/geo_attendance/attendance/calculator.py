"""Attendance status engine.

Pure functions that turn check-in/out times (and the check-in location) into
lateness, work hours, overtime and a status. Nothing here reads settings or
touches storage; callers pass the effective ``ShiftWindow``/``GeofenceConfig``.

Status precedence
    check-in:  outside_geofence > late > present
    check-out: half_day > late > present

``late`` means ``late_minutes > window.late_tolerance_minutes`` in both places,
so a tolerance of 0 gives the strict "any lateness counts" rule.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..common.validators import round_half_up
from ..core.enums import AttendanceStatus
from ..core.exceptions import CheckOutBeforeCheckInError
from ..geo.distance import distance_meters
from ..geo.geofence import is_within_geofence
from ..geo.model import GeofenceConfig, LocationSample
from ..shifts.model import ShiftWindow


@dataclass(frozen=True)
class CheckInDerivation:
    late_minutes: int
    status: AttendanceStatus
    is_within_geofence: bool
    distance_meters: Optional[float] = None


@dataclass(frozen=True)
class FinalDerivation:
    work_hours: float
    overtime_hours: float
    late_minutes: int
    status: AttendanceStatus
    exceeds_max_hours: bool = False


def late_minutes_for(check_in_time: datetime, standard_check_in: time) -> int:
    """Minutes after the standard start on the check-in's own date, floored at zero."""
    standard = datetime.combine(check_in_time.date(), standard_check_in)
    minutes = (check_in_time - standard).total_seconds() / 60
    return int(round_half_up(max(0.0, minutes)))


def hours_between(start: datetime, end: datetime) -> float:
    if end <= start:
        raise CheckOutBeforeCheckInError("Check-out time must be after check-in time")
    # A positive span never rounds down to 0.00.
    return max(0.01, round_half_up((end - start).total_seconds() / 3600, 2))


def _is_late(late_minutes: int, window: ShiftWindow) -> bool:
    return late_minutes > int(window.late_tolerance_minutes)


def derive_check_in_status(
    check_in_time: datetime,
    sample: Optional[LocationSample],
    window: ShiftWindow,
    fence: GeofenceConfig,
    *,
    standard_check_in: Optional[time] = None,
) -> CheckInDerivation:
    late = late_minutes_for(check_in_time, standard_check_in or window.standard_check_in)

    distance = None
    if sample is not None:
        distance = round_half_up(distance_meters(sample.coordinate, fence.center), 1)

    if not fence.enabled:
        within = True
    elif sample is None:
        within = False
    else:
        within = is_within_geofence(sample, fence)

    if not within:
        status = AttendanceStatus.OUTSIDE_GEOFENCE
    elif _is_late(late, window):
        status = AttendanceStatus.LATE
    else:
        status = AttendanceStatus.PRESENT

    return CheckInDerivation(
        late_minutes=late,
        status=status,
        is_within_geofence=within,
        distance_meters=distance,
    )


def derive_final_status(
    check_in_time: datetime,
    check_out_time: datetime,
    window: ShiftWindow,
    *,
    standard_check_in: Optional[time] = None,
) -> FinalDerivation:
    work_hours = hours_between(check_in_time, check_out_time)
    overtime = round_half_up(max(0.0, work_hours - float(window.standard_work_hours)), 2)
    late = late_minutes_for(check_in_time, standard_check_in or window.standard_check_in)

    if work_hours < float(window.min_work_hours):
        status = AttendanceStatus.HALF_DAY
    elif _is_late(late, window):
        status = AttendanceStatus.LATE
    else:
        status = AttendanceStatus.PRESENT

    return FinalDerivation(
        work_hours=work_hours,
        overtime_hours=overtime,
        late_minutes=late,
        status=status,
        exceeds_max_hours=work_hours > float(window.max_work_hours),
    )
