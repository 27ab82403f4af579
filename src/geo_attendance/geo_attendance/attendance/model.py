from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class LocationSnapshot:
    """Location stored alongside a check-in or check-out event."""

    latitude: float
    longitude: float
    accuracy: float
    address: str
    within_geofence: bool


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's attendance for one calendar day.

    Open while ``check_out_time`` is None, closed afterwards.
    """

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_in_location: Optional[LocationSnapshot]
    check_out_time: Optional[datetime]
    check_out_location: Optional[LocationSnapshot]
    work_hours: Optional[float]
    overtime_hours: Optional[float]
    late_minutes: int
    status: AttendanceStatus
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports (record joined with its user)."""

    record: AttendanceRecord
    full_name: str
    department: Optional[str]
    position: Optional[str]

    @property
    def user_id(self) -> int:
        return self.record.user_id
