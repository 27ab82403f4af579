from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow, LocationSnapshot


class AttendanceRepository(Protocol):
    """Store for attendance records, unique per (user_id, work_date).

    ``create_checkin`` must be atomic with respect to that uniqueness and raise
    ``DuplicateCheckInError`` when a record for the day already exists.
    ``close_checkout`` only closes a record that is still open and returns None otherwise.
    """

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        location: LocationSnapshot,
        status: AttendanceStatus,
        late_minutes: int,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def close_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: LocationSnapshot,
        work_hours: float,
        overtime_hours: float,
        late_minutes: int,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
        department: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
