"""In-memory repositories and builders shared by the test suite."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Optional

from src.geo_attendance.geo_attendance.activity.model import ActivityLogEntry
from src.geo_attendance.geo_attendance.attendance.model import (
    AttendanceRecord,
    AttendanceReportRow,
    LocationSnapshot,
)
from src.geo_attendance.geo_attendance.core.enums import AttendanceStatus, Role
from src.geo_attendance.geo_attendance.core.exceptions import DuplicateCheckInError
from src.geo_attendance.geo_attendance.users.model import User

OFFICE = {"latitude": -6.2088, "longitude": 106.8456}


@dataclass
class InMemoryUsers:
    users_by_id: dict[int, User]

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)


class InMemoryAttendance:
    """Mirrors the UNIQUE(user_id, work_date) constraint and the conditional check-out update."""

    def __init__(self, users: InMemoryUsers | None = None):
        self._users = users
        self._by_user_date: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._by_user_date[(record.user_id, record.work_date)] = record
        self._id = max(self._id, record.attendance_id)
        return record

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._by_user_date.get((user_id, work_date))

    def get_recent_for_user(self, user_id: int, limit: int):
        items = [r for r in self._by_user_date.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def create_checkin(self, *, user_id, work_date, check_in_time, location, status, late_minutes, notes=None):
        with self._lock:
            if (user_id, work_date) in self._by_user_date:
                raise DuplicateCheckInError("Already checked in today")
            self._id += 1
            rec = AttendanceRecord(
                attendance_id=self._id,
                user_id=user_id,
                work_date=work_date,
                check_in_time=check_in_time,
                check_in_location=location,
                check_out_time=None,
                check_out_location=None,
                work_hours=None,
                overtime_hours=None,
                late_minutes=late_minutes,
                status=status,
                notes=notes,
            )
            self._by_user_date[(user_id, work_date)] = rec
            return rec

    def close_checkout(
        self, *, attendance_id, check_out_time, location, work_hours, overtime_hours, late_minutes, status, notes=None
    ):
        with self._lock:
            for key, rec in self._by_user_date.items():
                if rec.attendance_id == attendance_id and rec.check_out_time is None:
                    closed = replace(
                        rec,
                        check_out_time=check_out_time,
                        check_out_location=location,
                        work_hours=work_hours,
                        overtime_hours=overtime_hours,
                        late_minutes=late_minutes,
                        status=status,
                        notes=notes,
                    )
                    self._by_user_date[key] = closed
                    return closed
            return None

    def get_report_rows(self, *, start_date=None, end_date=None, user_id=None, department=None, status=None):
        rows = []
        for rec in self._by_user_date.values():
            user = self._users.get_by_id(rec.user_id) if self._users else None
            if start_date and rec.work_date < start_date:
                continue
            if end_date and rec.work_date > end_date:
                continue
            if user_id is not None and rec.user_id != user_id:
                continue
            if department is not None and (user is None or user.department != department):
                continue
            if status is not None and rec.status != status:
                continue
            rows.append(
                AttendanceReportRow(
                    record=rec,
                    full_name=user.full_name if user else f"user-{rec.user_id}",
                    department=user.department if user else None,
                    position=user.position if user else None,
                )
            )
        rows.sort(key=lambda r: (r.record.work_date, r.full_name), reverse=True)
        return rows


@dataclass
class InMemorySettings:
    values: dict[str, dict[str, Any]] = field(default_factory=dict)

    def get(self, key: str) -> Optional[dict[str, Any]]:
        value = self.values.get(key)
        return dict(value) if value is not None else None

    def put(self, key: str, value: dict[str, Any]) -> None:
        self.values[key] = dict(value)

    def put_many(self, values: dict[str, dict[str, Any]]) -> None:
        for key, value in values.items():
            self.put(key, value)


class InMemoryActivity:
    def __init__(self):
        self.entries: list[ActivityLogEntry] = []

    def add(self, entry: ActivityLogEntry) -> int:
        self.entries.append(entry)
        return len(self.entries)


def make_user(user_id: int, role: Role = Role.USER, *, department: str | None = "Engineering", **kw) -> User:
    return User(
        user_id=user_id,
        full_name=kw.pop("full_name", f"User {user_id}"),
        email=kw.pop("email", f"user{user_id}@example.com"),
        role=role,
        department=department,
        position=kw.pop("position", "Staff"),
        **kw,
    )


def location(lat: float = OFFICE["latitude"], lon: float = OFFICE["longitude"], accuracy: float = 5, **extra) -> dict:
    return {"latitude": lat, "longitude": lon, "accuracy": accuracy, **extra}


def make_record(
    attendance_id: int,
    user_id: int,
    work_date: date,
    *,
    check_in: tuple[int, int] = (8, 0),
    check_out: tuple[int, int] | None = (17, 0),
    status: AttendanceStatus = AttendanceStatus.PRESENT,
    work_hours: float | None = None,
    overtime_hours: float | None = None,
    late_minutes: int = 0,
) -> AttendanceRecord:
    snap = LocationSnapshot(
        latitude=OFFICE["latitude"],
        longitude=OFFICE["longitude"],
        accuracy=5.0,
        address="Office",
        within_geofence=True,
    )
    check_in_time = datetime.combine(work_date, datetime.min.time()).replace(hour=check_in[0], minute=check_in[1])
    check_out_time = (
        check_in_time.replace(hour=check_out[0], minute=check_out[1]) if check_out is not None else None
    )
    if work_hours is None and check_out_time is not None:
        work_hours = round((check_out_time - check_in_time).total_seconds() / 3600, 2)
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=user_id,
        work_date=work_date,
        check_in_time=check_in_time,
        check_in_location=snap,
        check_out_time=check_out_time,
        check_out_location=snap if check_out_time else None,
        work_hours=work_hours,
        overtime_hours=overtime_hours if overtime_hours is not None else (0.0 if work_hours is not None else None),
        late_minutes=late_minutes,
        status=status,
    )




class FailingActivity:
    """Activity store that is down."""

    def add(self, entry: ActivityLogEntry) -> int:
        raise RuntimeError("activity_logs unavailable")
