from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector import errors

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateCheckInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, AttendanceReportRow, LocationSnapshot
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_RECORD_COLUMNS = """
    ar.attendance_id, ar.user_id, ar.work_date,
    ar.check_in_time, ar.check_in_latitude, ar.check_in_longitude,
    ar.check_in_accuracy, ar.check_in_address, ar.check_in_within_geofence,
    ar.check_out_time, ar.check_out_latitude, ar.check_out_longitude,
    ar.check_out_accuracy, ar.check_out_address, ar.check_out_within_geofence,
    ar.work_hours, ar.overtime_hours, ar.late_minutes, ar.status, ar.notes
"""


def _snapshot(r: dict, prefix: str) -> Optional[LocationSnapshot]:
    if r.get(f"{prefix}_latitude") is None:
        return None
    return LocationSnapshot(
        latitude=float(r[f"{prefix}_latitude"]),
        longitude=float(r[f"{prefix}_longitude"]),
        accuracy=float(r.get(f"{prefix}_accuracy") or 0),
        address=r.get(f"{prefix}_address") or "",
        within_geofence=bool(r.get(f"{prefix}_within_geofence")),
    )


def _optional_float(value) -> Optional[float]:
    # DECIMAL columns come back as Decimal.
    return float(value) if value is not None else None


def row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_in_location=_snapshot(r, "check_in"),
        check_out_time=r.get("check_out_time"),
        check_out_location=_snapshot(r, "check_out"),
        work_hours=_optional_float(r.get("work_hours")),
        overtime_hours=_optional_float(r.get("overtime_hours")),
        late_minutes=int(r.get("late_minutes") or 0),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_by_id(self, cur, attendance_id: int) -> Optional[AttendanceRecord]:
        cur.execute(
            f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
            (int(attendance_id),),
        )
        r = fetchone(cur)
        return row_to_record(r) if r else None

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.user_id=%s
                ORDER BY ar.work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [row_to_record(r) for r in fetchall(cur)]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.user_id=%s AND ar.work_date=%s
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return row_to_record(r) if r else None

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, work_date, check_in_time,
                        check_in_latitude, check_in_longitude, check_in_accuracy,
                        check_in_address, check_in_within_geofence,
                        late_minutes, status, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        work_date,
                        check_in_time,
                        location.latitude,
                        location.longitude,
                        location.accuracy,
                        location.address,
                        int(location.within_geofence),
                        int(late_minutes),
                        status.value,
                        notes,
                    ),
                )
                return self._get_by_id(cur, int(cur.lastrowid))
        except errors.IntegrityError as e:
            # uq_attendance_user_date: the losing side of a concurrent check-in lands here.
            if is_duplicate_key(e):
                logger.info("Duplicate check-in rejected for user %s on %s", user_id, work_date)
                raise DuplicateCheckInError("Already checked in today") from e
            raise

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s,
                    check_out_latitude=%s, check_out_longitude=%s, check_out_accuracy=%s,
                    check_out_address=%s, check_out_within_geofence=%s,
                    work_hours=%s, overtime_hours=%s, late_minutes=%s, status=%s, notes=%s
                WHERE attendance_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (
                    check_out_time,
                    location.latitude,
                    location.longitude,
                    location.accuracy,
                    location.address,
                    int(location.within_geofence),
                    work_hours,
                    overtime_hours,
                    int(late_minutes),
                    status.value,
                    notes,
                    int(attendance_id),
                ),
            )
            if cur.rowcount == 0:
                return None
            return self._get_by_id(cur, attendance_id)

    def get_report_rows(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
        department: Optional[str] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["1=1"]
        params: list[object] = []

        if start_date is not None:
            clauses.append("ar.work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("ar.work_date <= %s")
            params.append(end_date)
        if user_id is not None:
            clauses.append("ar.user_id=%s")
            params.append(int(user_id))
        if department is not None:
            clauses.append("u.department=%s")
            params.append(department)
        if status is not None:
            clauses.append("ar.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}, u.full_name, u.department, u.position
                FROM attendance_records ar
                JOIN users u ON u.user_id = ar.user_id
                WHERE {where}
                ORDER BY ar.work_date DESC, ar.check_in_time DESC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    record=row_to_record(r),
                    full_name=r["full_name"],
                    department=r.get("department"),
                    position=r.get("position"),
                )
                for r in fetchall(cur)
            ]
