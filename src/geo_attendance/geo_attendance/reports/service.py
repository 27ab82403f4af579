from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional, Sequence

from ..attendance.model import AttendanceReportRow
from ..attendance.repository import AttendanceRepository
from ..attendance.serializers import report_row_to_dict
from ..common.validators import round_half_up
from ..core.enums import AttendanceStatus, ReportType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.model import User

CSV_FIELDS = [
    "work_date",
    "user_id",
    "full_name",
    "department",
    "check_in",
    "check_out",
    "status",
    "work_hours",
    "overtime_hours",
    "late_minutes",
    "notes",
]


@dataclass(frozen=True)
class ReportData:
    report_type: ReportType
    rows: list[dict]
    summary: list[dict]


@dataclass(frozen=True)
class Scope:
    user_id: Optional[int]
    department: Optional[str]


def _status_counts() -> dict[str, int]:
    return {s.value: 0 for s in AttendanceStatus}


def _avg(total: float, count: int) -> float:
    return round_half_up(total / count, 2) if count else 0.0


class ReportService:
    """Role-scoped record listings and attendance aggregates.

    user: own records only. manager: own department. admin: everything.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    @staticmethod
    def resolve_scope(viewer: User, *, user_id: Optional[int] = None, department: Optional[str] = None) -> Scope:
        if viewer.role == Role.ADMIN:
            return Scope(user_id=user_id, department=department)

        if viewer.role == Role.MANAGER:
            if department is not None and department != viewer.department:
                raise AuthorizationError("Managers can only view their own department")
            if viewer.department is None:
                # No department to scope by: fall back to the manager's own records.
                if user_id is not None and int(user_id) != viewer.user_id:
                    raise AuthorizationError("You can only view your own records")
                return Scope(user_id=viewer.user_id, department=None)
            return Scope(user_id=user_id, department=viewer.department)

        if user_id is not None and int(user_id) != viewer.user_id:
            raise AuthorizationError("You can only view your own records")
        return Scope(user_id=viewer.user_id, department=None)

    def _rows(
        self,
        viewer: User,
        *,
        start: Optional[date],
        end: Optional[date],
        user_id: Optional[int],
        department: Optional[str],
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceReportRow]:
        if start and end and start > end:
            raise ValidationError("startDate must not be after endDate")
        scope = self.resolve_scope(viewer, user_id=user_id, department=department)
        return self._attendance.get_report_rows(
            start_date=start,
            end_date=end,
            user_id=scope.user_id,
            department=scope.department,
            status=status,
        )

    def list_records(
        self,
        *,
        viewer: User,
        start: Optional[date] = None,
        end: Optional[date] = None,
        user_id: Optional[int] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> list[dict]:
        rows = self._rows(viewer, start=start, end=end, user_id=user_id, department=None, status=status)
        include_coordinates = viewer.role == Role.ADMIN
        return [report_row_to_dict(r, include_coordinates=include_coordinates) for r in rows]

    def build_attendance_report(
        self,
        *,
        viewer: User,
        report_type: ReportType = ReportType.DAILY,
        start: Optional[date] = None,
        end: Optional[date] = None,
        user_id: Optional[int] = None,
        department: Optional[str] = None,
    ) -> ReportData:
        rows = self._rows(viewer, start=start, end=end, user_id=user_id, department=department)

        builders: dict[ReportType, Callable[[Sequence[AttendanceReportRow]], list[dict]]] = {
            ReportType.DAILY: self._daily,
            ReportType.MONTHLY: self._monthly,
            ReportType.USER: self._per_user,
            ReportType.DEPARTMENT: self._per_department,
        }
        summary = builders[report_type](rows)
        return ReportData(report_type=report_type, rows=[self._flat_row(r) for r in rows], summary=summary)

    @staticmethod
    def _flat_row(r: AttendanceReportRow) -> dict[str, Any]:
        rec = r.record
        return {
            "work_date": rec.work_date.strftime("%Y-%m-%d"),
            "user_id": r.user_id,
            "full_name": r.full_name,
            "department": r.department or "-",
            "check_in": rec.check_in_time.strftime("%H:%M") if rec.check_in_time else "-",
            "check_out": rec.check_out_time.strftime("%H:%M") if rec.check_out_time else "-",
            "status": rec.status.value,
            "work_hours": rec.work_hours if rec.work_hours is not None else "",
            "overtime_hours": rec.overtime_hours if rec.overtime_hours is not None else "",
            "late_minutes": rec.late_minutes,
            "notes": rec.notes or "",
        }

    @staticmethod
    def _daily(rows: Sequence[AttendanceReportRow]) -> list[dict]:
        by_date: dict[str, dict] = {}
        for r in rows:
            key = r.record.work_date.isoformat()
            s = by_date.get(key)
            if not s:
                s = {"date": key, "total": 0, **_status_counts(), "users": []}
                by_date[key] = s
            s["total"] += 1
            s[r.record.status.value] += 1
            s["users"].append(
                {
                    "id": r.user_id,
                    "name": r.full_name,
                    "department": r.department,
                    "status": r.record.status.value,
                    "check_in_time": r.record.check_in_time.isoformat() if r.record.check_in_time else None,
                    "check_out_time": r.record.check_out_time.isoformat() if r.record.check_out_time else None,
                    "work_hours": r.record.work_hours,
                }
            )
        return sorted(by_date.values(), key=lambda x: x["date"], reverse=True)

    @staticmethod
    def _monthly(rows: Sequence[AttendanceReportRow]) -> list[dict]:
        by_month: dict[str, dict] = {}
        for r in rows:
            key = r.record.work_date.strftime("%Y-%m")
            s = by_month.get(key)
            if not s:
                s = {"month": key, "total_records": 0, **_status_counts(), "total_work_hours": 0.0}
                by_month[key] = s
            s["total_records"] += 1
            s[r.record.status.value] += 1
            s["total_work_hours"] += r.record.work_hours or 0.0

        for s in by_month.values():
            s["total_work_hours"] = round_half_up(s["total_work_hours"], 2)
            s["average_work_hours"] = _avg(s["total_work_hours"], s["total_records"])
        return sorted(by_month.values(), key=lambda x: x["month"], reverse=True)

    @staticmethod
    def _per_user(rows: Sequence[AttendanceReportRow]) -> list[dict]:
        by_user: dict[int, dict] = {}
        for r in rows:
            s = by_user.get(r.user_id)
            if not s:
                s = {
                    "user_id": r.user_id,
                    "name": r.full_name,
                    "department": r.department,
                    "position": r.position,
                    "total_days": 0,
                    **_status_counts(),
                    "total_work_hours": 0.0,
                    "total_overtime_hours": 0.0,
                }
                by_user[r.user_id] = s
            s["total_days"] += 1
            s[r.record.status.value] += 1
            s["total_work_hours"] += r.record.work_hours or 0.0
            s["total_overtime_hours"] += r.record.overtime_hours or 0.0

        for s in by_user.values():
            s["total_work_hours"] = round_half_up(s["total_work_hours"], 2)
            s["total_overtime_hours"] = round_half_up(s["total_overtime_hours"], 2)
            s["average_work_hours"] = _avg(s["total_work_hours"], s["total_days"])
            s["attendance_percentage"] = int(
                round_half_up(s[AttendanceStatus.PRESENT.value] / s["total_days"] * 100)
            )
        return sorted(by_user.values(), key=lambda x: x["total_work_hours"], reverse=True)

    @staticmethod
    def _per_department(rows: Sequence[AttendanceReportRow]) -> list[dict]:
        by_dept: dict[str, dict] = {}
        users_by_dept: dict[str, set[int]] = {}
        for r in rows:
            key = r.department or "No Department"
            s = by_dept.get(key)
            if not s:
                s = {"department": key, "total_records": 0, **_status_counts(), "total_work_hours": 0.0}
                by_dept[key] = s
                users_by_dept[key] = set()
            users_by_dept[key].add(r.user_id)
            s["total_records"] += 1
            s[r.record.status.value] += 1
            s["total_work_hours"] += r.record.work_hours or 0.0

        for key, s in by_dept.items():
            s["total_users"] = len(users_by_dept[key])
            s["total_work_hours"] = round_half_up(s["total_work_hours"], 2)
            s["average_work_hours"] = _avg(s["total_work_hours"], s["total_records"])
        return sorted(by_dept.values(), key=lambda x: x["department"])
