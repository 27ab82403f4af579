from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

from .formatting import format_late_minutes, format_work_hours
from .model import AttendanceRecord, AttendanceReportRow, LocationSnapshot


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _location(loc: Optional[LocationSnapshot], *, include_coordinates: bool) -> Optional[dict[str, Any]]:
    if loc is None:
        return None
    data = asdict(loc)
    if not include_coordinates:
        data.pop("latitude")
        data.pop("longitude")
    return data


def record_to_dict(record: AttendanceRecord, *, include_coordinates: bool = True) -> dict[str, Any]:
    """JSON shape for a record; non-admin viewers get it without coordinates."""
    return {
        "id": record.attendance_id,
        "user_id": record.user_id,
        "date": record.work_date.isoformat(),
        "check_in_time": _iso(record.check_in_time),
        "check_in_location": _location(record.check_in_location, include_coordinates=include_coordinates),
        "check_out_time": _iso(record.check_out_time),
        "check_out_location": _location(record.check_out_location, include_coordinates=include_coordinates),
        "work_hours": record.work_hours,
        "overtime_hours": record.overtime_hours,
        "late_minutes": record.late_minutes,
        "status": record.status.value,
        "notes": record.notes,
        "work_hours_display": format_work_hours(record.work_hours),
        "late_display": format_late_minutes(record.late_minutes),
    }


def report_row_to_dict(row: AttendanceReportRow, *, include_coordinates: bool = True) -> dict[str, Any]:
    data = record_to_dict(row.record, include_coordinates=include_coordinates)
    data["user"] = {
        "id": row.user_id,
        "name": row.full_name,
        "department": row.department,
        "position": row.position,
    }
    return data
