from __future__ import annotations

import csv
import io
from datetime import date
from typing import Optional

from flask import Flask, g, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_number
from ..common.web import make_guards, ok
from ..core.enums import AttendanceStatus, ReportType
from ..core.exceptions import ValidationError
from ..container import Container
from .service import CSV_FIELDS


def _date_arg(name: str) -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD")


def _user_id_arg() -> Optional[int]:
    value = request.args.get("userId")
    return int(require_number(value, "userId")) if value else None


def _report_type_arg() -> ReportType:
    value = request.args.get("type") or ReportType.DAILY.value
    try:
        return ReportType(value)
    except ValueError:
        raise ValidationError(f"Unknown report type: {value}")


def _status_arg() -> Optional[AttendanceStatus]:
    value = request.args.get("status")
    if not value:
        return None
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown status: {value}")


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_guards(container.users_repo)
    service = container.report_service

    @app.route("/api/attendance/records", methods=["GET"], endpoint="api_attendance_records")
    @login_required
    def records():
        data = service.list_records(
            viewer=g.current_user,
            start=_date_arg("startDate"),
            end=_date_arg("endDate"),
            user_id=_user_id_arg(),
            status=_status_arg(),
        )
        return ok(data)

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="api_reports_attendance")
    @login_required
    def attendance_report():
        report = service.build_attendance_report(
            viewer=g.current_user,
            report_type=_report_type_arg(),
            start=_date_arg("startDate"),
            end=_date_arg("endDate"),
            user_id=_user_id_arg(),
            department=request.args.get("department") or None,
        )
        return ok({"type": report.report_type.value, "summary": report.summary})

    @app.route("/api/reports/attendance.csv", methods=["GET"], endpoint="api_reports_attendance_csv")
    @login_required
    def attendance_report_csv():
        start = _date_arg("startDate")
        end = _date_arg("endDate")
        report = service.build_attendance_report(
            viewer=g.current_user,
            start=start,
            end=end,
            user_id=_user_id_arg(),
            department=request.args.get("department") or None,
        )

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in report.rows:
            writer.writerow(row)

        stamp = "_".join(d.strftime("%Y%m%d") for d in (start, end) if d) or "all"
        filename = f"attendance_{stamp}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
