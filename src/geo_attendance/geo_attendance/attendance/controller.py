from __future__ import annotations

from flask import Flask, g

from ..common.validators import require_number
from ..common.web import json_body, make_guards, ok
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .serializers import record_to_dict


def _target_user_id(body: dict) -> int:
    raw = body.get("userId", body.get("user_id"))
    if raw is None:
        raise ValidationError("User ID is required")
    return int(require_number(raw, "userId"))


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.users_repo)
    service = container.attendance_service

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_checkin")
    @login_required
    def checkin():
        body = json_body()
        record = service.check_in(g.current_user.user_id, location=body.get("location"), notes=body.get("notes"))
        return ok(record_to_dict(record), message="Check-in successful")

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_checkout")
    @login_required
    def checkout():
        body = json_body()
        record = service.check_out(g.current_user.user_id, location=body.get("location"), notes=body.get("notes"))
        return ok(record_to_dict(record), message="Check-out successful")

    @app.route("/api/attendance/admin-checkin", methods=["POST"], endpoint="api_admin_checkin")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def admin_checkin():
        body = json_body()
        record = service.admin_check_in(
            g.current_user,
            _target_user_id(body),
            location=body.get("location"),
            notes=body.get("notes"),
        )
        return ok(record_to_dict(record), message="Check-in recorded")

    @app.route("/api/attendance/admin-checkout", methods=["POST"], endpoint="api_admin_checkout")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def admin_checkout():
        body = json_body()
        record = service.admin_check_out(
            g.current_user,
            _target_user_id(body),
            location=body.get("location"),
            notes=body.get("notes"),
        )
        return ok(record_to_dict(record), message="Check-out recorded")

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @login_required
    def today():
        record = service.get_today_record(g.current_user.user_id)
        return ok(record_to_dict(record) if record else None)

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @login_required
    def history():
        records = service.get_history(g.current_user.user_id)
        return ok([record_to_dict(r) for r in records])
