from __future__ import annotations

from flask import Flask, g

from ..common.web import json_body, make_guards, ok
from ..core import constants
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = make_guards(container.users_repo)
    service = container.settings_service

    @app.route("/api/settings/office-location", methods=["GET"], endpoint="api_office_location")
    @login_required
    def office_location():
        return ok(service.office_location_payload())

    @app.route("/api/settings/work-schedule", methods=["GET"], endpoint="api_work_schedule")
    @login_required
    def work_schedule():
        return ok(service.work_schedule_payload())

    @app.route("/api/settings/<key>", methods=["PUT"], endpoint="api_update_setting")
    @roles_required(Role.ADMIN)
    def update_setting(key: str):
        value = service.update(actor=g.current_user, key=key, value=json_body())
        payload = (
            service.work_schedule_payload()
            if key == constants.SETTING_WORK_SCHEDULE
            else service.office_location_payload()
        )
        return ok({"key": key, "value": value, "effective": payload}, message="Setting updated")
