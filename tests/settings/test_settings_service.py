from __future__ import annotations

from datetime import time

import pytest

from src.geo_attendance.geo_attendance.core.constants import (
    SETTING_GEOFENCING,
    SETTING_OFFICE_LOCATION,
    SETTING_WORK_SCHEDULE,
)
from src.geo_attendance.geo_attendance.core.enums import ActivityAction, Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, ValidationError
from src.geo_attendance.geo_attendance.settings.service import (
    SettingsService,
    default_setting_values,
    parse_geofence,
    parse_shift_window,
)
from tests.support import InMemoryActivity, InMemorySettings, make_user

ADMIN = make_user(1, Role.ADMIN)


def test_defaults_when_nothing_is_stored():
    cfg = SettingsService(InMemorySettings()).load()

    assert cfg.fence.center.latitude == -6.2088
    assert cfg.fence.radius_meters == 100
    assert cfg.fence.tolerance_meters == 10
    assert cfg.fence.enabled and not cfg.fence.blocks_check_in
    assert cfg.window.check_in_earliest == time(6, 0)
    assert cfg.window.check_out_latest == time(22, 0)
    assert cfg.window.late_tolerance_minutes == 15


def test_nested_center_shape_is_accepted():
    fence = parse_geofence({"center": {"latitude": 1.5, "longitude": 2.5}, "radius": 250}, None)
    assert (fence.center.latitude, fence.center.longitude) == (1.5, 2.5)
    assert fence.radius_meters == 250


def test_office_radius_wins_over_geofencing_entry():
    fence = parse_geofence({"radius": 80}, {"radius_meters": 300, "accuracy_threshold": 25, "enabled": "false"})
    assert fence.radius_meters == 80
    assert fence.tolerance_meters == 25
    assert fence.enabled is False


def test_partial_schedule_is_merged_with_defaults():
    window = parse_shift_window({"check_in_start": "07:30", "late_tolerance": 0})
    assert window.check_in_earliest == time(7, 30)
    assert window.check_in_latest == time(10, 0)
    assert window.late_tolerance_minutes == 0


@pytest.mark.parametrize(
    "schedule",
    [
        {"check_in_start": "25:00"},
        {"check_in_start": "11:00", "check_in_end": "10:00"},
        {"work_hours_min": 13},
        {"late_tolerance": -5},
        {"standard_work_hours": 0},
    ],
)
def test_invalid_schedule_is_rejected(schedule):
    with pytest.raises(ValidationError):
        parse_shift_window(schedule)


def test_invalid_stored_values_fall_back_to_defaults(caplog):
    repo = InMemorySettings({SETTING_WORK_SCHEDULE: {"check_in_start": "nope"}, SETTING_OFFICE_LOCATION: {"latitude": 123}})
    svc = SettingsService(repo)

    cfg = svc.load()

    assert cfg.window.check_in_earliest == time(6, 0)
    assert cfg.fence.center.latitude == -6.2088
    assert "using defaults" in caplog.text


def test_update_merges_validates_and_logs_activity():
    repo = InMemorySettings({SETTING_WORK_SCHEDULE: {"check_in_start": "07:00"}})
    activity = InMemoryActivity()
    svc = SettingsService(repo, activity)

    stored = svc.update(actor=ADMIN, key=SETTING_WORK_SCHEDULE, value={"check_in_end": "09:30"})

    assert stored == {"check_in_start": "07:00", "check_in_end": "09:30"}
    assert svc.work_schedule_payload()["check_in_end"] == "09:30"
    assert activity.entries[-1].action == ActivityAction.SETTINGS_UPDATE
    assert activity.entries[-1].details["key"] == SETTING_WORK_SCHEDULE


def test_update_rejects_invalid_value_without_storing():
    repo = InMemorySettings()
    svc = SettingsService(repo)

    with pytest.raises(ValidationError):
        svc.update(actor=ADMIN, key=SETTING_OFFICE_LOCATION, value={"radius": -1})
    assert repo.get(SETTING_OFFICE_LOCATION) is None


def test_update_geofencing_toggle():
    svc = SettingsService(InMemorySettings())
    svc.update(actor=ADMIN, key=SETTING_GEOFENCING, value={"blocks_check_in": True})
    assert svc.geofence().blocks_check_in is True


def test_update_rejects_unknown_key_and_non_admin():
    svc = SettingsService(InMemorySettings())
    with pytest.raises(ValidationError):
        svc.update(actor=ADMIN, key="payroll", value={"x": 1})
    with pytest.raises(AuthorizationError):
        svc.update(actor=make_user(2, Role.MANAGER), key=SETTING_GEOFENCING, value={"enabled": False})


def _seeded_service() -> tuple[SettingsService, InMemorySettings]:
    repo = InMemorySettings()
    repo.put_many(default_setting_values())
    return SettingsService(repo), repo


def test_geofencing_radius_update_takes_effect_over_seeded_office():
    svc, repo = _seeded_service()

    svc.update(actor=ADMIN, key=SETTING_GEOFENCING, value={"radius_meters": 300, "accuracy_threshold": 40})

    fence = svc.geofence()
    assert fence.radius_meters == 300
    assert fence.tolerance_meters == 40
    assert repo.get(SETTING_OFFICE_LOCATION)["radius"] == 300
    assert repo.get(SETTING_OFFICE_LOCATION)["latitude"] == -6.2088


def test_office_radius_update_is_mirrored_to_geofencing():
    svc, repo = _seeded_service()

    svc.update(actor=ADMIN, key=SETTING_OFFICE_LOCATION, value={"radius": 150})

    assert svc.geofence().radius_meters == 150
    assert repo.get(SETTING_GEOFENCING)["radius_meters"] == 150
    assert repo.get(SETTING_GEOFENCING)["accuracy_threshold"] == 10


def test_invalid_mirrored_value_stores_nothing():
    svc, repo = _seeded_service()

    with pytest.raises(ValidationError):
        svc.update(actor=ADMIN, key=SETTING_GEOFENCING, value={"radius_meters": 0})
    assert repo.get(SETTING_GEOFENCING)["radius_meters"] == 100
    assert repo.get(SETTING_OFFICE_LOCATION)["radius"] == 100


@pytest.mark.parametrize("center", ["-6.2,106.8", [-6.2, 106.8]])
def test_non_object_center_is_rejected(center):
    with pytest.raises(ValidationError):
        parse_geofence({"center": center}, None)
    with pytest.raises(ValidationError):
        SettingsService(InMemorySettings()).update(actor=ADMIN, key=SETTING_OFFICE_LOCATION, value={"center": center})
