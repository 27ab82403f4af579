from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..activity.model import ActivityLogEntry
from ..activity.repository import ActivityLogRepository
from ..common.datetime_utils import format_hhmm, minute_of_day, parse_hhmm
from ..common.validators import require_number
from ..core import constants
from ..core.enums import ActivityAction, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..geo.model import Coordinate, GeofenceConfig
from ..shifts.model import ShiftWindow
from ..users.model import User
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

# office_location field -> geofencing field
_FENCE_FIELDS = [("radius", "radius_meters"), ("tolerance", "accuracy_threshold")]


@dataclass(frozen=True)
class AttendanceSettings:
    """Effective configuration handed to the status engine for one request."""

    fence: GeofenceConfig
    window: ShiftWindow


def default_setting_values() -> dict[str, dict[str, Any]]:
    return {
        constants.SETTING_OFFICE_LOCATION: {
            "latitude": constants.DEFAULT_OFFICE_LATITUDE,
            "longitude": constants.DEFAULT_OFFICE_LONGITUDE,
            "address": constants.DEFAULT_OFFICE_ADDRESS,
            "radius": constants.DEFAULT_GEOFENCE_RADIUS_METERS,
            "tolerance": constants.DEFAULT_GEOFENCE_TOLERANCE_METERS,
        },
        constants.SETTING_WORK_SCHEDULE: {
            "check_in_start": constants.DEFAULT_CHECK_IN_START,
            "check_in_end": constants.DEFAULT_CHECK_IN_END,
            "check_out_start": constants.DEFAULT_CHECK_OUT_START,
            "check_out_end": constants.DEFAULT_CHECK_OUT_END,
            "work_hours_min": constants.DEFAULT_MIN_WORK_HOURS,
            "work_hours_max": constants.DEFAULT_MAX_WORK_HOURS,
            "late_tolerance": constants.DEFAULT_LATE_TOLERANCE_MINUTES,
            "standard_check_in": constants.DEFAULT_STANDARD_CHECK_IN,
            "standard_work_hours": constants.DEFAULT_STANDARD_WORK_HOURS,
            "check_in_window_enabled": True,
            "check_out_window_enabled": True,
        },
        constants.SETTING_GEOFENCING: {
            "enabled": True,
            "radius_meters": constants.DEFAULT_GEOFENCE_RADIUS_METERS,
            "accuracy_threshold": constants.DEFAULT_GEOFENCE_TOLERANCE_METERS,
            "blocks_check_in": False,
        },
    }


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def parse_geofence(office: Optional[Mapping[str, Any]], geofencing: Optional[Mapping[str, Any]]) -> GeofenceConfig:
    """Build the fence from ``office_location`` and ``geofencing``.

    ``office_location`` may be flat ({latitude, longitude, ...}) or nested ({center: {...}}).
    Radius/tolerance on the office entry win over the geofencing entry.
    """
    office = office or {}
    geofencing = geofencing or {}
    center = office.get("center") or {}
    if not isinstance(center, Mapping):
        raise ValidationError("center must be an object with latitude and longitude")

    coordinate = Coordinate.checked(
        _first(office.get("latitude"), center.get("latitude"), constants.DEFAULT_OFFICE_LATITUDE),
        _first(office.get("longitude"), center.get("longitude"), constants.DEFAULT_OFFICE_LONGITUDE),
    )
    radius = require_number(
        _first(office.get("radius"), geofencing.get("radius_meters"), constants.DEFAULT_GEOFENCE_RADIUS_METERS),
        "radius",
    )
    tolerance = require_number(
        _first(office.get("tolerance"), geofencing.get("accuracy_threshold"), constants.DEFAULT_GEOFENCE_TOLERANCE_METERS),
        "tolerance",
    )
    if radius <= 0:
        raise ValidationError("radius must be greater than 0")
    if tolerance < 0:
        raise ValidationError("tolerance must not be negative")

    return GeofenceConfig(
        center=coordinate,
        radius_meters=radius,
        tolerance_meters=tolerance,
        address=office.get("address") or None,
        enabled=_as_bool(geofencing.get("enabled"), True),
        blocks_check_in=_as_bool(geofencing.get("blocks_check_in"), False),
    )


def parse_shift_window(schedule: Optional[Mapping[str, Any]]) -> ShiftWindow:
    merged = dict(default_setting_values()[constants.SETTING_WORK_SCHEDULE])
    merged.update({k: v for k, v in (schedule or {}).items() if v is not None})

    try:
        window = ShiftWindow(
            check_in_earliest=parse_hhmm(merged["check_in_start"]),
            check_in_latest=parse_hhmm(merged["check_in_end"]),
            check_out_earliest=parse_hhmm(merged["check_out_start"]),
            check_out_latest=parse_hhmm(merged["check_out_end"]),
            min_work_hours=require_number(merged["work_hours_min"], "work_hours_min"),
            max_work_hours=require_number(merged["work_hours_max"], "work_hours_max"),
            late_tolerance_minutes=int(require_number(merged["late_tolerance"], "late_tolerance")),
            standard_check_in=parse_hhmm(merged["standard_check_in"]),
            standard_work_hours=require_number(merged["standard_work_hours"], "standard_work_hours"),
            check_in_window_enabled=_as_bool(merged["check_in_window_enabled"], True),
            check_out_window_enabled=_as_bool(merged["check_out_window_enabled"], True),
        )
    except ValueError as e:
        raise ValidationError(f"Invalid time value (HH:MM): {e}") from e

    if minute_of_day(window.check_in_earliest) > minute_of_day(window.check_in_latest):
        raise ValidationError("check_in_start must not be after check_in_end")
    if minute_of_day(window.check_out_earliest) > minute_of_day(window.check_out_latest):
        raise ValidationError("check_out_start must not be after check_out_end")
    if window.min_work_hours < 0 or window.min_work_hours > window.max_work_hours:
        raise ValidationError("work_hours_min must be between 0 and work_hours_max")
    if window.late_tolerance_minutes < 0:
        raise ValidationError("late_tolerance must not be negative")
    if window.standard_work_hours <= 0:
        raise ValidationError("standard_work_hours must be greater than 0")
    return window


class SettingsService:
    def __init__(self, settings: SettingsRepository, activity: ActivityLogRepository | None = None):
        self._settings = settings
        self._activity = activity

    def _stored(self, key: str) -> Optional[dict[str, Any]]:
        return self._settings.get(key)

    def geofence(self) -> GeofenceConfig:
        office = self._stored(constants.SETTING_OFFICE_LOCATION)
        geofencing = self._stored(constants.SETTING_GEOFENCING)
        try:
            return parse_geofence(office, geofencing)
        except ValidationError as e:
            logger.warning("Stored geofence settings are invalid (%s); using defaults", e)
            return parse_geofence(None, None)

    def shift_window(self) -> ShiftWindow:
        schedule = self._stored(constants.SETTING_WORK_SCHEDULE)
        try:
            return parse_shift_window(schedule)
        except ValidationError as e:
            logger.warning("Stored work_schedule is invalid (%s); using defaults", e)
            return parse_shift_window(None)

    def load(self) -> AttendanceSettings:
        return AttendanceSettings(fence=self.geofence(), window=self.shift_window())

    def office_location_payload(self) -> dict[str, Any]:
        fence = self.geofence()
        return {
            "center": {"latitude": fence.center.latitude, "longitude": fence.center.longitude},
            "address": fence.address,
            "radius": fence.radius_meters,
            "tolerance": fence.tolerance_meters,
            "enabled": fence.enabled,
            "blocks_check_in": fence.blocks_check_in,
        }

    def work_schedule_payload(self) -> dict[str, Any]:
        w = self.shift_window()
        return {
            "check_in_start": format_hhmm(w.check_in_earliest),
            "check_in_end": format_hhmm(w.check_in_latest),
            "check_out_start": format_hhmm(w.check_out_earliest),
            "check_out_end": format_hhmm(w.check_out_latest),
            "work_hours_min": w.min_work_hours,
            "work_hours_max": w.max_work_hours,
            "late_tolerance": w.late_tolerance_minutes,
            "standard_check_in": format_hhmm(w.standard_check_in),
            "standard_work_hours": w.standard_work_hours,
            "check_in_window_enabled": w.check_in_window_enabled,
            "check_out_window_enabled": w.check_out_window_enabled,
        }

    def update(self, *, actor: User, key: str, value: Mapping[str, Any]) -> dict[str, Any]:
        """Merge ``value`` into the stored setting after validating the result."""
        if actor.role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change settings")
        if key not in constants.SETTING_KEYS:
            raise ValidationError(f"Unknown setting: {key}")
        if not isinstance(value, Mapping) or not value:
            raise ValidationError("Setting value must be a non-empty object")

        merged = dict(self._stored(key) or {})
        merged.update(value)
        updates: dict[str, dict[str, Any]] = {key: merged}

        if key == constants.SETTING_WORK_SCHEDULE:
            parse_shift_window(merged)
        else:
            # radius/tolerance live in both geofence entries; keep them in step.
            if key == constants.SETTING_OFFICE_LOCATION:
                other, pairs = constants.SETTING_GEOFENCING, _FENCE_FIELDS
            else:
                other, pairs = constants.SETTING_OFFICE_LOCATION, [(b, a) for a, b in _FENCE_FIELDS]
            mirrored = {dst: value[src] for src, dst in pairs if src in value}
            if mirrored:
                updates[other] = {**(self._stored(other) or {}), **mirrored}
            parse_geofence(
                updates.get(constants.SETTING_OFFICE_LOCATION) or self._stored(constants.SETTING_OFFICE_LOCATION),
                updates.get(constants.SETTING_GEOFENCING) or self._stored(constants.SETTING_GEOFENCING),
            )

        self._settings.put_many(updates)
        logger.info("Setting %s updated by user %s (stored: %s)", key, actor.user_id, ", ".join(updates))

        if self._activity:
            try:
                self._activity.add(
                    ActivityLogEntry(
                        user_id=actor.user_id,
                        action=ActivityAction.SETTINGS_UPDATE,
                        resource_type="setting",
                        resource_id=None,
                        details={"key": key, "value": merged, "updated_keys": list(updates)},
                    )
                )
            except Exception:
                logger.exception("Activity log write failed for setting %s", key)
        return merged
