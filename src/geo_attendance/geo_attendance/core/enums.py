from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for permission checks and report scoping."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class AttendanceStatus(str, Enum):
    """Canonical attendance status stored on each record."""

    PRESENT = "present"
    LATE = "late"
    HALF_DAY = "half_day"
    ABSENT = "absent"
    OUTSIDE_GEOFENCE = "outside_geofence"


class ActivityAction(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    ADMIN_CHECK_IN = "admin_check_in"
    ADMIN_CHECK_OUT = "admin_check_out"
    SETTINGS_UPDATE = "settings_update"


class ReportType(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    USER = "user"
    DEPARTMENT = "department"
