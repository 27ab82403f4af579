from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..activity.model import ActivityLogEntry
from ..activity.repository import ActivityLogRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import ActivityAction
from ..core.exceptions import (
    AuthorizationError,
    CheckOutBeforeCheckInError,
    DuplicateCheckInError,
    LocationRequiredError,
    NoOpenCheckInError,
    NotFoundError,
    OutsideGeofenceError,
    OutsideShiftWindowError,
    ValidationError,
)
from ..geo.geofence import is_within_geofence
from ..geo.model import GeofenceConfig, LocationSample
from ..settings.service import SettingsService
from ..shifts.validator import validate_check_in_time, validate_check_out_time
from ..users.model import User
from ..users.repository import UserRepository
from .calculator import derive_check_in_status, derive_final_status
from .model import AttendanceRecord, LocationSnapshot
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _join_notes(*parts: Optional[str]) -> Optional[str]:
    cleaned = [p.strip() for p in parts if p and p.strip()]
    return "; ".join(dict.fromkeys(cleaned)) or None


def _snapshot(sample: LocationSample, *, within: bool) -> LocationSnapshot:
    return LocationSnapshot(
        latitude=sample.coordinate.latitude,
        longitude=sample.coordinate.longitude,
        accuracy=sample.accuracy_meters,
        address=sample.display_address,
        within_geofence=within,
    )


def _location_details(sample: LocationSample) -> dict[str, Any]:
    return {
        "latitude": sample.coordinate.latitude,
        "longitude": sample.coordinate.longitude,
        "address": sample.display_address,
        "accuracy": sample.accuracy_meters,
        "timestamp": sample.captured_at.isoformat(),
        "altitude": sample.altitude,
        "heading": sample.heading,
        "speed": sample.speed,
    }


class AttendanceService:
    """Owns the per-day record lifecycle: NoRecord -> Open (check-in) -> Closed (check-out).

    Every transition re-reads the current record, gates the event through the
    shift window, derives status with the calculator and persists in one write.
    The repository's (user_id, work_date) uniqueness is what finally decides
    concurrent check-ins.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        settings: SettingsService,
        activity: ActivityLogRepository | None = None,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._users = users
        self._settings = settings
        self._activity = activity
        self._clock = clock

    # ------------------------------------------------------------------ helpers

    def _require_active_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if not user.is_active:
            raise ValidationError(f"{user.full_name} is not active")
        return user

    @staticmethod
    def _require_can_act_for_others(actor: User) -> None:
        if not actor.can_act_for_others:
            raise AuthorizationError("Only admins and managers can record attendance for other users")

    @staticmethod
    def _parse_location(location: Mapping[str, Any] | LocationSample | None, now: datetime) -> LocationSample:
        if location is None or (isinstance(location, Mapping) and not location):
            raise LocationRequiredError("Location data is required")
        if isinstance(location, LocationSample):
            return location
        return LocationSample.from_payload(location, received_at=now)

    def _log_activity(
        self,
        *,
        actor: User,
        action: ActivityAction,
        record: AttendanceRecord,
        details: dict[str, Any],
    ) -> None:
        """Audit the transition. The record is already committed, so a failed
        audit write is logged and does not undo or fail the transition."""
        if not self._activity:
            return
        try:
            self._activity.add(
                ActivityLogEntry(
                    user_id=actor.user_id,
                    action=action,
                    resource_type="attendance_record",
                    resource_id=record.attendance_id,
                    details=details,
                )
            )
        except Exception:
            logger.exception("Activity log write failed for %s on record %s", action.value, record.attendance_id)

    @staticmethod
    def _within(sample: LocationSample, fence: GeofenceConfig) -> bool:
        return is_within_geofence(sample, fence) if fence.enabled else True

    # --------------------------------------------------------------- check-in

    def check_in(
        self,
        user_id: int,
        *,
        location: Mapping[str, Any] | LocationSample | None,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        user = self._require_active_user(user_id)
        return self._check_in(user, actor=user, location=location, notes=notes, now=now)

    def admin_check_in(
        self,
        actor: User,
        target_user_id: int,
        *,
        location: Mapping[str, Any] | LocationSample | None,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        self._require_can_act_for_others(actor)
        target = self._require_active_user(target_user_id)
        notes = notes or f"Checked in by {actor.role.value}: {actor.full_name}"
        return self._check_in(target, actor=actor, location=location, notes=notes, now=now)

    def _check_in(
        self,
        user: User,
        *,
        actor: User,
        location: Mapping[str, Any] | LocationSample | None,
        notes: Optional[str],
        now: datetime | None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()
        sample = self._parse_location(location, now)

        existing = self._attendance.get_for_user_and_date(user.user_id, today)
        if existing:
            raise DuplicateCheckInError(f"{user.full_name} has already checked in today")

        cfg = self._settings.load()
        window_check = validate_check_in_time(now, cfg.window)
        if not window_check.ok:
            raise OutsideShiftWindowError(window_check.message)

        derived = derive_check_in_status(now, sample, cfg.window, cfg.fence)
        if not derived.is_within_geofence and cfg.fence.blocks_check_in:
            raise OutsideGeofenceError(
                f"Location is outside the office area ({derived.distance_meters} m from center, "
                f"accuracy {sample.accuracy_meters:g} m)"
            )

        record = self._attendance.create_checkin(
            user_id=user.user_id,
            work_date=today,
            check_in_time=now,
            location=_snapshot(sample, within=derived.is_within_geofence),
            status=derived.status,
            late_minutes=derived.late_minutes,
            notes=_join_notes(notes),
        )
        logger.info(
            "Check-in user=%s date=%s status=%s late=%s by=%s",
            user.user_id, today, derived.status.value, derived.late_minutes, actor.user_id,
        )

        on_behalf = actor.user_id != user.user_id
        details: dict[str, Any] = {
            "location": _location_details(sample),
            "distance_meters": derived.distance_meters,
            "timestamp": now.isoformat(),
        }
        if on_behalf:
            details.update({"target_user_id": user.user_id, "target_user_name": user.full_name})
        self._log_activity(
            actor=actor,
            action=ActivityAction.ADMIN_CHECK_IN if on_behalf else ActivityAction.CHECK_IN,
            record=record,
            details=details,
        )
        return record

    # -------------------------------------------------------------- check-out

    def check_out(
        self,
        user_id: int,
        *,
        location: Mapping[str, Any] | LocationSample | None,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        user = self._require_active_user(user_id)
        return self._check_out(user, actor=user, location=location, notes=notes, now=now)

    def admin_check_out(
        self,
        actor: User,
        target_user_id: int,
        *,
        location: Mapping[str, Any] | LocationSample | None,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        self._require_can_act_for_others(actor)
        target = self._require_active_user(target_user_id)
        notes = notes or f"Checked out by {actor.role.value}: {actor.full_name}"
        return self._check_out(target, actor=actor, location=location, notes=notes, now=now)

    def _check_out(
        self,
        user: User,
        *,
        actor: User,
        location: Mapping[str, Any] | LocationSample | None,
        notes: Optional[str],
        now: datetime | None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()
        sample = self._parse_location(location, now)

        record = self._attendance.get_for_user_and_date(user.user_id, today)
        if not record or record.check_in_time is None:
            raise NoOpenCheckInError("No check-in record found for today")
        if record.check_out_time is not None:
            raise NoOpenCheckInError("Already checked out today")

        cfg = self._settings.load()
        window_check = validate_check_out_time(now, cfg.window)
        if not window_check.ok:
            raise OutsideShiftWindowError(window_check.message)

        if now <= record.check_in_time:
            raise CheckOutBeforeCheckInError("Check-out time must be after check-in time")

        final = derive_final_status(record.check_in_time, now, cfg.window)
        extra = None
        if final.exceeds_max_hours:
            extra = f"Work hours exceed maximum of {cfg.window.max_work_hours:g}h"

        closed = self._attendance.close_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            location=_snapshot(sample, within=self._within(sample, cfg.fence)),
            work_hours=final.work_hours,
            overtime_hours=final.overtime_hours,
            late_minutes=final.late_minutes,
            status=final.status,
            notes=_join_notes(record.notes, notes, extra),
        )
        if closed is None:
            # Closed by a concurrent request between our read and write.
            raise NoOpenCheckInError("Already checked out today")

        logger.info(
            "Check-out user=%s date=%s status=%s hours=%s overtime=%s by=%s",
            user.user_id, today, final.status.value, final.work_hours, final.overtime_hours, actor.user_id,
        )

        on_behalf = actor.user_id != user.user_id
        details: dict[str, Any] = {
            "location": _location_details(sample),
            "work_hours": final.work_hours,
            "timestamp": now.isoformat(),
        }
        if on_behalf:
            details.update({"target_user_id": user.user_id, "target_user_name": user.full_name})
        self._log_activity(
            actor=actor,
            action=ActivityAction.ADMIN_CHECK_OUT if on_behalf else ActivityAction.CHECK_OUT,
            record=closed,
            details=details,
        )
        return closed

    # ------------------------------------------------------------------ reads

    def get_today_record(self, user_id: int, today: date | None = None) -> Optional[AttendanceRecord]:
        """Get today's attendance record for a user"""
        today = today or self._clock().date()
        return self._attendance.get_for_user_and_date(int(user_id), today)

    def get_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(int(user_id), int(limit))
