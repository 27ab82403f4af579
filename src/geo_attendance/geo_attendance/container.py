from __future__ import annotations

from dataclasses import dataclass

from .activity.mysql_activity_repository import MySQLActivityLogRepository
from .activity.repository import ActivityLogRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    settings_repo: SettingsRepository
    activity_repo: ActivityLogRepository

    settings_service: SettingsService
    attendance_service: AttendanceService
    report_service: ReportService


def wire(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    settings_repo: SettingsRepository,
    activity_repo: ActivityLogRepository,
) -> Container:
    settings_service = SettingsService(settings_repo, activity_repo)
    attendance_service = AttendanceService(attendance_repo, users_repo, settings_service, activity_repo)
    report_service = ReportService(attendance_repo)

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        activity_repo=activity_repo,
        settings_service=settings_service,
        attendance_service=attendance_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        activity_repo=MySQLActivityLogRepository(conn),
    )
