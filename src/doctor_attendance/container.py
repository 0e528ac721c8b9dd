from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo

from .attendance.photos import PhotoStorage
from .attendance.repository import AttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .attendance.state_machine import AttendanceStateMachine
from .database.connection import DBConfig, DatabaseConnection
from .geofence.evaluator import GeofenceEvaluator
from .geofence.model import AuthorizedLocation
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, DoctorService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository

    location: AuthorizedLocation
    evaluator: GeofenceEvaluator
    photos: PhotoStorage

    auth_service: AuthService
    doctor_service: DoctorService
    attendance_service: AttendanceService


def build_services(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    location: AuthorizedLocation,
    upload_root: str,
    timezone: str,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services around already-built repositories (MySQL in production, fakes in tests)."""

    ZoneInfo(timezone)  # unknown zone names fail at startup, not on the first check-in

    evaluator = GeofenceEvaluator(location)
    photos = PhotoStorage(upload_root)
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        evaluator,
        photos,
        state_machine=AttendanceStateMachine(evaluator),
        timezone=timezone,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        location=location,
        evaluator=evaluator,
        photos=photos,
        auth_service=AuthService(users_repo),
        doctor_service=DoctorService(users_repo, attendance=attendance_repo, photos=photos),
        attendance_service=attendance_service,
    )


def build_container(*, settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    return build_services(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        location=AuthorizedLocation.from_settings(settings),
        upload_root=str(getattr(settings, "UPLOAD_ROOT")),
        timezone=str(getattr(settings, "ATTENDANCE_TIMEZONE", "UTC")),
        conn=conn,
    )
