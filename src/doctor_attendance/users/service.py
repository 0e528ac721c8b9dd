from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.photos import PhotoStorage
from ..attendance.repository import AttendanceRepository
from ..common.validators import require_max_length, require_min_length, require_non_empty
from ..core.constants import MAX_NAME_LENGTH, MAX_USER_ID_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    name: str
    role: Role

    def to_dict(self) -> dict:
        return {"id": self.user_id, "name": self.name, "role": self.role.value}


def _password_matches(user: User, password: Optional[str]) -> bool:
    if not password:
        return False
    try:
        return check_password_hash(user.password_hash, password)
    except ValueError:
        # placeholder or corrupted hashes in seeded rows
        return False


class AuthService:
    """Use case: authenticate users and let them change their own password."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, user_id: str, password: str) -> SessionUser:
        user_id = (user_id or "").strip()
        user = self._users.get_by_id(user_id) if user_id else None
        if not user or not _password_matches(user, password):
            logger.info("Failed login for id=%r", user_id)
            raise AuthenticationError("Invalid ID or password")

        return SessionUser(user_id=user.user_id, name=user.name, role=user.role)

    def current_user(self, user_id: str) -> Optional[SessionUser]:
        user = self._users.get_by_id(user_id)
        if not user:
            return None
        return SessionUser(user_id=user.user_id, name=user.name, role=user.role)

    def change_password(self, user_id: str, *, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if not _password_matches(user, current_password):
            raise AuthenticationError("Current password is incorrect")

        self._users.update_password(user_id, generate_password_hash(new_password))
        logger.info("Password changed for %s", user_id)


class DoctorService:
    """Use case: manage doctor accounts (admin).

    When given the attendance repository and photo storage, deleting a doctor
    also removes the photos of the attendance rows the database cascades away.
    """

    def __init__(
        self,
        users: UserRepository,
        *,
        attendance: Optional[AttendanceRepository] = None,
        photos: Optional[PhotoStorage] = None,
    ):
        self._users = users
        self._attendance = attendance
        self._photos = photos

    def _get_doctor(self, doctor_id: str) -> User:
        user = self._users.get_by_id((doctor_id or "").strip())
        if not user or user.role != Role.DOCTOR:
            raise NotFoundError("Doctor not found")
        return user

    def create_doctor(self, *, user_id: str, name: str, password: str) -> User:
        if not user_id or not name or not password:
            raise ValidationError("ID, name, and password are required")
        user_id = require_non_empty(user_id, "ID")
        require_max_length(user_id, "ID", MAX_USER_ID_LENGTH)
        name = require_non_empty(name, "Name")
        require_max_length(name, "Name", MAX_NAME_LENGTH)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_id(user_id):
            raise ConflictError("Doctor ID already exists")

        try:
            self._users.create_user(
                user_id=user_id,
                name=name,
                role=Role.DOCTOR,
                password_hash=generate_password_hash(password),
            )
        except ConflictError:
            # another request created the same id after our lookup
            raise ConflictError("Doctor ID already exists") from None
        logger.info("Created doctor account %s", user_id)
        return self._get_doctor(user_id)

    def update_password(self, *, doctor_id: str, new_password: str) -> None:
        if not doctor_id or not new_password:
            raise ValidationError("Doctor ID and new password are required")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        doctor = self._get_doctor(doctor_id)
        self._users.update_password(doctor.user_id, generate_password_hash(new_password))
        logger.info("Admin reset password for doctor %s", doctor.user_id)

    def delete_doctor(self, doctor_id: str) -> None:
        doctor = self._get_doctor(doctor_id)
        photo_paths = []
        if self._attendance is not None and self._photos is not None:
            photo_paths = list(self._attendance.list_photo_paths_for_user(doctor.user_id))

        if not self._users.delete_by_id(doctor.user_id):
            raise NotFoundError("Doctor not found")

        removed = sum(1 for path in photo_paths if self._photos.delete(path))
        logger.info("Deleted doctor %s, their attendance records and %d photos", doctor.user_id, removed)

    def list_doctors(self) -> list[User]:
        return list(self._users.list_by_role(Role.DOCTOR))
