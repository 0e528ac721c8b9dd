from __future__ import annotations

import io
import math
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional

from werkzeug.datastructures import FileStorage

from doctor_attendance.attendance.model import AttendanceRecord, NewAttendanceRecord
from doctor_attendance.core.constants import EARTH_RADIUS_METERS
from doctor_attendance.core.enums import Role
from doctor_attendance.core.exceptions import ConflictError, DuplicateAttendanceError
from doctor_attendance.geofence.model import Coordinate
from doctor_attendance.users.model import User

AUTHORIZED = Coordinate(latitude=-6.2, longitude=106.816666)
DOCTOR_ID = "19900101"
DOCTOR_PASSWORD = "doctor123"
ADMIN_PASSWORD = "admin123"


def north_of(origin: Coordinate, meters: float) -> Coordinate:
    """Point ``meters`` due north of ``origin`` (along a meridian)."""
    return Coordinate(latitude=origin.latitude + math.degrees(meters / EARTH_RADIUS_METERS), longitude=origin.longitude)


def make_photo(content_type: str = "image/jpeg", filename: str = "selfie.jpg") -> FileStorage:
    return FileStorage(stream=io.BytesIO(b"\xff\xd8\xff\xe0fake-jpeg"), filename=filename, content_type=content_type)


class InMemoryUsers:
    def __init__(self, users: Optional[list[User]] = None):
        self.users_by_id: dict[str, User] = {u.user_id: u for u in users or []}
        self.on_delete = None
        self.race_on_create = False

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def create_user(self, *, user_id: str, name: str, role: Role, password_hash: str) -> None:
        if user_id in self.users_by_id or self.race_on_create:
            raise ConflictError(f"User {user_id} already exists")
        self.users_by_id[user_id] = User(
            user_id=user_id,
            name=name,
            role=role,
            password_hash=password_hash,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    def update_password(self, user_id: str, password_hash: str) -> bool:
        user = self.users_by_id.get(user_id)
        if not user:
            return False
        self.users_by_id[user_id] = replace(user, password_hash=password_hash)
        return True

    def delete_by_id(self, user_id: str) -> bool:
        if self.users_by_id.pop(user_id, None) is None:
            return False
        if self.on_delete:
            self.on_delete(user_id)
        return True

    def list_by_role(self, role: Role):
        return sorted((u for u in self.users_by_id.values() if u.role == role), key=lambda u: u.name)


class InMemoryAttendance:
    """Mirrors the UNIQUE (user_id, type, attendance_date) index of the real table."""

    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0
        self.race_on_create = False
        users.on_delete = self._cascade

    def _cascade(self, user_id: str) -> None:
        self.records = {k: r for k, r in self.records.items() if r.user_id != user_id}

    def _named(self, r: AttendanceRecord) -> AttendanceRecord:
        user = self._users.get_by_id(r.user_id)
        return replace(r, doctor_name=user.name if user else None)

    def list_for_user_and_date(self, user_id: str, attendance_date: date):
        rows = [r for r in self.records.values() if r.user_id == user_id and r.attendance_date == attendance_date]
        return sorted(rows, key=lambda r: r.timestamp)

    def create(self, record: NewAttendanceRecord) -> AttendanceRecord:
        taken = any(
            r.user_id == record.user_id and r.type == record.type and r.attendance_date == record.attendance_date
            for r in self.records.values()
        )
        if taken or self.race_on_create:
            raise DuplicateAttendanceError("duplicate")
        self._id += 1
        rec = AttendanceRecord(
            attendance_id=self._id,
            user_id=record.user_id,
            type=record.type,
            timestamp=record.timestamp,
            attendance_date=record.attendance_date,
            photo_path=record.photo_path,
            location_lat=record.location_lat,
            location_lng=record.location_lng,
        )
        self.records[self._id] = rec
        return rec

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(attendance_id)

    def delete_by_id(self, attendance_id: int) -> bool:
        return self.records.pop(attendance_id, None) is not None

    def count_for_user(self, user_id: str) -> int:
        return sum(1 for r in self.records.values() if r.user_id == user_id)

    def list_for_user(self, user_id: str, *, limit: int, offset: int):
        rows = sorted((r for r in self.records.values() if r.user_id == user_id), key=lambda r: r.timestamp, reverse=True)
        return rows[offset:offset + limit]

    def list_photo_paths_for_user(self, user_id: str):
        return [r.photo_path for r in self.records.values() if r.user_id == user_id]

    def list_recent(self, limit: int):
        rows = sorted(self.records.values(), key=lambda r: r.timestamp, reverse=True)
        return [self._named(r) for r in rows[:limit]]

    def _filtered(self, search, start_date, end_date):
        out = []
        for r in map(self._named, self.records.values()):
            if search and search.lower() not in (r.doctor_name or "").lower() and search not in r.user_id:
                continue
            if start_date and r.attendance_date < start_date:
                continue
            if end_date and r.attendance_date > end_date:
                continue
            out.append(r)
        return sorted(out, key=lambda r: r.timestamp, reverse=True)

    def count_filtered(self, *, search=None, start_date=None, end_date=None) -> int:
        return len(self._filtered(search, start_date, end_date))

    def list_filtered(self, *, limit, offset, search=None, start_date=None, end_date=None):
        return self._filtered(search, start_date, end_date)[offset:offset + limit]


def login(client, user_id: str, password: str):
    return client.post("/api/auth/login", json={"id": user_id, "password": password})
