from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_user_and_date(self, user_id: str, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: NewAttendanceRecord) -> AttendanceRecord:
        """Insert a record.

        Must raise ``DuplicateAttendanceError`` when (user, type, day) is
        already taken, so concurrent requests cannot both succeed.
        """

        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def count_for_user(self, user_id: str) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, limit: int, offset: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_photo_paths_for_user(self, user_id: str) -> Sequence[str]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        """Latest records across all users, with ``doctor_name`` filled in."""

        raise NotImplementedError

    def count_filtered(
        self,
        *,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def list_filtered(
        self,
        *,
        limit: int,
        offset: int,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
