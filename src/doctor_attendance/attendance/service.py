from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional

from werkzeug.datastructures import FileStorage

from ..common.datetime_utils import calendar_day, utc_now
from ..core.constants import DEFAULT_TIMEZONE, RECENT_ACTIVITY_LIMIT
from ..core.enums import AttendanceType
from ..core.errors import ErrorKind, Outcome
from ..core.exceptions import DuplicateAttendanceError, NotFoundError
from ..geofence.evaluator import GeofenceEvaluator, validate_coordinates
from ..users.repository import UserRepository
from .model import AttendanceRecord, CheckResult, DailyStatus, Page
from .photos import PhotoStorage
from .repository import AttendanceRepository
from .state_machine import AttendanceStateMachine

logger = logging.getLogger(__name__)

_DUPLICATE_KIND = {
    AttendanceType.CHECKIN: (ErrorKind.ALREADY_CHECKED_IN, "You have already checked in today"),
    AttendanceType.CHECKOUT: (ErrorKind.ALREADY_CHECKED_OUT, "You have already checked out today"),
}


class AttendanceService:
    """Use cases around check-in/check-out and attendance review."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        evaluator: GeofenceEvaluator,
        photos: PhotoStorage,
        *,
        state_machine: AttendanceStateMachine | None = None,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._users = users
        self._evaluator = evaluator
        self._photos = photos
        self._machine = state_machine or AttendanceStateMachine(evaluator)
        self._tz = timezone

    @property
    def timezone(self) -> str:
        return self._tz

    def day_of(self, when: datetime) -> date:
        return calendar_day(when, self._tz)

    def check_in(
        self,
        user_id: str,
        *,
        latitude: Any,
        longitude: Any,
        photo: Optional[FileStorage],
        now: datetime | None = None,
    ) -> Outcome[CheckResult]:
        return self._check(AttendanceType.CHECKIN, user_id, latitude, longitude, photo, now)

    def check_out(
        self,
        user_id: str,
        *,
        latitude: Any,
        longitude: Any,
        photo: Optional[FileStorage],
        now: datetime | None = None,
    ) -> Outcome[CheckResult]:
        return self._check(AttendanceType.CHECKOUT, user_id, latitude, longitude, photo, now)

    def _check(
        self,
        attendance_type: AttendanceType,
        user_id: str,
        latitude: Any,
        longitude: Any,
        photo: Optional[FileStorage],
        now: datetime | None,
    ) -> Outcome[CheckResult]:
        now = now or utc_now()
        today = self.day_of(now)

        coords = validate_coordinates(latitude, longitude)
        if not coords.ok:
            return Outcome(failure=coords.failure)

        reference = None
        if PhotoStorage.is_present(photo):
            if not PhotoStorage.is_image(photo):
                return Outcome.fail(ErrorKind.INVALID_PHOTO, "Only image files are allowed")
            reference = self._photos.reference_for(user_id, attendance_type, now)

        if not self._users.get_by_id(user_id):
            raise NotFoundError("Doctor not found")

        existing = self._attendance.list_for_user_and_date(user_id, today)
        request = self._machine.request_check_in if attendance_type == AttendanceType.CHECKIN else self._machine.request_check_out
        decision = request(
            user_id=user_id,
            day=today,
            existing=existing,
            claimed=coords.value,
            photo_path=reference,
            now=now,
        )
        if not decision.ok:
            logger.info("%s rejected for %s: %s", attendance_type.value, user_id, decision.failure.kind.value)
            return Outcome(failure=decision.failure)

        new_record = decision.value
        self._photos.save(photo, new_record.photo_path)
        try:
            record = self._attendance.create(new_record)
        except DuplicateAttendanceError:
            self._photos.delete(new_record.photo_path)
            kind, message = _DUPLICATE_KIND[attendance_type]
            logger.info("%s lost a concurrent race for %s on %s", attendance_type.value, user_id, today)
            return Outcome.fail(kind, message)
        except Exception:
            # no row points at the photo
            self._photos.delete(new_record.photo_path)
            raise

        logger.info("%s recorded for %s (id=%s, %sm)", attendance_type.value, user_id, record.attendance_id, new_record.geofence.distance_meters)
        return Outcome.success(CheckResult(record=record, geofence=new_record.geofence))

    def today_status(self, user_id: str, *, now: datetime | None = None) -> DailyStatus:
        today = self.day_of(now or utc_now())
        checkin: Optional[AttendanceRecord] = None
        checkout: Optional[AttendanceRecord] = None
        for r in sorted(self._attendance.list_for_user_and_date(user_id, today), key=lambda r: r.timestamp):
            if r.type == AttendanceType.CHECKIN and checkin is None:
                checkin = r
            elif r.type == AttendanceType.CHECKOUT and checkout is None:
                checkout = r
        return DailyStatus(day=today, checkin=checkin, checkout=checkout)

    def history(self, user_id: str, *, page: int, limit: int) -> Page:
        total = self._attendance.count_for_user(user_id)
        rows = self._attendance.list_for_user(user_id, limit=limit, offset=(page - 1) * limit)
        return Page(records=list(rows), page=page, limit=limit, total=total)

    def recent_activity(self, limit: int = RECENT_ACTIVITY_LIMIT) -> list[AttendanceRecord]:
        return list(self._attendance.list_recent(limit))

    def search_history(
        self,
        *,
        page: int,
        limit: int,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Page:
        search = (search or "").strip() or None
        total = self._attendance.count_filtered(search=search, start_date=start_date, end_date=end_date)
        rows = self._attendance.list_filtered(
            limit=limit,
            offset=(page - 1) * limit,
            search=search,
            start_date=start_date,
            end_date=end_date,
        )
        return Page(records=list(rows), page=page, limit=limit, total=total)

    def delete_record(self, attendance_id: int) -> None:
        """Admin deletion; frees the day's slot so the doctor can submit again."""

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if not self._attendance.delete_by_id(attendance_id):
            raise NotFoundError("Attendance record not found")
        self._photos.delete(record.photo_path)
        logger.info("Deleted attendance record %s (%s %s)", attendance_id, record.user_id, record.type.value)
