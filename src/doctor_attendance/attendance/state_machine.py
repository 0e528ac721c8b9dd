from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import AttendanceType, DayState
from ..core.errors import ErrorKind, Outcome
from ..geofence.evaluator import GeofenceEvaluator
from ..geofence.model import Coordinate
from .factory import TransitionRuleFactory
from .model import AttendanceRecord, NewAttendanceRecord


def state_of(user_id: str, day: date, records: Iterable[AttendanceRecord]) -> DayState:
    """Fold a day's records into NoActivity -> CheckedIn -> CheckedOut.

    Records for other users or other days are ignored. The state hangs on the
    checkin record: a checkout left behind after an admin deleted its checkin
    counts as NoActivity, so the doctor may check in again and a checkout
    request answers NotCheckedIn first.
    """

    types = {r.type for r in records if r.user_id == user_id and r.attendance_date == day}
    if AttendanceType.CHECKIN not in types:
        return DayState.NO_ACTIVITY
    if AttendanceType.CHECKOUT in types:
        return DayState.CHECKED_OUT
    return DayState.CHECKED_IN


class AttendanceStateMachine:
    """Per-user, per-day check-in/check-out sequencing.

    Pure decision logic: the caller supplies the existing records of the day
    and the server-side ``now``; persistence happens elsewhere.
    """

    def __init__(self, evaluator: GeofenceEvaluator, *, rule_factory: Optional[TransitionRuleFactory] = None):
        self._evaluator = evaluator
        self._rules = rule_factory or TransitionRuleFactory()

    def request_check_in(
        self,
        *,
        user_id: str,
        day: date,
        existing: Iterable[AttendanceRecord],
        claimed: Optional[Coordinate],
        photo_path: Optional[str],
        now: datetime,
    ) -> Outcome[NewAttendanceRecord]:
        return self._request(AttendanceType.CHECKIN, user_id, day, existing, claimed, photo_path, now)

    def request_check_out(
        self,
        *,
        user_id: str,
        day: date,
        existing: Iterable[AttendanceRecord],
        claimed: Optional[Coordinate],
        photo_path: Optional[str],
        now: datetime,
    ) -> Outcome[NewAttendanceRecord]:
        return self._request(AttendanceType.CHECKOUT, user_id, day, existing, claimed, photo_path, now)

    def _request(
        self,
        attendance_type: AttendanceType,
        user_id: str,
        day: date,
        existing: Iterable[AttendanceRecord],
        claimed: Optional[Coordinate],
        photo_path: Optional[str],
        now: datetime,
    ) -> Outcome[NewAttendanceRecord]:
        if not photo_path:
            action = "check-in" if attendance_type == AttendanceType.CHECKIN else "check-out"
            return Outcome.fail(ErrorKind.PHOTO_REQUIRED, f"Photo is required for {action}")

        fence = self._evaluator.is_within_geofence(claimed)
        if not fence.ok:
            return Outcome(failure=fence.failure)
        result = fence.value
        if not result.within_fence:
            return Outcome.fail(
                ErrorKind.OUTSIDE_GEOFENCE,
                f"You are outside the authorized location. You are {result.distance_meters}m away "
                f"(maximum allowed: {result.max_distance}m)",
                geofence=result,
            )

        failure = self._rules.for_type(attendance_type).check(state_of(user_id, day, existing))
        if failure is not None:
            return Outcome(failure=failure)

        return Outcome.success(
            NewAttendanceRecord(
                user_id=user_id,
                type=attendance_type,
                timestamp=now,
                attendance_date=day,
                photo_path=photo_path,
                location_lat=claimed.latitude,
                location_lng=claimed.longitude,
                geofence=result,
            )
        )
