from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceType, DayState
from ...core.errors import ErrorKind, Failure
from .base import TransitionRule


class CheckInRule(TransitionRule):
    """NoActivity -> CheckedIn, once per day."""

    type = AttendanceType.CHECKIN

    def check(self, state: DayState) -> Optional[Failure]:
        if state != DayState.NO_ACTIVITY:
            return Failure(ErrorKind.ALREADY_CHECKED_IN, "You have already checked in today")
        return None
