from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceType, DayState
from ...core.errors import ErrorKind, Failure
from .base import TransitionRule


class CheckOutRule(TransitionRule):
    """CheckedIn -> CheckedOut; CheckedOut is terminal for the day."""

    type = AttendanceType.CHECKOUT

    def check(self, state: DayState) -> Optional[Failure]:
        if state == DayState.NO_ACTIVITY:
            return Failure(ErrorKind.NOT_CHECKED_IN, "You must check in before checking out")
        if state == DayState.CHECKED_OUT:
            return Failure(ErrorKind.ALREADY_CHECKED_OUT, "You have already checked out today")
        return None
