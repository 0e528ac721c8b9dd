from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceType
from .transitions.base import TransitionRule
from .transitions.checkin_rule import CheckInRule
from .transitions.checkout_rule import CheckOutRule


@dataclass
class TransitionRuleFactory:
    """Factory Pattern: choose the transition rule for an event type."""

    def for_type(self, attendance_type: AttendanceType) -> TransitionRule:
        if attendance_type == AttendanceType.CHECKIN:
            return CheckInRule()
        if attendance_type == AttendanceType.CHECKOUT:
            return CheckOutRule()
        raise ValueError(f"Unsupported attendance type: {attendance_type!r}")
