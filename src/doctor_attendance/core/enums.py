from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    DOCTOR = "doctor"


class AttendanceType(str, Enum):
    """Kind of attendance event, stored as-is in the database."""

    CHECKIN = "checkin"
    CHECKOUT = "checkout"


class DayState(str, Enum):
    """Attendance state of one user on one calendar day."""

    NO_ACTIVITY = "NO_ACTIVITY"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
