from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...core.enums import AttendanceType, DayState
from ...core.errors import Failure


class TransitionRule(ABC):
    """Strategy Pattern: decide whether one event type is legal from a day state."""

    type: AttendanceType

    @abstractmethod
    def check(self, state: DayState) -> Optional[Failure]:
        """Return ``None`` when the transition is permitted."""
        raise NotImplementedError
