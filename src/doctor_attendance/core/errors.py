"""Typed failures returned by the geofence and attendance core.

Core operations never raise for user input or business-rule violations; they
return an ``Outcome`` holding either a value or a ``Failure`` whose ``kind``
callers can branch on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Generic, Optional, TypeVar

if TYPE_CHECKING:
    from ..geofence.model import GeofenceResult

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_FORMAT = "InvalidFormat"
    LATITUDE_OUT_OF_RANGE = "LatitudeOutOfRange"
    LONGITUDE_OUT_OF_RANGE = "LongitudeOutOfRange"
    INVALID_COORDINATES = "InvalidCoordinates"
    OUTSIDE_GEOFENCE = "OutsideGeofence"
    PHOTO_REQUIRED = "PhotoRequired"
    INVALID_PHOTO = "InvalidPhoto"
    ALREADY_CHECKED_IN = "AlreadyCheckedIn"
    ALREADY_CHECKED_OUT = "AlreadyCheckedOut"
    NOT_CHECKED_IN = "NotCheckedIn"


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    geofence: Optional["GeofenceResult"] = None


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str, *, geofence: Optional["GeofenceResult"] = None) -> "Outcome[T]":
        return cls(failure=Failure(kind=kind, message=message, geofence=geofence))
