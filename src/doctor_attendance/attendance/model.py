from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_utc
from ..core.enums import AttendanceType
from ..geofence.model import GeofenceResult


@dataclass(frozen=True)
class NewAttendanceRecord:
    """A check-in/out the state machine has accepted, not yet persisted."""

    user_id: str
    type: AttendanceType
    timestamp: datetime
    attendance_date: date
    photo_path: str
    location_lat: float
    location_lng: float
    geofence: Optional[GeofenceResult] = field(default=None, compare=False)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in or check-out event."""

    attendance_id: int
    user_id: str
    type: AttendanceType
    timestamp: datetime
    attendance_date: date
    photo_path: str
    location_lat: Optional[float]
    location_lng: Optional[float]
    doctor_name: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "id": self.attendance_id,
            "user_id": self.user_id,
            "type": self.type.value,
            "timestamp": isoformat_utc(self.timestamp),
            "date": self.attendance_date.isoformat(),
            "photo_path": self.photo_path,
            "location_lat": self.location_lat,
            "location_lng": self.location_lng,
        }
        if self.doctor_name is not None:
            out["doctor_name"] = self.doctor_name
        return out


@dataclass(frozen=True)
class CheckResult:
    record: AttendanceRecord
    geofence: GeofenceResult

    def to_dict(self) -> dict:
        return {
            "timestamp": isoformat_utc(self.record.timestamp),
            "photo_path": self.record.photo_path,
            "location": {"lat": self.record.location_lat, "lng": self.record.location_lng},
            "geofence": self.geofence.to_dict(),
        }


@dataclass(frozen=True)
class DailyStatus:
    """Read-model: first check-in and check-out of a user's day."""

    day: date
    checkin: Optional[AttendanceRecord]
    checkout: Optional[AttendanceRecord]

    def to_dict(self) -> dict:
        def _event(r: Optional[AttendanceRecord]):
            if r is None:
                return None
            return {"timestamp": isoformat_utc(r.timestamp), "photo_path": r.photo_path}

        return {
            "date": self.day.isoformat(),
            "status": {"checkin": _event(self.checkin), "checkout": _event(self.checkout)},
        }


@dataclass(frozen=True)
class Page:
    records: list[AttendanceRecord]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0

    def to_dict(self) -> dict:
        return {
            "records": [r.to_dict() for r in self.records],
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "totalPages": self.total_pages,
            },
        }
