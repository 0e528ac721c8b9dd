from __future__ import annotations

from dataclasses import dataclass


def _in_range(value: float, low: float, high: float) -> bool:
    return low <= value <= high


@dataclass(frozen=True)
class Coordinate:
    """A (latitude, longitude) pair in decimal degrees."""

    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        return _in_range(self.latitude, -90.0, 90.0) and _in_range(self.longitude, -180.0, 180.0)

    def to_dict(self) -> dict:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(frozen=True)
class AuthorizedLocation:
    """The single site doctors must be near to check in or out.

    Built once at startup from settings and handed to the evaluator; a bad
    value here is a startup error, so the constructor raises.
    """

    latitude: float
    longitude: float
    radius_meters: int

    def __post_init__(self) -> None:
        if not _in_range(self.latitude, -90.0, 90.0):
            raise ValueError(f"Authorized latitude out of range: {self.latitude!r}")
        if not _in_range(self.longitude, -180.0, 180.0):
            raise ValueError(f"Authorized longitude out of range: {self.longitude!r}")
        if self.radius_meters <= 0:
            raise ValueError(f"Geofence radius must be positive: {self.radius_meters!r}")

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

    @classmethod
    def from_settings(cls, settings) -> "AuthorizedLocation":
        return cls(
            latitude=float(getattr(settings, "AUTHORIZED_LAT")),
            longitude=float(getattr(settings, "AUTHORIZED_LNG")),
            radius_meters=int(getattr(settings, "GEOFENCE_RADIUS")),
        )


@dataclass(frozen=True)
class GeofenceResult:
    """Derived per request, never persisted."""

    within_fence: bool
    distance_meters: int
    max_distance: int
    authorized_location: Coordinate

    def to_dict(self) -> dict:
        return {
            "withinFence": self.within_fence,
            "distanceMeters": self.distance_meters,
            "maxDistance": self.max_distance,
            "authorizedLocation": self.authorized_location.to_dict(),
        }
