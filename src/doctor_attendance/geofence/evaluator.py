from __future__ import annotations

import logging
import math
from typing import Any, Optional

from ..core.constants import EARTH_RADIUS_METERS
from ..core.errors import ErrorKind, Outcome
from .model import AuthorizedLocation, Coordinate, GeofenceResult

logger = logging.getLogger(__name__)


def _parse_degrees(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def validate_coordinates(raw_lat: Any, raw_lng: Any) -> Outcome[Coordinate]:
    """Parse a caller-supplied latitude/longitude pair.

    Accepts strings or numbers. Format is checked before ranges so callers can
    tell "not a number" apart from "a number, but not on Earth".
    """

    latitude = _parse_degrees(raw_lat)
    longitude = _parse_degrees(raw_lng)

    if latitude is None or longitude is None:
        return Outcome.fail(ErrorKind.INVALID_FORMAT, "Coordinates must be valid numbers")
    if not -90.0 <= latitude <= 90.0:
        return Outcome.fail(ErrorKind.LATITUDE_OUT_OF_RANGE, "Latitude must be between -90 and 90")
    if not -180.0 <= longitude <= 180.0:
        return Outcome.fail(ErrorKind.LONGITUDE_OUT_OF_RANGE, "Longitude must be between -180 and 180")

    return Outcome.success(Coordinate(latitude=latitude, longitude=longitude))


def compute_distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters (haversine, spherical Earth)."""

    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


class GeofenceEvaluator:
    """Decides whether a claimed coordinate lies inside the authorized radius."""

    def __init__(self, location: AuthorizedLocation):
        self._location = location

    @property
    def location(self) -> AuthorizedLocation:
        return self._location

    def is_within_geofence(self, claimed: Optional[Coordinate]) -> Outcome[GeofenceResult]:
        if claimed is None or not isinstance(claimed, Coordinate) or not claimed.is_valid:
            return Outcome.fail(ErrorKind.INVALID_COORDINATES, "Invalid coordinates provided")

        authorized = self._location.coordinate
        distance = compute_distance_meters(authorized, claimed)
        result = GeofenceResult(
            within_fence=distance <= self._location.radius_meters,
            distance_meters=int(round(distance)),
            max_distance=self._location.radius_meters,
            authorized_location=authorized,
        )
        logger.debug(
            "geofence check claimed=(%s, %s) distance=%.2fm radius=%sm within=%s",
            claimed.latitude,
            claimed.longitude,
            distance,
            self._location.radius_meters,
            result.within_fence,
        )
        return Outcome.success(result)
