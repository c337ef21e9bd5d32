"""Distance check between a new photo and the previous photo of a resource.

Missing or unusable coordinates pass the check: photos taken without location
data are accepted rather than rejected.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

EARTH_RADIUS_KM = 6371.0
DEFAULT_MAX_METERS = 25.0


@dataclass(frozen=True)
class Geotag:
    latitude: float
    longitude: float

    @classmethod
    def from_values(cls, latitude, longitude) -> Optional['Geotag']:
        """Build a geotag from loose inputs (str, Decimal, float). None if unusable."""
        if latitude is None or longitude is None:
            return None
        try:
            lat = float(str(latitude).strip())
            lon = float(str(longitude).strip())
        except (TypeError, ValueError):
            return None
        if math.isnan(lat) or math.isnan(lon):
            return None
        if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lon <= 180.0):
            return None
        return cls(latitude=lat, longitude=lon)

    @classmethod
    def parse(cls, text) -> Optional['Geotag']:
        """Parse ``"12.971599, 77.594566"``."""
        if not text:
            return None
        parts = str(text).split(',')
        if len(parts) != 2:
            return None
        return cls.from_values(parts[0], parts[1])

    def __str__(self):
        return f'{self.latitude}, {self.longitude}'


@dataclass(frozen=True)
class ProximityResult:
    ok: bool
    max_meters: float
    distance_meters: Optional[float] = None

    @property
    def skipped(self) -> bool:
        return self.distance_meters is None


def haversine_meters(a: Geotag, b: Geotag) -> float:
    """Great-circle distance in meters, rounded to centimeters."""
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.latitude)) * math.cos(math.radians(b.latitude)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return round(EARTH_RADIUS_KM * c * 1000, 2)


def check_proximity(new_geotag: Optional[Geotag], prior_geotag: Optional[Geotag],
                    max_meters: float = DEFAULT_MAX_METERS) -> ProximityResult:
    if new_geotag is None or prior_geotag is None:
        return ProximityResult(ok=True, max_meters=max_meters)

    distance = haversine_meters(new_geotag, prior_geotag)
    return ProximityResult(ok=distance <= max_meters, max_meters=max_meters, distance_meters=distance)
