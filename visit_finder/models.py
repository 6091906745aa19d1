"""Data models for points, bounding boxes and visits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class TimedPoint:
    """A single location sample.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        timestamp: Unix epoch seconds.
    """

    latitude: float
    longitude: float
    timestamp: int

    def coordinates(self) -> tuple[float, float]:
        """Planar (x, y) coordinates used by the spatial index."""

        return self.latitude, self.longitude

    @property
    def geo_point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """An axis-aligned lat/long rectangle.

    Note:
        No antimeridian wraparound: southwest.longitude <= northeast.longitude.
    """

    northeast: GeoPoint
    southwest: GeoPoint

    def contains(self, point: GeoPoint | TimedPoint) -> bool:
        """Inclusive membership test."""

        return (
            self.southwest.latitude <= point.latitude <= self.northeast.latitude
            and self.southwest.longitude <= point.longitude <= self.northeast.longitude
        )


@dataclass(frozen=True, slots=True)
class VisitRecord:
    """A qualifying run of points within the threshold of the target."""

    start_s: int
    end_s: int
    total_inside: int
    max_consecutive_inside: int

    @property
    def duration_seconds(self) -> float:
        """Visit duration in seconds."""

        return float(max(0, self.end_s - self.start_s))


DEFAULT_TZ: Final[str] = "UTC"
