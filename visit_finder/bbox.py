"""Bounding box of a geodesic disk, found by expansion + bisection.

Ellipsoidal iso-distance contours are not axis-aligned rectangles, so the box
is a loose superset of the disk. Exactness is recovered later by re-testing
candidates with the exact metric.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final

from visit_finder.errors import NoConvergence, TooCloseToPoleOrMeridian
from visit_finder.geo import vincenty_km
from visit_finder.models import BoundingBox, GeoPoint

INITIAL_INCREMENT: Final[float] = 1e-6  # degrees
TOLERANCE_KM: Final[float] = 0.0001  # 10 cm
MAX_BISECTIONS: Final[int] = 200


@dataclass(frozen=True, slots=True)
class Direction:
    """A cardinal search direction.

    Attributes:
        name: Human readable name used in error messages.
        axis: GeoPoint field that is stepped ("latitude" or "longitude").
        sign: +1.0 or -1.0.
        limit: Hard coordinate limit that must not be crossed.
    """

    name: str
    axis: str
    sign: float
    limit: float

    def coordinate(self, point: GeoPoint) -> float:
        return getattr(point, self.axis)

    def step(self, point: GeoPoint, delta: float) -> GeoPoint:
        return replace(point, **{self.axis: self.coordinate(point) + delta * self.sign})

    def past_limit(self, point: GeoPoint) -> bool:
        return self.coordinate(point) * self.sign > self.limit * self.sign


NORTH: Final[Direction] = Direction("north", "latitude", 1.0, 90.0)
SOUTH: Final[Direction] = Direction("south", "latitude", -1.0, -90.0)
EAST: Final[Direction] = Direction("east", "longitude", 1.0, 180.0)
WEST: Final[Direction] = Direction("west", "longitude", -1.0, -180.0)


def expand(center: GeoPoint, direction: Direction, target_km: float) -> GeoPoint:
    """Step away from center with doubling increments until past target_km.

    Returns:
        The first stepped point farther than target_km from center.

    Raises:
        TooCloseToPoleOrMeridian: If the coordinate limit is passed first.
    """

    increment = INITIAL_INCREMENT
    point = center
    while True:
        point = direction.step(point, increment)
        if direction.past_limit(point):
            raise TooCloseToPoleOrMeridian(direction.name)
        if vincenty_km(center, point) > target_km:
            return point
        increment *= 2


def _midpoint(a: GeoPoint, b: GeoPoint) -> GeoPoint:
    return GeoPoint((a.latitude + b.latitude) / 2, (a.longitude + b.longitude) / 2)


def bisect(center: GeoPoint, outside: GeoPoint, target_km: float) -> GeoPoint:
    """Narrow [center, outside] until the midpoint lies on or just beyond target_km.

    The accepted midpoint is at most 10 cm farther than target_km and never
    closer, so a box built from such extremes still covers the whole disk.

    Args:
        center: Search origin, strictly inside the radius.
        outside: A point strictly beyond the radius.
        target_km: Radius in kilometers.

    Returns:
        The converged midpoint.

    Raises:
        NoConvergence: If the tolerance is not reached in MAX_BISECTIONS steps.
    """

    inside = center
    for _ in range(MAX_BISECTIONS):
        mid = _midpoint(inside, outside)
        d = vincenty_km(center, mid)
        if 0 <= d - target_km < TOLERANCE_KM:
            return mid
        if d > target_km:
            outside = mid
        else:
            inside = mid
    raise NoConvergence(f"bisection towards {outside} did not reach {target_km} km")


def find_extreme(center: GeoPoint, direction: Direction, target_km: float) -> GeoPoint:
    """Find the point target_km away from center along one direction."""

    return bisect(center, expand(center, direction, target_km), target_km)


def find_bounding_box(center: GeoPoint, target_km: float) -> BoundingBox:
    """Compute a lat/long box containing every point within target_km of center.

    Args:
        center: Center of the geodesic disk.
        target_km: Disk radius in kilometers, must be positive.

    Returns:
        The bounding box.

    Raises:
        TooCloseToPoleOrMeridian: If the disk crosses a pole or the antimeridian.
        NoConvergence: If a corner distance cannot be computed.
    """

    if target_km <= 0:
        raise ValueError(f"target distance must be positive, got {target_km!r}")

    north = find_extreme(center, NORTH, target_km)
    south = find_extreme(center, SOUTH, target_km)
    east = find_extreme(center, EAST, target_km)
    west = find_extreme(center, WEST, target_km)
    return BoundingBox(
        northeast=GeoPoint(north.latitude, east.longitude),
        southwest=GeoPoint(south.latitude, west.longitude),
    )
