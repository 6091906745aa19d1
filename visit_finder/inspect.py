"""Inspect a loaded location history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from visit_finder.models import TimedPoint
from visit_finder.timeutils import DeltaStats, delta_stats


@dataclass(frozen=True, slots=True)
class InspectResult:
    """High-level history inspection result."""

    points: int
    order: str
    min_time_s: int | None
    max_time_s: int | None
    delta: DeltaStats | None
    min_lat: float | None
    max_lat: float | None
    min_lon: float | None
    max_lon: float | None
    duplicate_timestamps: int


def point_order(points: Sequence[TimedPoint]) -> str:
    """Classify index order as "ascending", "descending" or "unordered"."""

    pairs = list(zip(points, points[1:]))
    if all(a.timestamp <= b.timestamp for a, b in pairs):
        return "ascending"
    if all(a.timestamp >= b.timestamp for a, b in pairs):
        return "descending"
    return "unordered"


def inspect_points(points: Sequence[TimedPoint]) -> InspectResult:
    """Inspect already-loaded points."""

    if not points:
        return InspectResult(
            points=0,
            order="ascending",
            min_time_s=None,
            max_time_s=None,
            delta=None,
            min_lat=None,
            max_lat=None,
            min_lon=None,
            max_lon=None,
            duplicate_timestamps=0,
        )

    times = sorted(p.timestamp for p in points)
    dupe = 0
    for i in range(1, len(times)):
        if times[i] == times[i - 1]:
            dupe += 1

    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]
    return InspectResult(
        points=len(points),
        order=point_order(points),
        min_time_s=times[0],
        max_time_s=times[-1],
        delta=delta_stats(times),
        min_lat=min(lats),
        max_lat=max(lats),
        min_lon=min(lons),
        max_lon=max(lons),
        duplicate_timestamps=dupe,
    )
