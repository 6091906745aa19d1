"""Pytest configuration and fixtures for visit_finder tests."""

import json

import pytest

from visit_finder.geo import vincenty_km
from visit_finder.models import GeoPoint, TimedPoint

START_S = 1_600_000_000
STEP_S = 60


@pytest.fixture
def make_track():
    """Build a point sequence from a pattern string.

    "I" is ~11 m north of the target, "O" is ~1.1 km north of it and "S" is
    nearly antipodal to the origin (only meaningful with target (0, 0)).
    Timestamps start at START_S and advance by STEP_S. Coordinates are
    rounded to 7 decimals so they survive the E7 encoding of Takeout files.
    """

    def _make(pattern, target=GeoPoint(0.0, 0.0), start=START_S, step=STEP_S):
        points = []
        for i, ch in enumerate(pattern):
            ts = start + i * step
            if ch == "I":
                points.append(TimedPoint(round(target.latitude + 0.0001, 7), target.longitude, ts))
            elif ch == "O":
                points.append(TimedPoint(round(target.latitude + 0.01, 7), target.longitude, ts))
            elif ch == "S":
                points.append(TimedPoint(0.5, 179.7, ts))
            else:
                raise ValueError(f"unknown pattern character {ch!r}")
        return points

    return _make


@pytest.fixture
def point_at():
    """Find the point at a given distance and bearing from a center.

    Moves along a straight line in lat/long space and bisects the scale until
    the ellipsoidal distance matches to within a micrometre. The returned
    point is never farther than the requested distance.
    """

    import math

    def _point_at(center, bearing_deg, km):
        dlat = math.cos(math.radians(bearing_deg))
        dlon = math.sin(math.radians(bearing_deg))

        def at(t):
            return GeoPoint(center.latitude + t * dlat, center.longitude + t * dlon)

        lo, hi = 0.0, km / 20.0
        assert vincenty_km(center, at(hi)) > km
        for _ in range(200):
            mid = (lo + hi) / 2
            d = vincenty_km(center, at(mid))
            if 0 <= km - d < 1e-9:
                return at(mid)
            if d > km:
                hi = mid
            else:
                lo = mid
        return at(lo)

    return _point_at


@pytest.fixture
def write_takeout(tmp_path):
    """Write a Takeout-style JSON file from TimedPoints and return its path."""

    def _write(points, name="Location History.json"):
        path = tmp_path / name
        locations = [
            {
                "timestampMs": str(pt.timestamp * 1000 + 123),
                "latitudeE7": round(pt.latitude * 1e7),
                "longitudeE7": round(pt.longitude * 1e7),
            }
            for pt in points
        ]
        path.write_text(json.dumps({"locations": locations}), encoding="utf-8")
        return path

    return _write
