"""Run configuration, built once at startup and passed down explicitly."""

from __future__ import annotations

from dataclasses import dataclass

from visit_finder.models import DEFAULT_TZ, GeoPoint


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Parameters for one visit search.

    Attributes:
        target: Location to look for visits to.
        threshold_km: A point is at the target when strictly closer than this.
        min_points: Consecutive inside points needed for a visit; also the
            number of consecutive outside points that ends one.
        box_scale: The bounding box is solved for threshold_km * box_scale.
        node_size: Leaf bucket size of the spatial index.
        debug: Report per-point classification and dropped runs.
        tz_name: IANA time zone used when rendering times.
    """

    target: GeoPoint
    threshold_km: float
    min_points: int = 10
    box_scale: float = 2.0
    node_size: int = 64
    debug: bool = False
    tz_name: str = DEFAULT_TZ

    def __post_init__(self) -> None:
        if self.threshold_km <= 0:
            raise ValueError(f"threshold must be positive, got {self.threshold_km!r} km")
        if self.min_points < 1:
            raise ValueError(f"min_points must be >= 1, got {self.min_points!r}")
        if self.box_scale < 1.0:
            raise ValueError(f"box_scale must be >= 1.0, got {self.box_scale!r}")

    @property
    def box_radius_km(self) -> float:
        return self.threshold_km * self.box_scale
