"""Visit detection over an ordered point sequence, plus CSV export."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Callable, Iterable, Sequence, Union

from visit_finder.errors import NoConvergence
from visit_finder.geo import vincenty_km
from visit_finder.models import GeoPoint, TimedPoint, VisitRecord
from visit_finder.timeutils import dt_from_epoch_s, format_hhmmss

MIN_POINTS = 10


@dataclass(frozen=True, slots=True)
class PointClassified:
    """A candidate point was measured against the threshold."""

    index: int
    point: TimedPoint
    distance_km: float
    inside: bool


@dataclass(frozen=True, slots=True)
class PointSkipped:
    """A candidate point was skipped because its distance is ambiguous."""

    index: int
    point: TimedPoint
    reason: str


@dataclass(frozen=True, slots=True)
class VisitClosed:
    """A run closed and qualified as a visit."""

    record: VisitRecord


@dataclass(frozen=True, slots=True)
class RunDropped:
    """A run closed without a long enough consecutive dwell."""

    start_s: int
    end_s: int
    total_inside: int
    max_consecutive_inside: int


VisitEvent = Union[PointClassified, PointSkipped, VisitClosed, RunDropped]
EventSink = Callable[[VisitEvent], None]


def _ignore(event: VisitEvent) -> None:
    return None


def detect_visits(
    points: Sequence[TimedPoint],
    candidates: AbstractSet[int],
    target: GeoPoint,
    threshold_km: float,
    min_points: int = MIN_POINTS,
    on_event: EventSink | None = None,
) -> list[VisitRecord]:
    """Detect sustained presence near target.

    The scan covers every index from the smallest to the largest candidate, so
    non-candidates between two candidates still count as outside points and
    break consecutive runs.

    Args:
        points: Full point sequence, in chronological index order.
        candidates: Indices returned by the spatial pre-filter.
        target: Target location.
        threshold_km: A point is inside when strictly closer than this.
        min_points: Consecutive inside points needed to qualify a visit, and
            consecutive outside points needed to close a run.
        on_event: Optional callback receiving classification and run events.

    Returns:
        Visit records in scan order.
    """

    emit = on_event or _ignore
    visits: list[VisitRecord] = []
    if not candidates:
        return visits

    first = min(candidates)
    last = max(candidates)

    start_s = 0
    end_s = 0
    total_inside = 0
    consecutive_inside = 0
    max_consecutive_inside = 0
    consecutive_outside = 0

    def close_run() -> None:
        nonlocal total_inside, max_consecutive_inside
        if max_consecutive_inside >= min_points:
            record = VisitRecord(
                start_s=start_s,
                end_s=end_s,
                total_inside=total_inside,
                max_consecutive_inside=max_consecutive_inside,
            )
            visits.append(record)
            emit(VisitClosed(record))
        elif total_inside > 0:
            emit(RunDropped(start_s, end_s, total_inside, max_consecutive_inside))
        total_inside = 0
        max_consecutive_inside = 0

    for idx in range(first, last + 1):
        pt = points[idx]
        if idx in candidates:
            try:
                d = vincenty_km(pt.geo_point, target)
            except NoConvergence as exc:
                emit(PointSkipped(idx, pt, str(exc)))
                continue
            emit(PointClassified(idx, pt, d, d < threshold_km))
        else:
            # outside by construction: the box is a superset of the disk
            d = threshold_km * 2

        if d < threshold_km:
            if total_inside == 0:
                start_s = pt.timestamp
            end_s = pt.timestamp
            total_inside += 1
            consecutive_inside += 1
            max_consecutive_inside = max(max_consecutive_inside, consecutive_inside)
            consecutive_outside = 0
        else:
            consecutive_outside += 1
            consecutive_inside = 0

        if consecutive_outside >= min_points:
            close_run()

    close_run()
    return visits


def write_visits_csv(visits: Sequence[VisitRecord], out_path: str | Path, tz_name: str) -> None:
    """Write visit records to CSV."""

    p = Path(out_path)
    with p.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(
            f,
            fieldnames=[
                "start_time",
                "end_time",
                "duration_seconds",
                "duration_hhmmss",
                "total_inside",
                "max_consecutive_inside",
                "start_epoch_s",
                "end_epoch_s",
            ],
        )
        w.writeheader()
        for v in visits:
            w.writerow(
                {
                    "start_time": dt_from_epoch_s(v.start_s, tz_name).isoformat(sep=" "),
                    "end_time": dt_from_epoch_s(v.end_s, tz_name).isoformat(sep=" "),
                    "duration_seconds": f"{v.duration_seconds:.0f}",
                    "duration_hhmmss": format_hhmmss(v.duration_seconds),
                    "total_inside": v.total_inside,
                    "max_consecutive_inside": v.max_consecutive_inside,
                    "start_epoch_s": v.start_s,
                    "end_epoch_s": v.end_s,
                }
            )


@dataclass(frozen=True, slots=True)
class VisitsTotal:
    """Total duration summary."""

    visits: int
    total_seconds: float

    @property
    def total_hhmmss(self) -> str:
        return format_hhmmss(self.total_seconds)


def sum_visits(visits: Iterable[VisitRecord]) -> VisitsTotal:
    """Sum visit durations."""

    total = 0.0
    count = 0
    for v in visits:
        total += v.duration_seconds
        count += 1
    return VisitsTotal(visits=count, total_seconds=total)
