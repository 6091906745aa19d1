"""Human-readable rendering of visit records and detector events."""

from __future__ import annotations

import logging

from visit_finder.models import VisitRecord
from visit_finder.timeutils import dt_from_epoch_s, format_hhmmss
from visit_finder.visits import PointClassified, PointSkipped, RunDropped, VisitClosed, VisitEvent

logger = logging.getLogger(__name__)


def format_visit(record: VisitRecord, tz_name: str) -> str:
    """One line per visit: duration, start time and pinpoint counts."""

    start = dt_from_epoch_s(record.start_s, tz_name).isoformat(sep=" ")
    return (
        f"Visited for {format_hhmmss(record.duration_seconds)} starting at {start} "
        f"({record.total_inside} pinpoints / {record.max_consecutive_inside} max consecutive)"
    )


def format_dropped(event: RunDropped, tz_name: str) -> str:
    start = dt_from_epoch_s(event.start_s, tz_name).isoformat(sep=" ")
    return (
        f"Dropped visit for {format_hhmmss(max(0, event.end_s - event.start_s))} starting at {start} "
        f"({event.total_inside} pinpoints / {event.max_consecutive_inside} max consecutive)"
    )


class LoggingReporter:
    """Event sink that logs visits, and in verbose mode the scan details.

    Args:
        tz_name: IANA time zone for rendered times.
        verbose: Also log inside points, skipped points and dropped runs.
    """

    def __init__(self, tz_name: str, verbose: bool = False) -> None:
        self.tz_name = tz_name
        self.verbose = verbose

    def __call__(self, event: VisitEvent) -> None:
        if isinstance(event, VisitClosed):
            logger.info("%s", format_visit(event.record, self.tz_name))
        elif not self.verbose:
            return
        elif isinstance(event, PointClassified):
            if event.inside:
                when = dt_from_epoch_s(event.point.timestamp, self.tz_name).isoformat(sep=" ")
                logger.info("Distance %.0fm at %s", event.distance_km * 1000, when)
        elif isinstance(event, PointSkipped):
            logger.info("Skipping point %d %s: %s", event.index, event.point, event.reason)
        elif isinstance(event, RunDropped):
            logger.info("%s", format_dropped(event, self.tz_name))
