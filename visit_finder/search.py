"""End-to-end visit search: load points, solve the box, pre-filter, scan."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from visit_finder.bbox import find_bounding_box
from visit_finder.cache import PointCache, default_cache_path
from visit_finder.config import RunConfig
from visit_finder.history_io import ensure_chronological, load_history
from visit_finder.models import BoundingBox, TimedPoint, VisitRecord
from visit_finder.spatial_index import KDBush
from visit_finder.visits import EventSink, detect_visits

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Outcome of one search."""

    box: BoundingBox
    candidates: frozenset[int]
    visits: tuple[VisitRecord, ...]


def load_points(history_path: str | Path, use_cache: bool = True, strict: bool = True) -> list[TimedPoint]:
    """Load decoded points, going through the snapshot cache when enabled.

    A snapshot older than the history file is ignored and rewritten. A load
    that skipped malformed records is not snapshotted, so a later strict load
    still sees them.
    """

    history = Path(history_path)
    cache = PointCache(default_cache_path(history)) if use_cache else None

    if cache is not None and cache.path.exists():
        if history.exists() and history.stat().st_mtime > cache.path.stat().st_mtime:
            logger.info("Cache %s is older than %s, reloading", cache.path, history)
        else:
            cached = cache.load()
            if cached is not None:
                return cached

    points, summary = load_history(history, strict=strict)
    if cache is not None:
        if summary.records_skipped > 0:
            logger.info("Not caching %s, %d records were skipped", history, summary.records_skipped)
        else:
            cache.store(points)
    logger.info("Loaded %d pinpoints", len(points))
    return points


def search_visits(
    points: Sequence[TimedPoint],
    config: RunConfig,
    on_event: EventSink | None = None,
) -> SearchResult:
    """Find visits to config.target in points.

    Raises:
        TooCloseToPoleOrMeridian: If no bounding box can be built.
        NoConvergence: If a bounding box corner cannot be computed.
    """

    box = find_bounding_box(config.target, config.box_radius_km)
    logger.debug("Bounding box: %s %s", box.northeast, box.southwest)

    ordered = ensure_chronological(points)
    index = KDBush(ordered, node_size=config.node_size)
    candidates = frozenset(index.query(box))
    logger.debug("%d of %d points are inside the bounding box", len(candidates), len(ordered))

    visits = detect_visits(
        ordered,
        candidates,
        config.target,
        config.threshold_km,
        min_points=config.min_points,
        on_event=on_event,
    )
    return SearchResult(box=box, candidates=candidates, visits=tuple(visits))
