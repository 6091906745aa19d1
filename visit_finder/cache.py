"""On-disk snapshot of a decoded point list.

Decoding a multi-hundred-megabyte Takeout export is slow; the snapshot stores
the already-converted points as compact JSON next to the input file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Sequence

from visit_finder.models import TimedPoint

logger = logging.getLogger(__name__)

CACHE_VERSION = 1


def default_cache_path(history_path: str | Path) -> Path:
    """Snapshot path for a history file, e.g. "History.json" -> "History.json.points.json"."""

    p = Path(history_path)
    return p.with_name(f"{p.name}.points.json")


class PointCache:
    """A JSON snapshot of a TimedPoint list (lossless round-trip)."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[TimedPoint] | None:
        """Load the snapshot.

        Returns:
            The cached points, or None if there is no usable snapshot.
        """

        if not self._path.exists():
            return None
        text = self._path.read_text(encoding="utf-8")
        try:
            payload = json.loads(text)
            if payload.get("version") != CACHE_VERSION:
                logger.info("Ignoring cache %s with unknown version %r", self._path, payload.get("version"))
                return None
            points = [TimedPoint(float(lat), float(lon), int(ts)) for lat, lon, ts in payload["points"]]
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError):
            # Cache file corrupted: keep a backup and start fresh
            backup = self._path.with_suffix(self._path.suffix + ".broken")
            self._path.replace(backup)
            logger.warning("Cache %s is corrupted, moved to %s", self._path, backup)
            return None
        logger.info("Loaded %d points from cache %s", len(points), self._path)
        return points

    def store(self, points: Sequence[TimedPoint]) -> None:
        """Persist points to disk (atomic-ish). Empty lists are not stored."""

        if not points:
            return
        payload = {
            "version": CACHE_VERSION,
            "points": [[pt.latitude, pt.longitude, pt.timestamp] for pt in points],
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, separators=(",", ":")), encoding="utf-8")
        tmp.replace(self._path)
        logger.info("Wrote %d points to cache %s", len(points), self._path)
