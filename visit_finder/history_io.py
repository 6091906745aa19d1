"""Location history input: Google Takeout JSON and Path.csv track exports."""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from visit_finder.errors import LocationHistoryError
from visit_finder.inspect import point_order
from visit_finder.models import TimedPoint
from visit_finder.timeutils import epoch_s_from_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Quick summary of input parsing."""

    records_total: int
    records_parsed: int
    records_skipped: int

    @classmethod
    def of(cls, total: int, parsed: int) -> LoadSummary:
        return cls(records_total=total, records_parsed=parsed, records_skipped=total - parsed)


def _takeout_point(record: dict[str, Any]) -> TimedPoint:
    """Convert one Takeout "locations" entry.

    Notes:
        latitudeE7/longitudeE7 are integers in units of 1e-7 degrees.
        timestampMs is a string of epoch milliseconds; the last three digits
        are dropped to get whole seconds. Newer exports carry an ISO-8601
        "timestamp" instead.
    """

    ts_ms = record.get("timestampMs")
    if ts_ms is not None:
        seconds = int(str(ts_ms)[:-3])
    else:
        seconds = epoch_s_from_iso(record["timestamp"])
    return TimedPoint(
        latitude=int(record["latitudeE7"]) / 1e7,
        longitude=int(record["longitudeE7"]) / 1e7,
        timestamp=seconds,
    )


def load_takeout_json(path: str | Path, strict: bool = True) -> tuple[list[TimedPoint], LoadSummary]:
    """Load a Takeout "Location History.json" file.

    Args:
        path: JSON file with a top-level "locations" list.
        strict: Abort on the first malformed record instead of skipping it.

    Returns:
        (points, summary) with points in file order.

    Raises:
        LocationHistoryError: If the file cannot be read or decoded, or (strict
            mode) a record is malformed.
    """

    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            history = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise LocationHistoryError(f"error loading location history {str(p)!r}: {exc}") from exc

    records = history.get("locations") if isinstance(history, dict) else None
    if not isinstance(records, list):
        raise LocationHistoryError(f"{str(p)!r} has no \"locations\" list")

    points: list[TimedPoint] = []
    for idx, record in enumerate(records):
        try:
            points.append(_takeout_point(record))
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            if strict:
                raise LocationHistoryError(f"error parsing location record {idx}: {exc!r}") from exc
            continue

    summary = LoadSummary.of(len(records), len(points))
    if summary.records_skipped > 0:
        logger.warning("Skipped %s malformed location records", summary.records_skipped)
    return points, summary


def load_path_csv(path: str | Path, strict: bool = True) -> tuple[list[TimedPoint], LoadSummary]:
    """Load a Path.csv track export.

    The export uses these columns:
      - geoTime: epoch milliseconds
      - latitude/longitude: decimal degrees
    Other columns are ignored.
    """

    p = Path(path)
    total = 0
    points: list[TimedPoint] = []
    try:
        with p.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            for row in reader:
                total += 1
                try:
                    points.append(
                        TimedPoint(
                            latitude=float(row["latitude"].strip()),
                            longitude=float(row["longitude"].strip()),
                            timestamp=int(row["geoTime"].strip()) // 1000,
                        )
                    )
                except KeyError as exc:
                    raise LocationHistoryError(
                        f"CSV is missing column {exc}; found columns {reader.fieldnames}"
                    ) from exc
                except (ValueError, TypeError, AttributeError) as exc:
                    if strict:
                        raise LocationHistoryError(f"error parsing CSV row {total}: {exc!r}") from exc
                    continue
    except OSError as exc:
        raise LocationHistoryError(f"error loading location history {str(p)!r}: {exc}") from exc

    summary = LoadSummary.of(total, len(points))
    if summary.records_skipped > 0:
        logger.warning("Skipped %s malformed CSV rows", summary.records_skipped)
    return points, summary


def load_history(path: str | Path, strict: bool = True) -> tuple[list[TimedPoint], LoadSummary]:
    """Load a location history file, picking the decoder by file suffix."""

    if Path(path).suffix.lower() == ".csv":
        return load_path_csv(path, strict=strict)
    return load_takeout_json(path, strict=strict)


def ensure_chronological(points: Sequence[TimedPoint]) -> list[TimedPoint]:
    """Return the points in ascending timestamp order.

    Ascending input is returned unchanged. Non-increasing input (some exports
    are newest-first) is reversed; anything else is stable-sorted.
    """

    pts = list(points)
    order = point_order(pts)
    if order == "ascending":
        return pts
    if order == "descending":
        logger.warning("Location history is newest-first, reversing %s points", len(pts))
        pts.reverse()
        return pts
    logger.warning("Location history is not in time order, sorting %s points", len(pts))
    pts.sort(key=lambda pt: pt.timestamp)
    return pts
