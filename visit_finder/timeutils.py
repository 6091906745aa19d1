"""Time parsing and formatting utilities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from typing import Iterable

from zoneinfo import ZoneInfo


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Europe/Berlin" or "UTC".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"invalid time zone: {tz_name!r}, e.g. UTC or America/Los_Angeles") from exc


def dt_from_epoch_s(epoch_s: int, tz_name: str) -> datetime:
    """Convert epoch seconds to a timezone-aware datetime."""

    return datetime.fromtimestamp(epoch_s, tz=tzinfo_from_name(tz_name))


def epoch_s_from_iso(text: str) -> int:
    """Parse an ISO-8601 timestamp to whole epoch seconds.

    Naive timestamps are treated as UTC. A trailing "Z" is accepted.

    Raises:
        ValueError: If the text cannot be parsed.
    """

    s = text.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp())


def format_hhmmss(seconds: float) -> str:
    """Format a duration as H:MM:SS (hours are not wrapped)."""

    s = int(round(max(0.0, seconds)))
    h = s // 3600
    m = (s % 3600) // 60
    sec = s % 60
    return f"{h}:{m:02d}:{sec:02d}"


@dataclass(frozen=True, slots=True)
class DeltaStats:
    """Sampling interval stats (seconds)."""

    count: int
    min_s: float
    median_s: float
    p95_s: float
    max_s: float


def delta_stats(epoch_s_sorted: Iterable[int]) -> DeltaStats | None:
    """Compute basic sampling-interval statistics.

    Args:
        epoch_s_sorted: Epoch seconds sorted ascending.

    Returns:
        DeltaStats or None if less than 2 points.
    """

    ts = list(epoch_s_sorted)
    if len(ts) < 2:
        return None
    deltas = sorted(float(ts[i] - ts[i - 1]) for i in range(1, len(ts)) if ts[i] >= ts[i - 1])
    if not deltas:
        return None
    n = len(deltas)
    median = deltas[n // 2] if n % 2 == 1 else 0.5 * (deltas[n // 2 - 1] + deltas[n // 2])
    p95 = deltas[int(0.95 * (n - 1))]
    return DeltaStats(
        count=n,
        min_s=deltas[0],
        median_s=median,
        p95_s=p95,
        max_s=deltas[-1],
    )
