from __future__ import annotations

import argparse
import json
import random
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Cluster:
    name: str
    lat: float
    lon: float


def _epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def generate_locations(
    *,
    rows: int,
    seed: int,
    start: datetime,
    clusters: list[Cluster],
) -> list[dict[str, object]]:
    """Generate fake Takeout "locations" entries with realistic-ish stays."""

    rng = random.Random(seed)
    cur = start
    out: list[dict[str, object]] = []
    cluster = rng.choice(clusters)

    for _ in range(rows):
        # Occasionally move to another place
        if rng.random() < 0.03:
            cluster = rng.choice(clusters)

        # Mostly stay around current cluster, ~20 m jitter
        lat = cluster.lat + rng.uniform(-0.0002, 0.0002)
        lon = cluster.lon + rng.uniform(-0.0002, 0.0002)

        # Time step: usually 1-5 minutes, sometimes 30-90 minutes gap
        if rng.random() < 0.05:
            cur = cur + timedelta(minutes=rng.uniform(30, 90))
        else:
            cur = cur + timedelta(seconds=rng.uniform(60, 300))

        out.append(
            {
                "timestampMs": str(_epoch_ms(cur)),
                "latitudeE7": round(lat * 1e7),
                "longitudeE7": round(lon * 1e7),
                "accuracy": rng.choice([5, 10, 20, 35]),
            }
        )

    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake Location History.json for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/Location History.json", help="Output JSON path")
    p.add_argument("--rows", type=int, default=2000, help="Number of locations")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--start", type=str, default="2025-01-01 08:00:00", help="Start time in UTC")
    args = p.parse_args()

    start = datetime.fromisoformat(args.start).replace(tzinfo=UTC)
    clusters = [
        Cluster("furnace_creek", 36.461755, -116.866612),
        Cluster("stovepipe_wells", 36.6064, -117.1456),
        Cluster("badwater", 36.2298, -116.7677),
    ]

    locations = generate_locations(rows=args.rows, seed=args.seed, start=start, clusters=clusters)
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps({"locations": locations}, indent=1), encoding="utf-8")

    print(f"Generated: {out_path} (locations={len(locations)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
