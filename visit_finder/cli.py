"""Command-line interface for visit_finder.

Run:
    python -m visit_finder find-visits --history "Location History.json" --threshold 50m
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import asdict

from visit_finder.bbox import find_bounding_box
from visit_finder.config import RunConfig
from visit_finder.errors import VisitFinderError
from visit_finder.geocode import Geocoder, GoogleGeocodeConfig, GoogleGeocoder, NominatimGeocoder
from visit_finder.history_io import load_history
from visit_finder.inspect import inspect_points
from visit_finder.models import DEFAULT_TZ, GeoPoint
from visit_finder.report import LoggingReporter
from visit_finder.search import load_points, search_visits
from visit_finder.timeutils import dt_from_epoch_s
from visit_finder.units import parse_distance
from visit_finder.visits import sum_visits, write_visits_csv

logger = logging.getLogger(__name__)

DEFAULT_HISTORY = "Location History.json"


def _resolve_target(args: argparse.Namespace) -> GeoPoint:
    if not args.address:
        return GeoPoint(args.lat, args.long)
    geocoder: Geocoder
    if args.geocoder == "google":
        geocoder = GoogleGeocoder(GoogleGeocodeConfig(api_key=args.google_api_key or ""))
    else:
        geocoder = NominatimGeocoder()
    return geocoder.geocode(args.address)


def _build_config(args: argparse.Namespace) -> RunConfig:
    target = _resolve_target(args)
    logger.info("Using target (%.6f, %.6f)", target.latitude, target.longitude)
    return RunConfig(
        target=target,
        threshold_km=parse_distance(args.threshold),
        min_points=args.min_points,
        debug=args.debug,
        tz_name=args.tz,
    )


def _cmd_find_visits(args: argparse.Namespace) -> int:
    config = _build_config(args)
    points = load_points(args.history, use_cache=not args.no_cache, strict=not args.skip_malformed)
    reporter = LoggingReporter(config.tz_name, verbose=config.debug)
    result = search_visits(points, config, on_event=reporter)

    if args.out:
        write_visits_csv(result.visits, args.out, config.tz_name)
        print(f"Wrote {len(result.visits)} visits to {args.out}")
    total = sum_visits(result.visits)
    print(f"visits={total.visits}, total={total.total_hhmmss}")
    return 0


def _cmd_bbox(args: argparse.Namespace) -> int:
    config = _build_config(args)
    box = find_bounding_box(config.target, config.threshold_km)
    print(f"northeast={box.northeast.latitude:.7f},{box.northeast.longitude:.7f}")
    print(f"southwest={box.southwest.latitude:.7f},{box.southwest.longitude:.7f}")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    points, summary = load_history(args.history, strict=not args.skip_malformed)
    res = inspect_points(points)

    print("### Records")
    print(f"total={summary.records_total}, parsed={summary.records_parsed}, skipped={summary.records_skipped}")
    print(f"order={res.order}, duplicate_timestamps={res.duplicate_timestamps}")
    print()

    if res.min_time_s is not None and res.max_time_s is not None:
        print("### Time range")
        start = dt_from_epoch_s(res.min_time_s, args.tz)
        end = dt_from_epoch_s(res.max_time_s, args.tz)
        print(f"start={start.isoformat(sep=' ')}, end={end.isoformat(sep=' ')}")
        print()

    if res.delta is not None:
        print("### Sampling interval (seconds)")
        print(
            f"count={res.delta.count}, min={res.delta.min_s:.0f}, median={res.delta.median_s:.1f}, "
            f"p95={res.delta.p95_s:.1f}, max={res.delta.max_s:.0f}"
        )
        print()

    print("### Extent")
    print(f"lat=[{res.min_lat}, {res.max_lat}], lon=[{res.min_lon}, {res.max_lon}]")

    if args.json:
        import json

        print(json.dumps(asdict(res) | asdict(summary), ensure_ascii=False, indent=2))
    return 0


def _add_target_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--lat", type=float, default=36.461755, help="latitude of target location")
    p.add_argument("--long", type=float, default=-116.866612, help="longitude of target location")
    p.add_argument("--address", type=str, default="", help="address to look up instead of --lat/--long")
    p.add_argument(
        "--geocoder",
        type=str,
        default="google",
        choices=["google", "nominatim"],
        help="service used to resolve --address (google needs --google-api-key)",
    )
    p.add_argument("--google-api-key", type=str, default="", help="API key for the Google Geocoding API")
    p.add_argument(
        "--threshold",
        type=str,
        default="50m",
        help="distance from the target that counts as being there (km, m, mi or ft)",
    )
    p.add_argument("--min-points", type=int, default=10, help="consecutive pinpoints that make a visit")
    p.add_argument("--tz", type=str, default=DEFAULT_TZ, help="time zone (IANA) for printed times")
    p.add_argument("--debug", action="store_true", help="show debug logging")


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="visit_finder")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_fv = sub.add_parser("find-visits", help="find visits to a location in a location history")
    p_fv.add_argument("--history", type=str, default=DEFAULT_HISTORY, help="Takeout JSON or Path.csv file")
    _add_target_args(p_fv)
    p_fv.add_argument("--no-cache", action="store_true", help="do not read or write the decoded points cache")
    p_fv.add_argument("--skip-malformed", action="store_true", help="skip malformed records instead of failing")
    p_fv.add_argument("--out", type=str, default="", help="also write visits to this CSV file")
    p_fv.set_defaults(func=_cmd_find_visits)

    p_bb = sub.add_parser("bbox", help="print the bounding box around a target for a threshold")
    _add_target_args(p_bb)
    p_bb.set_defaults(func=_cmd_bbox)

    p_ins = sub.add_parser("inspect", help="summarize a location history file")
    p_ins.add_argument("--history", type=str, default=DEFAULT_HISTORY, help="Takeout JSON or Path.csv file")
    p_ins.add_argument("--tz", type=str, default=DEFAULT_TZ, help="time zone (IANA)")
    p_ins.add_argument("--skip-malformed", action="store_true", help="skip malformed records instead of failing")
    p_ins.add_argument("--json", action="store_true", help="also print JSON")
    p_ins.add_argument("--debug", action="store_true", help="show debug logging")
    p_ins.set_defaults(func=_cmd_inspect)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    try:
        return int(args.func(args))
    except (VisitFinderError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
