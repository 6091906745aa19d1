from __future__ import annotations

from datetime import date, datetime, time, timedelta
from pathlib import Path

import streamlit as st

from visit_finder.config import RunConfig
from visit_finder.errors import VisitFinderError
from visit_finder.models import DEFAULT_TZ, GeoPoint, TimedPoint, VisitRecord
from visit_finder.search import load_points, search_visits
from visit_finder.timeutils import dt_from_epoch_s, format_hhmmss, tzinfo_from_name
from visit_finder.units import parse_distance


def _day_ranges(start_d: date, end_d: date, tz_name: str) -> list[tuple[date, int, int]]:
    """Return list of (day, start_s, end_s) for each day in range in tz."""

    tz = tzinfo_from_name(tz_name)
    days: list[tuple[date, int, int]] = []
    cur = start_d
    while cur <= end_d:
        sdt = datetime.combine(cur, time.min).replace(tzinfo=tz)
        edt = datetime.combine(cur + timedelta(days=1), time.min).replace(tzinfo=tz)
        days.append((cur, int(sdt.timestamp()), int(edt.timestamp())))
        cur = cur + timedelta(days=1)
    return days


def _overlap_seconds(visit: VisitRecord, start_s: int, end_s_exclusive: int) -> float:
    lo = max(visit.start_s, start_s)
    hi = min(visit.end_s, end_s_exclusive)
    return float(max(0, hi - lo))


@st.cache_data(show_spinner=False)
def _load_points(history_path: str, use_cache: bool, skip_malformed: bool, mtime: float) -> list[TimedPoint]:
    _ = mtime  # part of cache key so updated files reload automatically
    return load_points(history_path, use_cache=use_cache, strict=not skip_malformed)


def main() -> None:
    st.set_page_config(page_title="Visit finder", layout="wide")
    st.title("Visit finder: how often were you at a place?")

    with st.sidebar:
        st.subheader("Location history")
        history_path = st.text_input("Takeout JSON or Path.csv", value="Location History.json")
        tz_name = st.text_input("Time zone (IANA)", value=DEFAULT_TZ)
        use_cache = st.checkbox("Cache decoded points", value=True)
        skip_malformed = st.checkbox("Skip malformed records", value=False)

        st.subheader("Target")
        lat = st.number_input("Latitude", value=36.461755, format="%.6f")
        lon = st.number_input("Longitude", value=-116.866612, format="%.6f")
        threshold = st.text_input("Threshold (km, m, mi, ft)", value="50m")

        with st.expander("Advanced", expanded=False):
            min_points = st.number_input("Consecutive pinpoints for a visit", value=10, min_value=1, step=1)

    p = Path(history_path)
    if not p.exists():
        st.error(f"File not found: {history_path!r}")
        return

    try:
        config = RunConfig(
            target=GeoPoint(float(lat), float(lon)),
            threshold_km=parse_distance(threshold),
            min_points=int(min_points),
            tz_name=tz_name,
        )
        with st.spinner("Loading location history and searching ..."):
            points = _load_points(history_path, use_cache, skip_malformed, p.stat().st_mtime)
            result = search_visits(points, config)
    except (VisitFinderError, ValueError) as exc:
        st.error(str(exc))
        return

    visits = list(result.visits)
    total_s = sum(v.duration_seconds for v in visits)

    st.subheader("Summary")
    c1, c2, c3 = st.columns(3)
    c1.metric("Visits", str(len(visits)))
    c2.metric("Total time", format_hhmmss(total_s))
    c3.metric("Pinpoints in bounding box", f"{len(result.candidates)} / {len(points)}")
    st.caption(
        f"Bounding box: NE {result.box.northeast.latitude:.6f},{result.box.northeast.longitude:.6f} "
        f"SW {result.box.southwest.latitude:.6f},{result.box.southwest.longitude:.6f}"
    )

    if not visits:
        st.info("No visits found.")
        return

    first_day = dt_from_epoch_s(visits[0].start_s, tz_name).date()
    last_day = dt_from_epoch_s(visits[-1].end_s, tz_name).date()
    start_d = st.date_input("From", value=first_day)
    end_d = st.date_input("To", value=last_day)
    if start_d > end_d:
        st.error("The start date must not be after the end date.")
        return

    days = _day_ranges(start_d, end_d, tz_name)
    day_seconds: dict[date, float] = {d: 0.0 for d, _, _ in days}
    for v in visits:
        for d, d_start, d_end in days:
            ds = _overlap_seconds(v, d_start, d_end)
            if ds > 0:
                day_seconds[d] += ds

    with st.expander("Per day", expanded=False):
        day_rows = [
            {"date": d.isoformat(), "hhmmss": format_hhmmss(sec), "seconds": round(sec)}
            for d, sec in sorted(day_seconds.items(), key=lambda kv: kv[0])
            if sec > 0
        ]
        st.dataframe(day_rows, use_container_width=True, height=360)

    rows = [
        {
            "start_time": dt_from_epoch_s(v.start_s, tz_name).isoformat(sep=" "),
            "end_time": dt_from_epoch_s(v.end_s, tz_name).isoformat(sep=" "),
            "duration": format_hhmmss(v.duration_seconds),
            "pinpoints": v.total_inside,
            "max_consecutive": v.max_consecutive_inside,
        }
        for v in visits
    ]
    st.subheader("Visits")
    st.dataframe(rows, use_container_width=True, height=520)


if __name__ == "__main__":
    main()
