"""Tests for the end-to-end search pipeline."""

import json
import os

import pytest

from visit_finder.cache import default_cache_path
from visit_finder.config import RunConfig
from visit_finder.errors import LocationHistoryError, TooCloseToPoleOrMeridian
from visit_finder.models import GeoPoint, TimedPoint
from visit_finder.search import load_points, search_visits
from visit_finder.visits import VisitClosed

TARGET = GeoPoint(36.461755, -116.866612)


class TestRunConfig:
    """Validation of run parameters."""

    def test_defaults(self):
        config = RunConfig(target=TARGET, threshold_km=0.05)
        assert config.min_points == 10
        assert config.box_radius_km == pytest.approx(0.1)

    @pytest.mark.parametrize(
        "kwargs",
        [{"threshold_km": 0.0}, {"threshold_km": 0.05, "min_points": 0}, {"threshold_km": 0.05, "box_scale": 0.5}],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            RunConfig(target=TARGET, **kwargs)


class TestSearchVisits:
    """Box, pre-filter and scan together."""

    def test_finds_visits(self, make_track):
        points = make_track("O" * 5 + "I" * 15 + "O" * 12 + "I" * 11 + "O" * 3, target=TARGET)
        events = []
        result = search_visits(points, RunConfig(target=TARGET, threshold_km=0.05), on_event=events.append)

        assert result.box.contains(TARGET)
        assert result.candidates == frozenset(i for i, p in enumerate(points) if result.box.contains(p))
        assert [(v.total_inside, v.max_consecutive_inside) for v in result.visits] == [(15, 15), (11, 11)]
        assert [e.record for e in events if isinstance(e, VisitClosed)] == list(result.visits)

    def test_far_points_are_not_candidates(self, make_track):
        """Points ~1.1 km away are outside a 2 x 50 m box."""
        points = make_track("O" * 20, target=TARGET)
        result = search_visits(points, RunConfig(target=TARGET, threshold_km=0.05))
        assert result.candidates == frozenset()
        assert result.visits == ()

    def test_newest_first_history(self, make_track):
        """Reverse-chronological input gives the same visits as ascending input."""
        points = make_track("I" * 15 + "O" * 12 + "I" * 11, target=TARGET)
        config = RunConfig(target=TARGET, threshold_km=0.05)
        forward = search_visits(points, config)
        backward = search_visits(list(reversed(points)), config)
        assert backward.visits == forward.visits
        assert all(v.start_s <= v.end_s for v in backward.visits)

    def test_box_failure_propagates(self):
        config = RunConfig(target=GeoPoint(89.999, 0.0), threshold_km=100.0)
        with pytest.raises(TooCloseToPoleOrMeridian):
            search_visits([TimedPoint(89.9, 0.0, 0)], config)


class TestLoadPoints:
    """Loading through the snapshot cache."""

    def test_writes_and_uses_cache(self, make_track, write_takeout):
        points = make_track("IO" * 5, target=TARGET)
        history = write_takeout(points)

        assert load_points(history) == points
        assert default_cache_path(history).exists()

        # the history is gone, so this can only come from the cache
        history.unlink()
        assert load_points(history) == points

    def test_no_cache(self, make_track, write_takeout):
        history = write_takeout(make_track("I" * 3, target=TARGET))
        load_points(history, use_cache=False)
        assert not default_cache_path(history).exists()

    def test_stale_cache_is_rebuilt(self, make_track, write_takeout):
        history = write_takeout(make_track("I" * 3, target=TARGET))
        cache_path = default_cache_path(history)
        load_points(history)

        newer = make_track("O" * 4, target=TARGET)
        write_takeout(newer)
        old = history.stat().st_mtime - 100
        os.utime(cache_path, (old, old))

        assert load_points(history) == newer

    def test_lenient_load_does_not_mask_strict(self, tmp_path):
        """Skipping a malformed record must not leave a snapshot behind."""
        history = tmp_path / "Location History.json"
        history.write_text(
            json.dumps(
                {
                    "locations": [
                        {"timestampMs": "1500000000000", "latitudeE7": 1, "longitudeE7": 2},
                        {"timestampMs": "bad", "latitudeE7": 1, "longitudeE7": 2},
                    ]
                }
            ),
            encoding="utf-8",
        )

        assert load_points(history, strict=False) == [TimedPoint(1e-7, 2e-7, 1_500_000_000)]
        assert not default_cache_path(history).exists()
        with pytest.raises(LocationHistoryError):
            load_points(history, strict=True)
