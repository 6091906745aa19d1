"""Tests for the decoded points snapshot cache."""

import json

from visit_finder.cache import PointCache, default_cache_path
from visit_finder.models import TimedPoint


class TestPointCache:
    """Tests for PointCache."""

    def test_round_trip_is_lossless(self, tmp_path):
        points = [
            TimedPoint(36.4617551, -116.8666123, 1_500_000_000),
            TimedPoint(0.1 + 0.2, -179.99999999, 0),
            TimedPoint(-89.0, 1e-7, 2_000_000_000),
        ]
        cache = PointCache(tmp_path / "h.json.points.json")
        cache.store(points)
        assert cache.load() == points

    def test_missing_file(self, tmp_path):
        assert PointCache(tmp_path / "nope.json").load() is None

    def test_empty_list_not_stored(self, tmp_path):
        cache = PointCache(tmp_path / "c.json")
        cache.store([])
        assert not cache.path.exists()

    def test_no_temp_file_left(self, tmp_path):
        cache = PointCache(tmp_path / "c.json")
        cache.store([TimedPoint(1.0, 2.0, 3)])
        assert [p.name for p in tmp_path.iterdir()] == ["c.json"]

    def test_corrupted_file_moved_aside(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_text("{broken", encoding="utf-8")
        cache = PointCache(path)
        assert cache.load() is None
        assert not path.exists()
        assert (tmp_path / "c.json.broken").read_text(encoding="utf-8") == "{broken"

    def test_bad_shape_moved_aside(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_text(json.dumps({"version": 1, "points": [[1.0, 2.0]]}), encoding="utf-8")
        assert PointCache(path).load() is None
        assert (tmp_path / "c.json.broken").exists()

    def test_unknown_version_ignored(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_text(json.dumps({"version": 99, "points": []}), encoding="utf-8")
        assert PointCache(path).load() is None
        assert path.exists()

    def test_default_cache_path(self, tmp_path):
        history = tmp_path / "Location History.json"
        assert default_cache_path(history) == tmp_path / "Location History.json.points.json"
