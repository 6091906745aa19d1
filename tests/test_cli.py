"""Tests for the command-line interface."""

import csv
import json

import pytest

from visit_finder import cli
from visit_finder.cache import default_cache_path
from visit_finder.models import GeoPoint

TARGET = GeoPoint(36.461755, -116.866612)


@pytest.fixture
def history(make_track, write_takeout):
    return write_takeout(make_track("O" * 3 + "I" * 12 + "O" * 10 + "I" * 4, target=TARGET))


def _target_args():
    return ["--lat", str(TARGET.latitude), "--long", str(TARGET.longitude)]


class TestFindVisits:
    """The find-visits command."""

    def test_reports_visits(self, history, capsys):
        rc = cli.main(["find-visits", "--history", str(history), *_target_args(), "--threshold", "50m"])
        assert rc == 0
        assert "visits=1, total=0:11:00" in capsys.readouterr().out
        assert default_cache_path(history).exists()

    def test_no_cache_and_csv_output(self, history, tmp_path):
        out = tmp_path / "visits.csv"
        rc = cli.main(
            ["find-visits", "--history", str(history), *_target_args(), "--no-cache", "--out", str(out)]
        )
        assert rc == 0
        assert not default_cache_path(history).exists()
        with out.open(encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 1
        assert rows[0]["total_inside"] == "12"

    def test_min_points(self, history, capsys):
        rc = cli.main(["find-visits", "--history", str(history), *_target_args(), "--min-points", "4"])
        assert rc == 0
        assert "visits=2" in capsys.readouterr().out

    def test_bad_threshold(self, history, capsys):
        rc = cli.main(["find-visits", "--history", str(history), "--threshold", "50 parsecs"])
        assert rc == 1
        assert "error: no recognized units" in capsys.readouterr().err

    def test_missing_history(self, tmp_path, capsys):
        rc = cli.main(["find-visits", "--history", str(tmp_path / "missing.json"), "--no-cache"])
        assert rc == 1
        assert "error loading location history" in capsys.readouterr().err

    def test_target_near_pole(self, history, capsys):
        rc = cli.main(["find-visits", "--history", str(history), "--lat", "89.999", "--long", "0", "--threshold", "100km"])
        assert rc == 1
        assert "too close to a pole or meridian" in capsys.readouterr().err

    def test_address_lookup(self, history, monkeypatch, capsys):
        class _Geocoder:
            def __init__(self, *args, **kwargs):
                pass

            def geocode(self, address):
                assert address == "Furnace Creek"
                return TARGET

        monkeypatch.setattr(cli, "NominatimGeocoder", _Geocoder)
        rc = cli.main(
            ["find-visits", "--history", str(history), "--address", "Furnace Creek", "--geocoder", "nominatim"]
        )
        assert rc == 0
        assert "visits=1" in capsys.readouterr().out

    def test_google_without_key(self, history, capsys):
        rc = cli.main(["find-visits", "--history", str(history), "--address", "Furnace Creek"])
        assert rc == 1
        assert "API key" in capsys.readouterr().err


class TestOtherCommands:
    """The bbox and inspect commands."""

    def test_bbox(self, capsys):
        rc = cli.main(["bbox", "--lat", "0", "--long", "0", "--threshold", "1km"])
        assert rc == 0
        out = capsys.readouterr().out
        assert out.startswith("northeast=0.0090")
        assert "southwest=-0.0090" in out

    def test_inspect(self, history, capsys):
        rc = cli.main(["inspect", "--history", str(history), "--json"])
        assert rc == 0
        out = capsys.readouterr().out
        assert "total=29, parsed=29, skipped=0" in out
        assert "order=ascending" in out
        payload = json.loads(out[out.index("{") :])
        assert payload["points"] == 29
        assert payload["records_skipped"] == 0

    def test_requires_subcommand(self):
        with pytest.raises(SystemExit) as excinfo:
            cli.main([])
        assert excinfo.value.code == 2
