"""Tests for threshold parsing."""

import logging

import pytest

from visit_finder.errors import UnitParseError
from visit_finder.units import parse_distance


class TestParseDistance:
    """Tests for distance strings with unit suffixes."""

    def test_meters(self):
        """50m is exactly 0.05 km."""
        assert parse_distance("50m") == 0.05

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1km", 1.0),
            ("2.5 km", 2.5),
            ("  1.5KM ", 1.5),
            ("1mi", 1 / 0.621371),
            ("3280.84ft", 1.0),
            ("250 M", 0.25),
        ],
    )
    def test_units(self, text, expected):
        assert parse_distance(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", ["50", "", "fifty meters", "50 yd"])
    def test_unrecognized_units(self, text):
        with pytest.raises(UnitParseError, match="no recognized units"):
            parse_distance(text)

    @pytest.mark.parametrize("text", ["abcm", "km", "1.2.3mi"])
    def test_bad_amount(self, text):
        with pytest.raises(UnitParseError, match="error parsing distance"):
            parse_distance(text)

    def test_is_value_error(self):
        """Unit errors can be handled as plain ValueErrors."""
        with pytest.raises(ValueError):
            parse_distance("12 parsecs")

    def test_logs_parsed_distance(self, caplog):
        caplog.set_level(logging.INFO, logger="visit_finder.units")
        parse_distance("50m")
        assert "Using distance 0.050km" in caplog.text
