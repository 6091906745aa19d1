"""Tests for the ellipsoidal distance function."""

import pytest

from visit_finder.errors import NoConvergence, VisitFinderError
from visit_finder.geo import vincenty_km
from visit_finder.models import GeoPoint


class TestVincenty:
    """Tests for Vincenty's inverse formula."""

    def test_same_point(self):
        """Distance from a point to itself should be zero."""
        p = GeoPoint(-33.8568, 151.2153)
        assert vincenty_km(p, p) == 0.0

    def test_one_degree_along_equator(self):
        """One degree of longitude on the equator is a * pi / 180."""
        d = vincenty_km(GeoPoint(0, 0), GeoPoint(0, 1))
        assert d == pytest.approx(111.319490793, abs=1e-6)

    def test_one_degree_along_meridian(self):
        """One degree of latitude from the equator is shorter than along the equator."""
        d = vincenty_km(GeoPoint(0, 0), GeoPoint(1, 0))
        assert d == pytest.approx(110.574, abs=0.001)

    def test_flinders_peak_to_buninyong(self):
        """Vincenty's own published test line (54972.271 m)."""
        flinders_peak = GeoPoint(-37.95103342, 144.42486789)
        buninyong = GeoPoint(-37.65282114, 143.92649553)
        assert vincenty_km(flinders_peak, buninyong) == pytest.approx(54.972271, abs=0.001)

    def test_symmetric(self):
        """Distance does not depend on argument order."""
        a = GeoPoint(51.5074, -0.1278)
        b = GeoPoint(48.8566, 2.3522)
        assert vincenty_km(a, b) == pytest.approx(vincenty_km(b, a), abs=1e-9)

    def test_across_antimeridian(self):
        """Longitudes on either side of 180 are one degree apart, not 359."""
        d = vincenty_km(GeoPoint(0, 179.5), GeoPoint(0, -179.5))
        assert d == pytest.approx(111.319490793, abs=1e-6)

    def test_short_distance_precision(self):
        """Sub-meter distances are resolved."""
        d = vincenty_km(GeoPoint(0, 0), GeoPoint(0, 1e-6))
        assert d == pytest.approx(0.000111319, abs=1e-8)

    def test_nearly_antipodal_fails(self):
        """Nearly antipodal points do not converge."""
        with pytest.raises(NoConvergence):
            vincenty_km(GeoPoint(0, 0), GeoPoint(0.5, 179.7))

    def test_no_convergence_is_a_visit_finder_error(self):
        """Callers can catch the package base class."""
        with pytest.raises(VisitFinderError):
            vincenty_km(GeoPoint(0, 0), GeoPoint(0.5, 179.7))
