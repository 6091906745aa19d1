"""Exception hierarchy for visit_finder."""

from __future__ import annotations


class VisitFinderError(Exception):
    """Base class for all errors raised by visit_finder."""


class NoConvergence(VisitFinderError):
    """Vincenty's iteration did not converge (nearly antipodal points)."""


class TooCloseToPoleOrMeridian(VisitFinderError):
    """The bounding box search crossed a pole or the antimeridian.

    Attributes:
        direction: Name of the search direction that hit the limit.
    """

    def __init__(self, direction: str) -> None:
        super().__init__(f"too close to a pole or meridian (searching {direction})")
        self.direction = direction


class UnitParseError(VisitFinderError, ValueError):
    """A distance string has no recognized unit or an unparsable amount."""


class LocationHistoryError(VisitFinderError):
    """A location history file or one of its records could not be decoded."""


class GeocodeError(VisitFinderError):
    """An address could not be resolved to coordinates."""
