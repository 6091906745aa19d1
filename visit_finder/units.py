"""Distance strings with a unit suffix ("50m", "1.5 km", "300ft")."""

from __future__ import annotations

import logging
from typing import Final

from visit_finder.errors import UnitParseError

logger = logging.getLogger(__name__)

# (suffix, units per kilometer); "m" must come after "km".
UNITS: Final[tuple[tuple[str, float], ...]] = (
    ("km", 1.0),
    ("ft", 3280.84),
    ("mi", 0.621371),
    ("m", 1000.0),
)


def parse_distance(text: str) -> float:
    """Parse a distance with a unit suffix into kilometers.

    Args:
        text: Distance such as "50m", "0.2mi" or "1 KM".

    Returns:
        Distance in kilometers.

    Raises:
        UnitParseError: If no known unit is present or the amount is not a number.
    """

    s = text.strip().lower()
    for suffix, per_km in UNITS:
        if s.endswith(suffix):
            amount = s[: -len(suffix)].strip()
            try:
                count = float(amount)
            except ValueError as exc:
                raise UnitParseError(f"error parsing distance {text!r}: {amount!r} is not a number") from exc
            km = count / per_km
            logger.info("Using distance %.3fkm", km)
            return km
    raise UnitParseError(f"no recognized units in distance {text!r} (use km, m, mi or ft)")
