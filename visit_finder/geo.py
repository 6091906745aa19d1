"""Ellipsoidal distance on the WGS-84 ellipsoid (Vincenty's inverse formula)."""

from __future__ import annotations

import math
from typing import Final

from visit_finder.errors import NoConvergence
from visit_finder.models import GeoPoint

WGS84_A: Final[float] = 6_378_137.0  # semi-major axis in meters
WGS84_F: Final[float] = 1 / 298.257223563  # flattening
WGS84_B: Final[float] = WGS84_A * (1.0 - WGS84_F)

MAX_ITERATIONS: Final[int] = 200
TOLERANCE: Final[float] = 1e-12


def vincenty_km(p1: GeoPoint, p2: GeoPoint) -> float:
    """Compute the geodesic distance in kilometers between two points.

    Args:
        p1: First point.
        p2: Second point.

    Returns:
        Distance in kilometers along the WGS-84 ellipsoid.

    Raises:
        NoConvergence: If the points are nearly antipodal and the longitude
            iteration does not settle.
    """

    if p1.latitude == p2.latitude and p1.longitude == p2.longitude:
        return 0.0

    f = WGS84_F
    lon_delta = math.radians(p2.longitude - p1.longitude)
    if lon_delta > math.pi:
        lon_delta -= 2.0 * math.pi
    elif lon_delta < -math.pi:
        lon_delta += 2.0 * math.pi

    # reduced latitudes
    u1 = math.atan((1.0 - f) * math.tan(math.radians(p1.latitude)))
    u2 = math.atan((1.0 - f) * math.tan(math.radians(p2.latitude)))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

    lam = lon_delta
    for _ in range(MAX_ITERATIONS):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.sqrt(
            (cos_u2 * sin_lam) ** 2 + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
        )
        if sin_sigma == 0.0:
            return 0.0
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1.0 - sin_alpha * sin_alpha
        # equatorial line: cos_sq_alpha == 0
        cos_2sigma_m = cos_sigma - 2.0 * sin_u1 * sin_u2 / cos_sq_alpha if cos_sq_alpha != 0.0 else 0.0
        c = f / 16.0 * cos_sq_alpha * (4.0 + f * (4.0 - 3.0 * cos_sq_alpha))
        lam_prev = lam
        lam = lon_delta + (1.0 - c) * f * sin_alpha * (
            sigma + c * sin_sigma * (cos_2sigma_m + c * cos_sigma * (-1.0 + 2.0 * cos_2sigma_m**2))
        )
        if abs(lam) > math.pi:
            raise NoConvergence(f"no convergence between {p1} and {p2} (nearly antipodal)")
        if abs(lam - lam_prev) < TOLERANCE:
            break
    else:
        raise NoConvergence(f"no convergence between {p1} and {p2} after {MAX_ITERATIONS} iterations")

    u_sq = cos_sq_alpha * (WGS84_A**2 - WGS84_B**2) / WGS84_B**2
    a_coef = 1.0 + u_sq / 16384.0 * (4096.0 + u_sq * (-768.0 + u_sq * (320.0 - 175.0 * u_sq)))
    b_coef = u_sq / 1024.0 * (256.0 + u_sq * (-128.0 + u_sq * (74.0 - 47.0 * u_sq)))
    delta_sigma = (
        b_coef
        * sin_sigma
        * (
            cos_2sigma_m
            + b_coef
            / 4.0
            * (
                cos_sigma * (-1.0 + 2.0 * cos_2sigma_m**2)
                - b_coef / 6.0 * cos_2sigma_m * (-3.0 + 4.0 * sin_sigma**2) * (-3.0 + 4.0 * cos_2sigma_m**2)
            )
        )
    )
    meters = WGS84_B * a_coef * (sigma - delta_sigma)
    return meters / 1000.0
