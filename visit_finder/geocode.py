"""Forward geocoding utilities (address -> lat/lon).

This module uses only the Python standard library for HTTP.

Important:
    - The Google Geocoding API requires an API key.
    - For Nominatim (OpenStreetMap), please respect their usage policy and set a
      descriptive User-Agent.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from visit_finder.errors import GeocodeError
from visit_finder.models import GeoPoint

logger = logging.getLogger(__name__)


@runtime_checkable
class Geocoder(Protocol):
    """Anything that resolves a free-form address to a point."""

    def geocode(self, address: str) -> GeoPoint: ...


def _get_json(url: str, user_agent: str, timeout_seconds: float) -> Any:
    """GET a URL and decode its JSON body.

    Raises:
        GeocodeError: On network errors, non-200 responses or invalid JSON.
    """

    req = urllib.request.Request(
        url,
        headers={
            "User-Agent": user_agent,
            "Accept": "application/json",
        },
        method="GET",
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout_seconds) as resp:  # noqa: S310
            body = resp.read().decode("utf-8", errors="replace")
    except urllib.error.HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="replace")
        raise GeocodeError(f"got code {exc.code} from geocoding API. Response: {detail}") from exc
    except (urllib.error.URLError, OSError) as exc:
        raise GeocodeError(f"error fetching geocode results: {exc}") from exc
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise GeocodeError(f"error decoding response from geocoding API: {exc}") from exc


@dataclass(frozen=True, slots=True)
class GoogleGeocodeConfig:
    """Configuration for the Google Geocoding API."""

    api_key: str
    base_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    timeout_seconds: float = 20.0
    user_agent: str = "visit-finder/0.1.0"


class GoogleGeocoder:
    """Geocoder backed by the Google Geocoding API."""

    def __init__(self, config: GoogleGeocodeConfig) -> None:
        if not config.api_key:
            raise GeocodeError("the Google Geocoding API needs an API key (--google-api-key)")
        self._cfg = config

    def geocode(self, address: str) -> GeoPoint:
        params = {"key": self._cfg.api_key, "address": address}
        url = f"{self._cfg.base_url}?{urllib.parse.urlencode(params)}"
        payload = _get_json(url, self._cfg.user_agent, self._cfg.timeout_seconds)
        if not isinstance(payload, dict):
            raise GeocodeError("unexpected response from Google Geocoding API")

        status = payload.get("status")
        if status != "OK":
            if status == "ZERO_RESULTS":
                raise GeocodeError(f"no results from Google Geocoding API for {address!r}")
            raise GeocodeError(f"error from Google Geocoding API: {status} {payload.get('error_message', '')}".strip())
        results = payload.get("results") or []
        if not results:
            raise GeocodeError(f"no results from Google Geocoding API for {address!r}")

        first = results[0]
        try:
            loc = first["geometry"]["location"]
            point = GeoPoint(float(loc["lat"]), float(loc["lng"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodeError(f"unexpected result shape from Google Geocoding API: {exc!r}") from exc
        logger.info("Resolved to full address %r", first.get("formatted_address", ""))
        return point


@dataclass(frozen=True, slots=True)
class NominatimConfig:
    """Configuration for the Nominatim search API."""

    base_url: str = "https://nominatim.openstreetmap.org/search"
    accept_language: str = "en"
    timeout_seconds: float = 20.0
    user_agent: str = "visit-finder/0.1.0 (geocode; please set your own UA)"


class NominatimGeocoder:
    """Geocoder using OpenStreetMap Nominatim."""

    def __init__(self, config: NominatimConfig | None = None) -> None:
        self._cfg = config or NominatimConfig()

    def geocode(self, address: str) -> GeoPoint:
        params = {
            "format": "jsonv2",
            "q": address,
            "limit": "1",
            "accept-language": self._cfg.accept_language,
        }
        url = f"{self._cfg.base_url}?{urllib.parse.urlencode(params)}"
        payload = _get_json(url, self._cfg.user_agent, self._cfg.timeout_seconds)
        if not isinstance(payload, list) or not payload:
            raise GeocodeError(f"no results from Nominatim for {address!r}")

        first = payload[0]
        try:
            point = GeoPoint(float(first["lat"]), float(first["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodeError(f"unexpected result shape from Nominatim: {exc!r}") from exc
        logger.info("Resolved to full address %r", first.get("display_name", ""))
        return point
