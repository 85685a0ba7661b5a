"""Reverse geocoding for check-in locations.

Best effort only: a failed lookup never blocks a punch, the record gets
``UNKNOWN_LOCATION`` instead.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from ..core.constants import (
    DEFAULT_GEOCODER_TIMEOUT_SECONDS,
    DEFAULT_GEOCODER_URL,
    DEFAULT_GEOCODER_USER_AGENT,
    UNKNOWN_LOCATION,
)

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        raise NotImplementedError


class NominatimGeocoder(Geocoder):
    def __init__(
        self,
        *,
        url: str = DEFAULT_GEOCODER_URL,
        timeout_seconds: float = DEFAULT_GEOCODER_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_GEOCODER_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self._url = url
        self._timeout = float(timeout_seconds)
        self._user_agent = user_agent
        self._session = session or requests.Session()

    def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        response = self._session.get(
            self._url,
            params={"format": "json", "lat": latitude, "lon": longitude},
            headers={"User-Agent": self._user_agent},
            timeout=self._timeout,
        )
        response.raise_for_status()
        return (response.json() or {}).get("display_name")


def resolve_location_label(geocoder: Optional[Geocoder], latitude: float, longitude: float) -> str:
    if geocoder is None:
        return UNKNOWN_LOCATION
    try:
        label = geocoder.reverse(latitude, longitude)
    except (requests.RequestException, ValueError) as e:
        logger.warning("Reverse geocoding failed for (%s, %s): %s", latitude, longitude, e)
        return UNKNOWN_LOCATION
    return label or UNKNOWN_LOCATION
