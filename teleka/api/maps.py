# teleka/api/maps.py
"""Thin Google Maps web-service proxy.

Every call attaches the server-held API key, forwards a narrow set of
parameters and hands back the provider's JSON body untouched. There is no
retry, caching or rate limiting here.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import requests

from teleka.api.config import get_google_maps_config

logger = logging.getLogger(__name__)

_session: requests.Session | None = None


class MapsError(Exception):
    """Base class for proxy failures."""

    status = "UNKNOWN_ERROR"


class MapsConfigurationError(MapsError):
    status = "REQUEST_DENIED"


class MapsRequestError(MapsError):
    """The provider could not be reached or returned an unreadable body."""


def _get_session() -> requests.Session:
    """Return a shared requests.Session instance."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def _split_types(types: Optional[str]) -> list[str]:
    return [t for t in (types or "").split("|") if t]


class MapsProxy:
    """Forwards browser requests to the Places and Distance Matrix APIs."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, session: Optional[requests.Session] = None):
        self.config = config or get_google_maps_config()
        self._session = session

    @property
    def session(self) -> requests.Session:
        return self._session or _get_session()

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        api_key = self.config.get("api_key", "")
        if not api_key:
            logger.error("No Google Maps API key found in config")
            raise MapsConfigurationError("Maps API key is not configured")

        url = f"{self.config['base_url']}/{path}"
        query = {k: v for k, v in params.items() if v not in (None, "")}
        query["key"] = api_key

        started = time.time()
        try:
            resp = self.session.get(url, params=query, timeout=self.config.get("timeout_sec", 10))
            data = resp.json()
        except requests.RequestException as e:
            logger.error(f"Maps request to {path} failed: {e}")
            raise MapsRequestError(f"Maps request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Maps response from {path} was not JSON: {e}")
            raise MapsRequestError("Maps provider returned an invalid response") from e

        logger.debug(
            "Maps %s -> status=%s in %.2fs",
            path,
            data.get("status") if isinstance(data, dict) else "?",
            time.time() - started,
        )
        return data

    def autocomplete(self, input_text: str, session_token: str = "", types: Optional[str] = None) -> Dict[str, Any]:
        """Places Autocomplete restricted to the configured country."""
        params = {
            "input": input_text,
            "sessiontoken": session_token,
            "components": f"country:{self.config['country']}",
        }
        if types:
            params["types"] = types
        return self._get("place/autocomplete/json", params)

    def nearby(self, location: str, session_token: str = "", types: Optional[str] = None) -> Dict[str, Any]:
        """Nearby Search around ``"lat,lng"``.

        The Nearby Search API accepts a single ``type``, so only the first
        of a pipe-separated list is forwarded. Session tokens are not part
        of that API and are only logged.
        """
        params = {
            "location": location,
            "radius": self.config.get("nearby_radius_m", 5000),
        }
        wanted = _split_types(types)
        if wanted:
            params["type"] = wanted[0]
        logger.debug(f"Nearby search at {location} (session {session_token or '-'})")
        return self._get("place/nearbysearch/json", params)

    def details(self, place_id: str, session_token: str = "") -> Dict[str, Any]:
        """Place Details for a selected suggestion; closes the billing session."""
        params = {
            "place_id": place_id,
            "sessiontoken": session_token,
            "fields": self.config.get("details_fields"),
        }
        return self._get("place/details/json", params)

    def distance_matrix(self, origin: str, destination: str) -> Dict[str, Any]:
        """Driving distance and duration-in-traffic for a single pair."""
        params = {
            "origins": origin,
            "destinations": destination,
            "mode": "driving",
            "departure_time": "now",
            "traffic_model": "best_guess",
        }
        return self._get("distancematrix/json", params)


_default_proxy: Optional[MapsProxy] = None


def get_default_maps_proxy() -> MapsProxy:
    global _default_proxy
    if _default_proxy is None:
        _default_proxy = MapsProxy()
    return _default_proxy


__all__ = [
    "MapsProxy",
    "MapsError",
    "MapsConfigurationError",
    "MapsRequestError",
    "get_default_maps_proxy",
]
