# teleka/client/providers.py
"""Suggestion sources for the booking-page autocomplete.

``ProxyClient`` talks to this application's own Maps proxy, the Nominatim
provider is the open-data fallback, and ``SuggestionProviderChain`` stitches
them together with the recent-places cache. Neither the chain nor the
nearby provider raises: failures come back as an error placeholder row.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from teleka.api.config import get_client_config, get_nominatim_config
from teleka.api.models import OSM_PREFIX, Suggestion
from teleka.client.location import GeolocationService, Position, resolve_position
from teleka.client.recent_places import RecentPlacesCache

logger = logging.getLogger(__name__)

NO_MATCHES = "No matches found."
NETWORK_ERROR = "Network error fetching suggestions."
NO_NEARBY = "No popular places found nearby."
NEARBY_FAILED = "Could not fetch nearby places."

_OK_STATUSES = ("OK", "ZERO_RESULTS")


class ProxyClient:
    """HTTP client for the ``/api/...`` endpoints served by ``main.py``."""

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        cfg = get_client_config()
        self.base_url = (base_url or cfg["proxy_base_url"]).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout or cfg["timeout_sec"]

    def get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        resp = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def autocomplete(self, query: str, session_token: str, types: Optional[str] = None) -> Dict[str, Any]:
        params = {"input": query, "sessiontoken": session_token}
        if types:
            params["types"] = types
        return self.get_json("/api/places/autocomplete", params)

    def nearby(self, position: Position, session_token: str) -> Dict[str, Any]:
        lat, lng = position
        return self.get_json("/api/places/nearby", {"location": f"{lat},{lng}", "sessiontoken": session_token})

    def details(self, place_id: str, session_token: str = "") -> Dict[str, Any]:
        params = {"place_id": place_id}
        if session_token:
            params["sessiontoken"] = session_token
        return self.get_json("/api/places/details", params)

    def calculate_price(self, origin: str, destination: str) -> Dict[str, Any]:
        return self.get_json("/api/calculate-price", {"origin": origin, "destination": destination})


class NominatimProvider:
    """Fallback place search against OpenStreetMap Nominatim.

    Raises ``requests.RequestException`` when the service cannot be reached
    so callers can tell an outage from an empty result.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, session: Optional[requests.Session] = None):
        self.config = config or get_nominatim_config()
        self.session = session or requests.Session()
        self.headers = {"User-Agent": self.config["user_agent"]}

    def search(self, query: str) -> List[Suggestion]:
        params = {
            "format": "json",
            "q": query,
            "countrycodes": self.config["country"],
            "limit": self.config["limit"],
        }
        resp = self.session.get(
            self.config["search_url"],
            params=params,
            headers=self.headers,
            timeout=self.config["timeout_sec"],
        )
        resp.raise_for_status()
        try:
            items = resp.json()
        except ValueError as e:
            raise requests.RequestException(f"Nominatim returned invalid JSON: {e}") from e
        return [self._to_suggestion(item) for item in items or []]

    @staticmethod
    def _to_suggestion(item: Dict[str, Any]) -> Suggestion:
        display_name = item.get("display_name") or ""
        parts = display_name.split(",")
        return Suggestion(
            place_id=f"{OSM_PREFIX}{item.get('osm_id')}",
            description=display_name,
            main_text=parts[0].strip(),
            secondary_text=",".join(parts[1:]).strip(),
            types=[item["type"]] if item.get("type") else [],
            source="fallback",
        )


class SuggestionProviderChain:
    """Recent matches + primary provider, or recent matches + fallback."""

    def __init__(self, proxy: ProxyClient, fallback: NominatimProvider, recent: RecentPlacesCache):
        self.proxy = proxy
        self.fallback = fallback
        self.recent = recent

    def _primary(self, query: str, session_token: str) -> Optional[List[Suggestion]]:
        """Predictions from the proxy; None when the proxy is unreachable."""
        try:
            data = self.proxy.autocomplete(query, session_token)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Primary suggestions failed for {query!r}: {e}")
            return None

        predictions = data.get("predictions") or []
        if predictions:
            return [Suggestion.from_prediction(p) for p in predictions]

        if data.get("error_message"):
            logger.warning(f"Places API returned error_message, falling back to OSM: {data['error_message']}")
        elif data.get("status") and data["status"] not in _OK_STATUSES:
            logger.warning(f"Places API status: {data['status']}")
        return []

    def _fallback(self, query: str) -> Optional[List[Suggestion]]:
        try:
            return self.fallback.search(query)
        except requests.RequestException as e:
            logger.warning(f"OSM fallback failed for {query!r}: {e}")
            return None

    def suggest(self, query: str, session_token: str) -> List[Suggestion]:
        """Ordered suggestions for ``query``; never empty."""
        recent = [p.to_suggestion() for p in self.recent.matching(query)]

        primary = self._primary(query, session_token)
        if primary:
            return recent + primary

        fallback = self._fallback(query)
        if fallback:
            return recent + fallback

        if recent:
            return recent
        unreachable = primary is None and fallback is None
        return [Suggestion.error(NETWORK_ERROR if unreachable else NO_MATCHES)]


class NearbyPlacesProvider:
    """Points of interest around the caller, shown for an empty field."""

    def __init__(
        self,
        proxy: ProxyClient,
        geolocation: Optional[GeolocationService] = None,
        fallback_position: Optional[Position] = None,
        timeout: Optional[float] = None,
    ):
        cfg = get_client_config()
        self.proxy = proxy
        self.geolocation = geolocation
        self.fallback_position = fallback_position or cfg["fallback_position"]
        self.timeout = timeout if timeout is not None else cfg["geolocation_timeout"]

    def nearby(self, session_token: str) -> List[Suggestion]:
        try:
            position = resolve_position(self.geolocation, self.fallback_position, self.timeout)
            data = self.proxy.nearby(position, session_token)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Nearby fetch failed: {e}")
            return [Suggestion.error(NEARBY_FAILED)]

        results = data.get("results") or []
        if not results:
            return [Suggestion.error(NO_NEARBY)]
        return [
            Suggestion(
                place_id=place.get("place_id"),
                description=place.get("name") or "",
                main_text=place.get("name") or "",
                secondary_text=place.get("vicinity") or "",
                types=list(place.get("types") or []),
            )
            for place in results
        ]
