# teleka/api/services/price_service.py
"""Service layer for trip pricing."""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from teleka.api.config import PricingConfig, get_pricing_config
from teleka.api.maps import MapsProxy, get_default_maps_proxy
from teleka.api.models import PriceQuote
from teleka.api.pricing import PricingError, classify_traffic, quote_from_distance

logger = logging.getLogger(__name__)


class PriceService:
    """Turns an origin/destination pair into a fare quote."""

    def __init__(self, maps: Optional[MapsProxy] = None, config: Optional[PricingConfig] = None):
        self.maps = maps or get_default_maps_proxy()
        self.config = config or get_pricing_config()

    @staticmethod
    def extract_element(matrix: Dict[str, Any]) -> Dict[str, Any]:
        """Return the single matrix element or raise PricingError.

        Args:
            matrix: Distance Matrix response body

        Returns:
            The element dict for the first origin/destination pair
        """
        status = matrix.get("status")
        if status != "OK":
            message = matrix.get("error_message") or f"Distance Matrix status {status}"
            raise PricingError(message)

        try:
            element = matrix["rows"][0]["elements"][0]
        except (KeyError, IndexError, TypeError):
            raise PricingError("Distance Matrix returned no route")

        if element.get("status") != "OK":
            raise PricingError(f"No route between origin and destination ({element.get('status')})")
        return element

    def calculate(self, origin: str, destination: str, now: Optional[datetime] = None) -> PriceQuote:
        """Quote a trip.

        Args:
            origin: Pickup address text
            destination: Drop-off address text
            now: Optional moment used for the rush-hour check

        Returns:
            PriceQuote for the trip

        Raises:
            PricingError: If the routing provider reports a non-OK status
            MapsError: If the provider cannot be reached
        """
        matrix = self.maps.distance_matrix(origin, destination)
        element = self.extract_element(matrix)

        distance = element.get("distance") or {}
        duration = element.get("duration") or {}
        in_traffic = element.get("duration_in_traffic") or {}

        km = float(distance.get("value", 0)) / 1000.0
        level = classify_traffic(duration.get("value", 0), in_traffic.get("value"), self.config)
        breakdown = quote_from_distance(km, level, self.config, now=now)

        logger.info(f"Quoted {origin!r} -> {destination!r}: {km:.1f}km, {level.value} traffic, {breakdown.price}")
        return PriceQuote(
            price=breakdown.price,
            distance_text=distance.get("text", ""),
            duration_text=(in_traffic or duration).get("text", ""),
            traffic_level=level,
            peak=breakdown.peak,
            currency=breakdown.currency,
        )


__all__ = ["PriceService"]
