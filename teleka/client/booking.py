# teleka/client/booking.py
"""Pickup/destination pair wired to the price panel."""

from __future__ import annotations

import logging
from typing import Optional

from teleka.client.autocomplete import AutocompleteController, DetailsSelection, SelectionStrategy
from teleka.client.location import GeolocationService
from teleka.client.price import PriceCalculator, PriceDisplay
from teleka.client.providers import NearbyPlacesProvider, NominatimProvider, ProxyClient, SuggestionProviderChain
from teleka.client.recent_places import RecentPlacesCache
from teleka.client.storage import LocalStorage

logger = logging.getLogger(__name__)


class BookingForm:
    """Two autocomplete fields sharing one recent-places store.

    Once both fields hold text after a selection, a price quote is requested.
    """

    def __init__(
        self,
        proxy: Optional[ProxyClient] = None,
        storage: Optional[LocalStorage] = None,
        fallback: Optional[NominatimProvider] = None,
        geolocation: Optional[GeolocationService] = None,
        selection: Optional[SelectionStrategy] = None,
        debouncer_factory=None,
    ):
        self.proxy = proxy or ProxyClient()
        self.recent = RecentPlacesCache(storage)
        chain = SuggestionProviderChain(self.proxy, fallback or NominatimProvider(), self.recent)
        nearby = NearbyPlacesProvider(self.proxy, geolocation)
        selection = selection or DetailsSelection(self.proxy)
        self.calculator = PriceCalculator(self.proxy)

        def field(name):
            return AutocompleteController(
                chain,
                nearby,
                self.recent,
                selection,
                on_complete=self.calculate_price_if_ready,
                debouncer=debouncer_factory() if debouncer_factory else None,
                name=name,
            )

        self.pickup = field("pickup")
        self.destination = field("destination")

    @property
    def price(self) -> PriceDisplay:
        return self.calculator.display

    def calculate_price_if_ready(self, _field=None) -> Optional[PriceDisplay]:
        origin, destination = self.pickup.value, self.destination.value
        if not (origin and destination):
            return None
        logger.info(f"Calculating price {origin!r} -> {destination!r}")
        return self.calculator.calculate(origin, destination)
