"""Booking-page flow: autocomplete fields, recent places and the price panel."""

from .autocomplete import AutocompleteController, DetailsSelection, Dropdown, SuggestionSelection
from .booking import BookingForm
from .price import PriceCalculator, PriceDisplay
from .providers import NearbyPlacesProvider, NominatimProvider, ProxyClient, SuggestionProviderChain
from .recent_places import RecentPlacesCache
from .storage import JsonFileStorage, MemoryStorage

__all__ = [
    "AutocompleteController",
    "BookingForm",
    "DetailsSelection",
    "Dropdown",
    "JsonFileStorage",
    "MemoryStorage",
    "NearbyPlacesProvider",
    "NominatimProvider",
    "PriceCalculator",
    "PriceDisplay",
    "ProxyClient",
    "RecentPlacesCache",
    "SuggestionProviderChain",
    "SuggestionSelection",
]
