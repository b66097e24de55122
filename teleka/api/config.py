# teleka/api/config.py
"""Configuration management for the Teleka taxi API."""
import os
from dataclasses import dataclass
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()


def get_google_maps_config():
    """Get Google Maps configuration."""
    return {
        "api_key": os.getenv("GOOGLE_MAPS_API_KEY", ""),
        "base_url": os.getenv("GOOGLE_MAPS_BASE_URL", "https://maps.googleapis.com/maps/api").rstrip("/"),
        "country": os.getenv("PLACES_COUNTRY", "ug"),
        "nearby_radius_m": int(os.getenv("PLACES_NEARBY_RADIUS_M", "5000")),
        "details_fields": os.getenv(
            "PLACES_DETAILS_FIELDS",
            "place_id,name,formatted_address,geometry,type,vicinity",
        ),
        "timeout_sec": float(os.getenv("MAPS_TIMEOUT_SEC", "10")),
    }


@dataclass(frozen=True)
class PricingConfig:
    """Named pricing constants.

    Two constant sets circulated for this formula (2000/km with a 10000
    floor, and 2680/km with a 12000 floor). The later set is the default.
    """

    rate_per_km: float = 2680.0
    minimum_fare: int = 12000
    rounding_unit: int = 1000
    medium_ratio: float = 1.2
    high_ratio: float = 1.5
    medium_multiplier: float = 1.15
    high_multiplier: float = 1.3
    peak_surcharge: float = 0.20
    peak_windows: Tuple[Tuple[int, int], ...] = ((7, 9), (17, 19))
    currency: str = "UGX"
    timezone: str = "Africa/Kampala"


def get_pricing_config() -> PricingConfig:
    """Get pricing configuration, overridable from the environment."""
    return PricingConfig(
        rate_per_km=float(os.getenv("PRICE_RATE_PER_KM", "2680")),
        minimum_fare=int(os.getenv("PRICE_MINIMUM_FARE", "12000")),
        medium_multiplier=float(os.getenv("PRICE_MEDIUM_MULTIPLIER", "1.15")),
        high_multiplier=float(os.getenv("PRICE_HIGH_MULTIPLIER", "1.3")),
        peak_surcharge=float(os.getenv("PRICE_PEAK_SURCHARGE", "0.20")),
        currency=os.getenv("PRICE_CURRENCY", "UGX"),
        timezone=os.getenv("PRICING_TIMEZONE", "Africa/Kampala"),
    )


def get_nominatim_config():
    """Get OpenStreetMap Nominatim configuration for the fallback provider."""
    return {
        "search_url": os.getenv("NOMINATIM_SEARCH_URL", "https://nominatim.openstreetmap.org/search"),
        "user_agent": os.getenv("NOMINATIM_USER_AGENT", "teleka-taxi/0.1"),
        "country": os.getenv("PLACES_COUNTRY", "ug"),
        "limit": int(os.getenv("NOMINATIM_LIMIT", "6")),
        "timeout_sec": float(os.getenv("NOMINATIM_TIMEOUT_SEC", "10")),
    }


def get_client_config():
    """Get configuration for the booking-page client flow."""
    return {
        "proxy_base_url": os.getenv("TELEKA_BASE_URL", f"http://localhost:{get_port()}").rstrip("/"),
        "debounce_seconds": float(os.getenv("AUTOCOMPLETE_DEBOUNCE_MS", "200")) / 1000.0,
        "geolocation_timeout": float(os.getenv("GEOLOCATION_TIMEOUT_SEC", "5")),
        "fallback_position": (
            float(os.getenv("FALLBACK_LAT", "0.3476")),
            float(os.getenv("FALLBACK_LNG", "32.5825")),
        ),
        "storage_key": os.getenv("RECENT_PLACES_KEY", "teleka_places"),
        "recent_max": int(os.getenv("RECENT_PLACES_MAX", "5")),
        "recent_ttl_ms": int(os.getenv("RECENT_PLACES_TTL_MS", str(7 * 24 * 60 * 60 * 1000))),
        "timeout_sec": float(os.getenv("CLIENT_TIMEOUT_SEC", "15")),
    }


def get_admin_credentials():
    """Get the single admin login."""
    return {
        "email": os.getenv("ADMIN_EMAIL", "admin@cablink.com"),
        "password": os.getenv("ADMIN_PASSWORD", "Admin@123"),
    }


def get_port():
    """Get port configuration."""
    return int(os.getenv("PORT", 3000))


def get_websocket_config():
    """Get WebSocket configuration."""
    return {
        "ping_interval": int(os.getenv("WEBSOCKET_PING_INTERVAL", "25")),
        "ping_timeout": int(os.getenv("WEBSOCKET_PING_TIMEOUT", "60")),
        "cors_allowed_origins": os.getenv("WEBSOCKET_CORS_ORIGINS", "*").split(","),
    }
