"""Shared data structures for the booking flow.

Both the Flask side (proxy, pricing, accounts) and the client-side booking
flow import from here so there is a single source-of-truth definition for
suggestions, recent places and price quotes.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

OSM_PREFIX = "osm:"


class TrafficLevel(str, enum.Enum):
    """Coarse traffic classification derived from congested/free-flow time."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def parse(cls, value: str) -> "TrafficLevel":
        for level in cls:
            if level.value.lower() == str(value).strip().lower():
                return level
        raise ValueError(f"Unknown traffic level: {value!r}")


@dataclass
class Suggestion:
    """A single candidate location shown in the autocomplete dropdown."""

    place_id: Optional[str] = None
    description: str = ""  # full label, e.g. "Kampala Road, Kampala, Uganda"
    main_text: str = ""
    secondary_text: str = ""
    types: List[str] = field(default_factory=list)
    source: str = "remote"  # remote | recent | fallback
    is_error: bool = False
    message: str = ""

    @property
    def is_recent(self) -> bool:
        return self.source == "recent"

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback" or str(self.place_id or "").startswith(OSM_PREFIX)

    @classmethod
    def error(cls, message: str) -> "Suggestion":
        return cls(is_error=True, message=message, source="error")

    @classmethod
    def from_prediction(cls, prediction: Dict[str, Any], source: str = "remote") -> "Suggestion":
        """Build from a Places autocomplete prediction dict."""
        formatting = prediction.get("structured_formatting") or {}
        description = prediction.get("description") or ""
        return cls(
            place_id=prediction.get("place_id"),
            description=description,
            main_text=formatting.get("main_text") or description,
            secondary_text=formatting.get("secondary_text") or "",
            types=list(prediction.get("types") or []),
            source=source,
        )


@dataclass
class RecentPlace:
    """A previously selected location kept in the recent-places store."""

    place_id: Optional[str]
    description: str
    main_text: str = ""
    secondary_text: str = ""
    types: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "place_id": self.place_id,
            "description": self.description,
            "structured_formatting": {
                "main_text": self.main_text,
                "secondary_text": self.secondary_text,
            },
            "types": list(self.types),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecentPlace":
        formatting = data.get("structured_formatting") or {}
        return cls(
            place_id=data.get("place_id"),
            description=data.get("description") or "",
            main_text=formatting.get("main_text") or "",
            secondary_text=formatting.get("secondary_text") or "",
            types=list(data.get("types") or []),
        )

    @classmethod
    def from_place(cls, place: Dict[str, Any]) -> "RecentPlace":
        """Normalise a details result or a suggestion-shaped dict."""
        formatting = place.get("structured_formatting") or {}
        return cls(
            place_id=place.get("place_id") or place.get("id") or place.get("placeId") or None,
            description=place.get("formatted_address") or place.get("description") or place.get("name") or "",
            main_text=place.get("name") or formatting.get("main_text") or "",
            secondary_text=formatting.get("secondary_text") or "",
            types=list(place.get("types") or []),
        )

    def matches(self, query: str) -> bool:
        if not query:
            return False
        needle = query.lower()
        return needle in self.description.lower() or needle in self.main_text.lower()

    def to_suggestion(self) -> Suggestion:
        return Suggestion(
            place_id=self.place_id,
            description=self.description,
            main_text=self.main_text or self.description,
            secondary_text=self.secondary_text,
            types=list(self.types),
            source="recent",
        )


@dataclass
class PriceQuote:
    """A fare computed for one origin/destination pair. Never cached."""

    price: int
    distance_text: str
    duration_text: str
    traffic_level: TrafficLevel
    peak: bool = False
    currency: str = "UGX"

    def to_dict(self) -> dict:
        return {
            "price": self.price,
            "currency": self.currency,
            "distance": {"text": self.distance_text},
            "duration": {"text": self.duration_text},
            "traffic_level": self.traffic_level.value,
            "peak": self.peak,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PriceQuote":
        return cls(
            price=int(data["price"]),
            distance_text=(data.get("distance") or {}).get("text", ""),
            duration_text=(data.get("duration") or {}).get("text", ""),
            traffic_level=TrafficLevel.parse(data.get("traffic_level", "Low")),
            peak=bool(data.get("peak", False)),
            currency=data.get("currency") or "UGX",
        )


# --------------------------------------------------------------------------- #
# Accounts
# --------------------------------------------------------------------------- #
def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


@dataclass
class Customer:
    name: str
    email: str
    password: str
    phone: str = ""

    def to_dict(self) -> dict:
        # Passwords never leave the repository.
        return {"name": self.name, "email": self.email, "phone": self.phone}


@dataclass
class Driver:
    name: str
    email: str
    password: str
    phone: str = ""
    license: str = ""
    national_id: str = ""
    approved: bool = False

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "license": self.license,
            "nationalId": self.national_id,
            "approved": self.approved,
        }


@dataclass
class Notification:
    message: str
    timestamp: str = field(default_factory=_timestamp)
    booking: Optional[dict] = None

    def to_dict(self) -> dict:
        return {"message": self.message, "timestamp": self.timestamp}


@dataclass
class Booking:
    name: str
    pickup: str
    destination: str
    created_at: str = field(default_factory=_timestamp)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class FareSettings:
    base_fare: float = 2.0
    commission: float = 10

    def to_dict(self) -> dict:
        return {"baseFare": self.base_fare, "commission": self.commission}
