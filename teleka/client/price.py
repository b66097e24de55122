# teleka/client/price.py
"""Price panel shown under the pickup/destination fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from teleka.api.models import PriceQuote
from teleka.client.providers import ProxyClient

logger = logging.getLogger(__name__)

CALCULATING = "Calculating price..."
FAILED = "Could not calculate price."


def format_amount(amount: float, currency: str = "UGX") -> str:
    """Whole-unit currency text with thousands separators, e.g. ``UGX 174,000``."""
    return f"{currency} {amount:,.0f}"


@dataclass
class PriceDisplay:
    state: str = "idle"  # idle | loading | ready | error
    quote: Optional[PriceQuote] = None
    message: str = ""

    @property
    def amount_text(self) -> str:
        return format_amount(self.quote.price, self.quote.currency) if self.quote else ""

    @property
    def traffic_text(self) -> str:
        return f"{self.quote.traffic_level.value} Traffic" if self.quote else ""

    def text(self) -> str:
        if self.state == "ready" and self.quote:
            return f"{self.amount_text}\n{self.quote.distance_text} ・ {self.quote.duration_text}\n{self.traffic_text}"
        return self.message


class PriceCalculator:
    """Fetches a quote from the proxy and keeps the panel state."""

    def __init__(self, proxy: ProxyClient):
        self.proxy = proxy
        self.display = PriceDisplay()

    def calculate(self, origin: str, destination: str) -> PriceDisplay:
        self.display = PriceDisplay(state="loading", message=CALCULATING)
        try:
            data = self.proxy.calculate_price(origin, destination)
            if data.get("error"):
                raise ValueError(data["error"])
            quote = PriceQuote.from_dict(data)
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.error(f"Price calc failed: {e}")
            self.display = PriceDisplay(state="error", message=FAILED)
            return self.display

        self.display = PriceDisplay(state="ready", quote=quote)
        return self.display
