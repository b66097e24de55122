"""Deterministic fare formula.

price = round(km * rate * traffic_multiplier, to nearest 1000), floored at
the minimum fare, then surcharged during weekday rush hours.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from teleka.api.config import PricingConfig, get_pricing_config
from teleka.api.models import TrafficLevel

logger = logging.getLogger(__name__)


class PricingError(Exception):
    """The routing provider did not return a usable distance."""


@dataclass
class PriceBreakdown:
    km: float
    rate_per_km: float
    traffic_level: TrafficLevel
    traffic_multiplier: float
    raw_price: float
    rounded_price: int
    minimum_fare: int
    peak: bool
    price: int
    currency: str

    def to_dict(self) -> dict:
        return {
            "km": self.km,
            "rate_per_km": self.rate_per_km,
            "traffic_level": self.traffic_level.value,
            "traffic_multiplier": self.traffic_multiplier,
            "raw_price": self.raw_price,
            "rounded_price": self.rounded_price,
            "minimum_fare": self.minimum_fare,
            "peak": self.peak,
            "price": self.price,
            "currency": self.currency,
        }


def current_time(config: PricingConfig) -> datetime:
    return datetime.now(ZoneInfo(config.timezone))


def classify_traffic(base_seconds: float, traffic_seconds: Optional[float], config: PricingConfig) -> TrafficLevel:
    if not base_seconds or traffic_seconds is None:
        return TrafficLevel.LOW
    ratio = traffic_seconds / base_seconds
    if ratio > config.high_ratio:
        return TrafficLevel.HIGH
    if ratio > config.medium_ratio:
        return TrafficLevel.MEDIUM
    return TrafficLevel.LOW


def traffic_multiplier(level: TrafficLevel, config: PricingConfig) -> float:
    return {
        TrafficLevel.LOW: 1.0,
        TrafficLevel.MEDIUM: config.medium_multiplier,
        TrafficLevel.HIGH: config.high_multiplier,
    }[level]


def round_to_unit(amount: float, unit: int) -> int:
    # Half-up, so 174500 -> 175000 rather than banker's rounding.
    return int(math.floor(amount / unit + 0.5) * unit)


def is_peak(moment: datetime, config: PricingConfig) -> bool:
    if moment.weekday() >= 5:
        return False
    return any(start <= moment.hour < end for start, end in config.peak_windows)


def quote_from_distance(
    km: float,
    level: TrafficLevel,
    config: Optional[PricingConfig] = None,
    now: Optional[datetime] = None,
) -> PriceBreakdown:
    """Apply the fare formula to a distance and traffic level."""
    config = config or get_pricing_config()
    if not math.isfinite(km) or km < 0:
        raise ValueError("Distance must be a finite, non-negative number")

    multiplier = traffic_multiplier(level, config)
    raw = km * config.rate_per_km * multiplier
    if not math.isfinite(raw):
        raise ValueError(f"Distance too large to price: {km}")
    rounded = round_to_unit(raw, config.rounding_unit)
    price = max(rounded, config.minimum_fare)

    peak = is_peak(now or current_time(config), config)
    if peak:
        price = int(round(price * (1 + config.peak_surcharge)))

    logger.debug(f"Fare {km:.2f}km {level.value}: raw={raw:.0f} rounded={rounded} peak={peak} -> {price}")
    return PriceBreakdown(
        km=km,
        rate_per_km=config.rate_per_km,
        traffic_level=level,
        traffic_multiplier=multiplier,
        raw_price=raw,
        rounded_price=rounded,
        minimum_fare=config.minimum_fare,
        peak=peak,
        price=price,
        currency=config.currency,
    )


__all__ = [
    "PricingError",
    "PriceBreakdown",
    "classify_traffic",
    "traffic_multiplier",
    "round_to_unit",
    "is_peak",
    "quote_from_distance",
]
