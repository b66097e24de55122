# teleka/client/location.py
"""Current-position lookup with a hard timeout and a fixed fallback."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)

Position = Tuple[float, float]

# A geolocation service returns (lat, lng) or raises when permission is denied.
GeolocationService = Callable[[], Position]


class StaticGeolocation:
    """Always reports the same coordinate."""

    def __init__(self, lat: float, lng: float):
        self.position = (lat, lng)

    def __call__(self) -> Position:
        return self.position


def resolve_position(
    service: Optional[GeolocationService],
    fallback: Position,
    timeout: float = 5.0,
) -> Position:
    """Ask ``service`` for a position, substituting ``fallback`` on denial,
    timeout or when there is no service at all."""
    if service is None:
        return fallback

    outcome = {}
    done = threading.Event()

    def lookup():
        try:
            outcome["position"] = service()
        except Exception as e:
            outcome["error"] = e
        finally:
            done.set()

    # Daemon thread: a hung lookup must not hold up interpreter exit.
    threading.Thread(target=lookup, name="geolocation", daemon=True).start()
    if not done.wait(timeout):
        logger.warning(f"Geolocation timed out after {timeout}s, using fallback position")
        return fallback
    if "error" in outcome:
        logger.warning(f"Geolocation unavailable ({outcome['error']}), using fallback position")
        return fallback
    lat, lng = outcome["position"]
    return float(lat), float(lng)
