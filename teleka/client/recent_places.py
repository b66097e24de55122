# teleka/client/recent_places.py
"""Bounded list of recently selected places with whole-list expiry."""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, Dict, List, Optional, Any

from teleka.api.config import get_client_config
from teleka.api.models import RecentPlace
from teleka.client.storage import LocalStorage, MemoryStorage

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class RecentPlacesCache:
    """Most-recent-first, deduplicated by place id, at most ``max_entries``.

    Stored as one record ``{"places": [...], "timestamp": epoch_ms}``; the
    timestamp is refreshed on every write and the whole record is dropped
    once it is ``ttl_ms`` old.
    """

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        key: Optional[str] = None,
        max_entries: Optional[int] = None,
        ttl_ms: Optional[int] = None,
        clock: Callable[[], int] = _now_ms,
    ):
        cfg = get_client_config()
        self.storage = storage if storage is not None else MemoryStorage()
        self.key = key or cfg["storage_key"]
        self.max_entries = max_entries or cfg["recent_max"]
        self.ttl_ms = ttl_ms or cfg["recent_ttl_ms"]
        self.clock = clock

    def all(self) -> List[RecentPlace]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            record = json.loads(raw)
            timestamp = int(record.get("timestamp", 0))
            places = record.get("places") or []
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Discarding unreadable recent places: {e}")
            return []

        if self.clock() - timestamp >= self.ttl_ms:
            logger.debug("Recent places expired, clearing")
            self.storage.remove_item(self.key)
            return []
        return [RecentPlace.from_dict(p) for p in places if isinstance(p, dict)]

    def save(self, place: RecentPlace | Dict[str, Any]) -> List[RecentPlace]:
        """Put ``place`` at the front and return the stored list."""
        if not isinstance(place, RecentPlace):
            place = RecentPlace.from_place(place)
        others = [p for p in self.all() if p.place_id != place.place_id]
        updated = [place, *others][: self.max_entries]
        record = {"places": [p.to_dict() for p in updated], "timestamp": self.clock()}
        self.storage.set_item(self.key, json.dumps(record))
        return updated

    def matching(self, query: str) -> List[RecentPlace]:
        return [p for p in self.all() if p.matches(query)]
