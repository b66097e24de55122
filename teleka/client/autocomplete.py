# teleka/client/autocomplete.py
"""Per-field autocomplete: debounced lookups, dropdown state and selection.

The controller is driven by the same events a browser input produces
(``on_input``, ``on_focus``, ``on_key``, ``on_document_click``) and keeps
the dropdown as plain state that can be rendered to rows or HTML.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional

import requests
from markupsafe import Markup

from teleka.api.config import get_client_config
from teleka.api.models import RecentPlace, Suggestion
from teleka.client.providers import NearbyPlacesProvider, ProxyClient, SuggestionProviderChain
from teleka.client.recent_places import RecentPlacesCache
from teleka.client.scheduler import Debouncer

logger = logging.getLogger(__name__)

RECENT_MARKER = "↻"


def new_session_token() -> str:
    return str(uuid.uuid4())


def format_place_type(place_type: str) -> str:
    """``tourist_attraction`` -> ``Tourist Attraction``."""
    return " ".join(s[:1].upper() + s[1:] for s in str(place_type).split("_"))


@dataclass
class DropdownRow:
    index: int
    primary: str
    secondary: str = ""
    category: str = ""
    recent: bool = False
    error: bool = False

    @property
    def label(self) -> str:
        return f"{self.primary} ({self.category})" if self.category else self.primary


def render_rows(suggestions: List[Suggestion]) -> List[DropdownRow]:
    rows = []
    for i, item in enumerate(suggestions):
        if item.is_error:
            rows.append(DropdownRow(index=i, primary=item.message, error=True))
            continue
        rows.append(DropdownRow(
            index=i,
            primary=item.main_text or item.description,
            secondary=item.secondary_text,
            category=format_place_type(item.types[0]) if item.types else "",
            recent=item.is_recent,
        ))
    return rows


def render_html(rows: List[DropdownRow]) -> Markup:
    parts = []
    for row in rows:
        if row.error:
            parts.append(Markup('<div class="pac-item pac-error"><span class="pac-item-query">{}</span></div>')
                         .format(row.primary))
            continue
        icon = Markup('<span class="recent-icon">{}</span>').format(RECENT_MARKER) if row.recent else ""
        parts.append(Markup(
            '<div class="pac-item{}" data-index="{}">{}<span class="pac-item-query">{}</span><span>{}</span></div>'
        ).format(" recent" if row.recent else "", row.index, icon, row.label, row.secondary))
    return Markup("").join(parts)


class Dropdown:
    """Rendered suggestions plus the keyboard-highlighted row."""

    def __init__(self):
        self.suggestions: List[Suggestion] = []
        self.visible = False
        self.highlighted = -1  # position among selectable rows

    def show(self, suggestions: List[Suggestion]) -> None:
        if not suggestions:
            self.hide()
            return
        self.suggestions = list(suggestions)
        self.highlighted = -1
        self.visible = True

    def hide(self) -> None:
        self.visible = False
        self.suggestions = []
        self.highlighted = -1

    @property
    def selectable(self) -> List[int]:
        """Suggestion indexes of the non-error rows."""
        return [i for i, s in enumerate(self.suggestions) if not s.is_error]

    def move_down(self) -> None:
        items = self.selectable
        if items:
            self.highlighted = min(len(items) - 1, self.highlighted + 1)

    def move_up(self) -> None:
        items = self.selectable
        if items:
            self.highlighted = len(items) - 1 if self.highlighted <= 0 else self.highlighted - 1

    @property
    def highlighted_index(self) -> Optional[int]:
        items = self.selectable
        if 0 <= self.highlighted < len(items):
            return items[self.highlighted]
        return None

    def rows(self) -> List[DropdownRow]:
        return render_rows(self.suggestions)

    def html(self) -> Markup:
        return render_html(self.rows()) if self.visible else Markup("")


# --------------------------------------------------------------------------- #
# Selection strategies
# --------------------------------------------------------------------------- #
class SelectionStrategy:
    """Turns a chosen suggestion into a full place record (a details dict)."""

    def resolve(self, suggestion: Suggestion, session_token: str) -> dict:
        raise NotImplementedError

    @staticmethod
    def as_place(suggestion: Suggestion) -> dict:
        return {
            "place_id": suggestion.place_id,
            "description": suggestion.description,
            "structured_formatting": {
                "main_text": suggestion.main_text,
                "secondary_text": suggestion.secondary_text,
            },
            "types": list(suggestion.types),
        }

    @staticmethod
    def display_text(place: dict) -> str:
        return place.get("formatted_address") or place.get("description") or place.get("name") or ""


class SuggestionSelection(SelectionStrategy):
    """Use the suggestion as-is, no network."""

    def resolve(self, suggestion, session_token):
        return self.as_place(suggestion)


class DetailsSelection(SelectionStrategy):
    """Fetch authoritative details for provider ids; OSM ids are used as-is."""

    def __init__(self, proxy: ProxyClient):
        self.proxy = proxy

    def resolve(self, suggestion, session_token):
        place = self.as_place(suggestion)
        if not suggestion.place_id or suggestion.is_fallback:
            return place
        try:
            data = self.proxy.details(suggestion.place_id, session_token)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Details fetch failed for {suggestion.place_id}: {e}")
            return place
        result = data.get("result")
        if not result:
            return place
        # Keep the dropdown's secondary text, details have none.
        result.setdefault("structured_formatting", place["structured_formatting"])
        return result


# --------------------------------------------------------------------------- #
# Controller
# --------------------------------------------------------------------------- #
class AutocompleteController:
    """Owns one input field's debouncing, dropdown and selection."""

    def __init__(
        self,
        chain: SuggestionProviderChain,
        nearby: NearbyPlacesProvider,
        recent: RecentPlacesCache,
        selection: SelectionStrategy,
        on_complete: Optional[Callable[["AutocompleteController"], None]] = None,
        debouncer: Optional[Debouncer] = None,
        name: str = "",
    ):
        self.chain = chain
        self.nearby = nearby
        self.recent = recent
        self.selection = selection
        self.on_complete = on_complete
        self.debouncer = debouncer or Debouncer(get_client_config()["debounce_seconds"])
        self.name = name

        self.value = ""
        self.dropdown = Dropdown()
        self.session_token = new_session_token()
        self.loading = False
        self.last_place: Optional[RecentPlace] = None
        self._lock = threading.Lock()

    # -- events --------------------------------------------------------------
    def on_input(self, value: str) -> None:
        self.value = value
        query = value.strip()
        if not query:
            self.debouncer.cancel()
            self.dropdown.hide()
            self.show_nearby()
            return
        self.debouncer.call(self.show_suggestions, query)

    def on_focus(self) -> None:
        self.on_input(self.value)

    def on_key(self, key: str) -> bool:
        """Handle a keydown; True when the key was consumed."""
        if not self.dropdown.visible or not self.dropdown.selectable:
            return False
        if key == "ArrowDown":
            self.dropdown.move_down()
        elif key == "ArrowUp":
            self.dropdown.move_up()
        elif key == "Enter":
            index = self.dropdown.highlighted_index
            if index is not None:
                self.select(index)
        elif key == "Escape":
            self.dropdown.hide()
        else:
            return False
        return True

    def on_document_click(self, inside_wrapper: bool) -> None:
        if not inside_wrapper:
            self.dropdown.hide()

    # -- lookups -------------------------------------------------------------
    def show_nearby(self) -> None:
        self.loading = True
        try:
            self.dropdown.show(self.nearby.nearby(self.session_token))
        finally:
            self.loading = False

    def show_suggestions(self, query: str) -> None:
        self.loading = True
        try:
            # A slower earlier lookup may land after a newer one; last write wins.
            self.dropdown.show(self.chain.suggest(query, self.session_token))
        finally:
            self.loading = False

    # -- selection -----------------------------------------------------------
    def select(self, index: int) -> Optional[RecentPlace]:
        suggestions = self.dropdown.suggestions
        item = suggestions[index] if 0 <= index < len(suggestions) else None
        if item is None or item.is_error:
            return None

        place = self.selection.resolve(item, self.session_token)
        with self._lock:
            self.value = SelectionStrategy.display_text(place)
            self.last_place = RecentPlace.from_place(place)
            self.recent.save(self.last_place)
            self.session_token = new_session_token()
        self.dropdown.hide()
        logger.debug(f"[{self.name or 'field'}] selected {self.value!r}")

        if self.on_complete:
            self.on_complete(self)
        return self.last_place
