import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure the repo root (main.py, teleka/) is importable for direct pytest runs
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from teleka.client.storage import MemoryStorage  # noqa: E402
from teleka.client.recent_places import RecentPlacesCache  # noqa: E402


class FakeTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    created = []

    def __init__(self, delay, fn, args=(), kwargs=None):
        self.delay = delay
        self.fn = fn
        self.args = args
        self.kwargs = kwargs or {}
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.fn(*self.args, **self.kwargs)


@pytest.fixture
def fake_timers():
    FakeTimer.created = []
    return FakeTimer


class Clock:
    def __init__(self, now_ms=1_700_000_000_000):
        self.now_ms = now_ms

    def __call__(self):
        return self.now_ms


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def recent_cache(clock):
    return RecentPlacesCache(MemoryStorage(), key="teleka_places", max_entries=5,
                             ttl_ms=7 * 24 * 60 * 60 * 1000, clock=clock)


def json_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def make_response():
    return json_response
