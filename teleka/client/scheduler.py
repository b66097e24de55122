# teleka/client/scheduler.py
"""Cancellable delayed calls."""

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs the most recent call once ``delay`` seconds pass without another.

    Each ``call`` cancels the pending timer and starts a new one, so at most
    one call is ever waiting. A call whose timer already fired keeps
    running; only pending ones are invalidated.
    """

    def __init__(self, delay: float, timer_factory: Callable[..., Any] = threading.Timer):
        self.delay = delay
        self.timer_factory = timer_factory
        self._timer: Optional[Any] = None
        self._generation = 0
        self._lock = threading.Lock()

    def call(self, fn: Callable[..., Any], *args, **kwargs) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = self.timer_factory(self.delay, self._run, args=(self._generation, fn, args, kwargs))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _run(self, generation, fn, args, kwargs) -> None:
        with self._lock:
            # Superseded or cancelled after the timer had already fired.
            if generation != self._generation:
                return
            self._timer = None
        fn(*args, **kwargs)

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
