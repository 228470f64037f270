from __future__ import annotations

"""
Change Notification Debouncer.

Coalesces bursts of document change notifications so the tag index is
refreshed at most once per quiet window for each document. Each call resets
the window of its key; only the arguments of the last call are delivered.
"""

import logging
import threading
from typing import Any, Callable, Dict, Hashable, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class _Timer(Protocol):
    def start(self) -> None: ...
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], _Timer]


def _thread_timer(interval: float, function: Callable[[], None]) -> _Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class Debouncer:
    """
    Per-key trailing-edge debouncer backed by daemon timer threads.

    Attributes:
        wait_seconds: Length of the quiet window.
    """

    def __init__(
            self,
            callback: Callable[..., Any],
            wait_seconds: float = 0.5,
            timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self._callback = callback
        self.wait_seconds = wait_seconds
        self._timer_factory = timer_factory or _thread_timer
        self._lock = threading.Lock()
        self._pending: Dict[Hashable, Tuple[_Timer, Tuple[Any, ...]]] = {}

    def __call__(self, key: Hashable, *args: Any) -> None:
        """Schedule `callback(*args)` for `key`, replacing any pending call."""
        with self._lock:
            previous = self._pending.pop(key, None)
            if previous is not None:
                previous[0].cancel()
            holder: Dict[str, _Timer] = {}
            timer = self._timer_factory(self.wait_seconds, lambda: self._fire(key, holder["timer"]))
            holder["timer"] = timer
            self._pending[key] = (timer, args)
            timer.start()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def flush(self) -> None:
        """Deliver every pending call immediately on the calling thread."""
        with self._lock:
            entries = [(key, timer) for key, (timer, _) in self._pending.items()]
        for key, timer in entries:
            self._fire(key, timer)

    def discard(self, key: Hashable) -> None:
        """Drop the pending call of one key, if any."""
        with self._lock:
            entry = self._pending.pop(key, None)
        if entry is not None:
            entry[0].cancel()

    def cancel(self) -> None:
        """Drop every pending call without delivering it."""
        with self._lock:
            for timer, _ in self._pending.values():
                timer.cancel()
            self._pending.clear()

    def _fire(self, key: Hashable, timer: _Timer) -> None:
        # a timer superseded by a newer call for the same key must not deliver
        with self._lock:
            entry = self._pending.get(key)
            if entry is None or entry[0] is not timer:
                return
            del self._pending[key]
        _, args = entry
        timer.cancel()
        try:
            self._callback(*args)
        except Exception:
            logger.exception(f"Debounced callback failed for {key!r}")
