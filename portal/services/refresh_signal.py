"""
Refresh signal: a level-triggered "data may be stale" notification.

One ``RefreshSignal`` is created per app and handed to routes through a
dependency. Mutations call ``trigger_refresh()``; views either poll
``refresh_key`` or subscribe for callbacks. Several triggers between two reads
look like a single change to the reader; only the counter value tells them apart.
"""
import logging
import threading
from typing import Callable, Dict

logger = logging.getLogger(__name__)

RefreshCallback = Callable[[int], None]


class Subscription:
    """Handle returned by ``RefreshSignal.subscribe``."""

    def __init__(self, signal: "RefreshSignal", token: int):
        self._signal = signal
        self._token = token
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._signal._remove(self._token)
            self.active = False


class RefreshSignal:
    """Process-local, monotonically increasing refresh counter."""

    def __init__(self):
        self._key = 0
        self._lock = threading.Lock()
        self._subscribers: Dict[int, RefreshCallback] = {}
        self._next_token = 0

    @property
    def refresh_key(self) -> int:
        return self._key

    def trigger_refresh(self) -> int:
        """Increment the key, notify subscribers and return the new value."""
        with self._lock:
            self._key += 1
            key = self._key
            subscribers = list(self._subscribers.values())

        for callback in subscribers:
            try:
                callback(key)
            except Exception:
                logger.exception("Refresh subscriber failed")
        return key

    def has_changed_since(self, key: int) -> bool:
        return self._key != key

    def subscribe(self, callback: RefreshCallback) -> Subscription:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback
        return Subscription(self, token)

    def _remove(self, token: int) -> None:
        with self._lock:
            self._subscribers.pop(token, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
