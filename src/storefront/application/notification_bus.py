"""Process-wide "something changed" signals for passive widgets.

The bus carries no data, only the fact that a signal fired; subscribers
re-read whatever they display from its authoritative source. Delivery is
synchronous, unordered and at most once per publish. There is no replay:
a subscriber registered after a publish never sees it.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from functools import lru_cache

import structlog

logger = structlog.get_logger(__name__)

Listener = Callable[[], None]


class Signal(Enum):
    CART_CHANGED = "cart-changed"
    IDENTITY_CHANGED = "identity-changed"


class Subscription:
    """Handle returned by ``subscribe``; closing it unregisters the listener."""

    def __init__(self, bus: NotificationBus, signal: Signal, listener: Listener) -> None:
        self._bus = bus
        self.signal = signal
        self.listener = listener
        self.active = True

    def close(self) -> None:
        if self.active:
            self._bus.unsubscribe(self)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class NotificationBus:

    def __init__(self) -> None:
        self._subscriptions: dict[Signal, list[Subscription]] = {s: [] for s in Signal}

    def subscribe(self, signal: Signal, listener: Listener) -> Subscription:
        subscription = Subscription(self, signal, listener)
        self._subscriptions[signal].append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscribers = self._subscriptions[subscription.signal]
        if subscription in subscribers:
            subscribers.remove(subscription)
        subscription.active = False

    def publish(self, signal: Signal) -> None:
        """Call every current listener once.

        A failing listener is logged and skipped; the publisher never sees it.
        """
        # Copy: listeners may unsubscribe while being notified.
        for subscription in list(self._subscriptions[signal]):
            if not subscription.active:
                continue
            try:
                subscription.listener()
            except Exception:
                logger.exception("listener_failed", signal=signal.value)

    def subscriber_count(self, signal: Signal) -> int:
        return len(self._subscriptions[signal])


@lru_cache
def get_bus() -> NotificationBus:
    """The process-wide bus."""
    return NotificationBus()
