"""Cart item counter, the way a navbar badge consumes the bus.

The badge holds no reference to the orchestrator. It listens for
cart-changed and identity-changed and re-reads the authoritative count
from the Cart Store each time.
"""

from __future__ import annotations

import asyncio

import structlog

from storefront.application.notification_bus import NotificationBus, Signal, Subscription
from storefront.domain.exceptions import DomainException
from storefront.domain.gateway.cart_store import CartStore
from storefront.domain.gateway.session_lookup import SessionLookup

logger = structlog.get_logger(__name__)


class CartBadge:

    def __init__(
        self,
        bus: NotificationBus,
        cart_store: CartStore,
        session_lookup: SessionLookup,
    ) -> None:
        self._bus = bus
        self._cart_store = cart_store
        self._session_lookup = session_lookup
        self._subscriptions: list[Subscription] = []
        self._refreshes: set[asyncio.Task[None]] = set()
        self.count = 0

    def mount(self) -> None:
        self._subscriptions = [
            self._bus.subscribe(Signal.CART_CHANGED, self._on_signal),
            self._bus.subscribe(Signal.IDENTITY_CHANGED, self._on_signal),
        ]

    def unmount(self) -> None:
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions = []

    async def refresh(self) -> None:
        session = self._session_lookup.current()
        if session is None:
            self.count = 0
            return
        try:
            self.count = await self._cart_store.count(session)
        except DomainException as exc:
            # Keep showing the last known count.
            logger.warning("badge_refresh_failed", error=str(exc))

    async def settle(self) -> None:
        """Wait for refreshes triggered by signals so far."""
        while pending := [t for t in self._refreshes if not t.done()]:
            await asyncio.gather(*pending, return_exceptions=True)

    def _on_signal(self) -> None:
        task = asyncio.get_running_loop().create_task(self.refresh())
        self._refreshes.add(task)
        task.add_done_callback(self._refresh_done)

    def _refresh_done(self, task: asyncio.Task[None]) -> None:
        self._refreshes.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("badge_refresh_crashed", exc_info=task.exception())
