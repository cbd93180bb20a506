"""Application service: keep the cached cart in step with the Cart Store.

Every mutation goes to the Cart Store first; the cached ``CartState`` is
only touched after the remote call returned. A failed call leaves the
cache exactly as it was.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

import structlog

from storefront.application.notification_bus import NotificationBus, Signal
from storefront.domain.exceptions import LoadFailed, RemoteUnavailable, ValidationError
from storefront.domain.gateway.cart_store import CartStore
from storefront.domain.gateway.catalog import ProductCatalog
from storefront.domain.model.cart import CartState
from storefront.domain.model.session import Session

logger = structlog.get_logger(__name__)


class CartSynchronizer:

    def __init__(
        self,
        cart_store: CartStore,
        catalog: ProductCatalog,
        cart: CartState,
        bus: NotificationBus,
        on_subtotal_changed: Callable[[], None],
    ) -> None:
        self._cart_store = cart_store
        self._catalog = catalog
        self._cart = cart
        self._bus = bus
        self._on_subtotal_changed = on_subtotal_changed

    async def load(self, session: Session) -> None:
        """Fetch lines and prices concurrently and replace the cache.

        A held discount is owed a revalidation afterwards, whether the
        cache was refreshed or emptied by a failed read.
        """
        try:
            lines, products = await asyncio.gather(
                self._cart_store.lines(session),
                self._catalog.list_products(),
            )
        except RemoteUnavailable as exc:
            self._cart.replace([], [])
            logger.warning("cart_load_failed", user_id=session.user_id, error=str(exc))
            self._on_subtotal_changed()
            raise LoadFailed("Could not load the cart") from exc

        self._cart.replace(lines, products)
        logger.info("cart_loaded", user_id=session.user_id, lines=len(lines))
        self._on_subtotal_changed()

    async def adjust_quantity(self, session: Session, product_id: int, delta: int) -> None:
        if delta == 0:
            raise ValidationError("Quantity change must be non-zero")
        await self._cart_store.adjust(session, product_id, delta)
        self._cart.apply_delta(product_id, delta)
        self._changed()

    async def remove_line(self, session: Session, product_id: int) -> None:
        await self._cart_store.remove(session, product_id)
        self._cart.remove(product_id)
        self._changed()

    def _changed(self) -> None:
        # Widgets first, then the discount owes a revalidation.
        self._bus.publish(Signal.CART_CHANGED)
        self._on_subtotal_changed()
