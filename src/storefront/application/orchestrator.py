"""The storefront orchestrator.

Owns the cached ``CartState`` and the ``DiscountSlot``; nothing outside
this object and the collaborators it builds ever writes them. UI events
come in as method calls, go out as remote calls, and come back as local
state changes plus bus signals.
"""

from __future__ import annotations

import structlog

from storefront.application.cart_sync import CartSynchronizer
from storefront.application.checkout_saga import CheckoutSaga
from storefront.application.discount_coordinator import (
    DEFAULT_REVALIDATION_DELAY,
    DiscountCoordinator,
)
from storefront.application.dto import CartLineDTO, CartSummaryDTO, CheckoutResult
from storefront.application.notification_bus import NotificationBus, Signal
from storefront.domain.exceptions import Unauthenticated
from storefront.domain.gateway.cart_store import CartStore
from storefront.domain.gateway.catalog import ProductCatalog
from storefront.domain.gateway.discount_authority import DiscountAuthority, UsageRecorder
from storefront.domain.gateway.order_ledger import OrderLedger
from storefront.domain.gateway.session_lookup import SessionLookup
from storefront.domain.model.cart import CartState
from storefront.domain.model.checkout import PaymentDetails
from storefront.domain.model.discount import AppliedDiscount, DiscountSlot
from storefront.domain.model.product import Product
from storefront.domain.model.session import Session
from storefront.domain.model.value_objects import Money

logger = structlog.get_logger(__name__)


class Orchestrator:

    def __init__(
        self,
        session_lookup: SessionLookup,
        cart_store: CartStore,
        catalog: ProductCatalog,
        authority: DiscountAuthority,
        usage_recorder: UsageRecorder,
        ledger: OrderLedger,
        bus: NotificationBus,
        revalidation_delay: float = DEFAULT_REVALIDATION_DELAY,
    ) -> None:
        self._session_lookup = session_lookup
        self._bus = bus
        self.cart = CartState()
        self.discount = DiscountSlot()
        self.notices: list[str] = []

        self._discounts = DiscountCoordinator(
            authority=authority,
            session_lookup=session_lookup,
            cart=self.cart,
            slot=self.discount,
            notify=self.notices.append,
            revalidation_delay=revalidation_delay,
        )
        self._cart_sync = CartSynchronizer(
            cart_store=cart_store,
            catalog=catalog,
            cart=self.cart,
            bus=bus,
            on_subtotal_changed=self._discounts.request_revalidation,
        )
        self._checkout = CheckoutSaga(
            ledger=ledger,
            usage_recorder=usage_recorder,
            cart_store=cart_store,
            cart=self.cart,
            slot=self.discount,
            discounts=self._discounts,
            bus=bus,
        )

    # --- Cart -----------------------------------------------------------------

    async def load(self) -> None:
        await self._cart_sync.load(self._require_session())

    async def adjust_quantity(self, product_id: int, delta: int) -> None:
        await self._cart_sync.adjust_quantity(self._require_session(), product_id, delta)

    async def remove_line(self, product_id: int) -> None:
        await self._cart_sync.remove_line(self._require_session(), product_id)

    # --- Discount -------------------------------------------------------------

    async def apply_discount(self, code: str) -> AppliedDiscount:
        return await self._discounts.apply(code)

    def remove_discount(self) -> AppliedDiscount:
        return self._discounts.remove()

    async def settle(self) -> None:
        """Wait for any scheduled revalidation to run and finish."""
        await self._discounts.drain()

    @property
    def revalidation_pending(self) -> bool:
        return self._discounts.revalidation_pending

    # --- Checkout -------------------------------------------------------------

    async def checkout(
        self, payment: PaymentDetails, shipping_address: str = ""
    ) -> CheckoutResult:
        return await self._checkout.run(self._require_session(), payment, shipping_address)

    # --- Identity -------------------------------------------------------------

    def reset_identity(self) -> None:
        """Forget everything cached for the previous user."""
        self._discounts.clear()
        self.cart.replace([], [])
        self._bus.publish(Signal.IDENTITY_CHANGED)
        logger.info("identity_reset")

    # --- Derived values -------------------------------------------------------

    @property
    def subtotal(self) -> Money:
        return self.cart.subtotal

    @property
    def total(self) -> Money:
        return self.cart.subtotal.saturating_sub(self.discount.amount)

    def summary(self) -> CartSummaryDTO:
        lines = []
        for line in self.cart.lines:
            product = self.cart.product(line.product_id)
            price = product.price if product is not None else Money.zero()
            lines.append(
                CartLineDTO(
                    product_id=line.product_id,
                    product_name=(
                        product.name if product is not None
                        else Product.fallback_name(line.product_id)
                    ),
                    quantity=line.quantity.value,
                    unit_price=str(price),
                    line_total=str(price * line.quantity.value),
                )
            )
        applied = self.discount.applied
        return CartSummaryDTO(
            lines=lines,
            item_count=self.cart.item_count,
            subtotal=str(self.subtotal),
            discount_code=applied.code if applied is not None else None,
            discount_status=self.discount.status.value,
            discount=str(self.discount.amount),
            total=str(self.total),
        )

    # --- Internal helpers -----------------------------------------------------

    def _require_session(self) -> Session:
        session = self._session_lookup.current()
        if session is None:
            raise Unauthenticated()
        return session
