"""Application service: the checkout saga.

Steps, in order:

1. Build a draft snapshot of the cart, the held discount and the total.
   A discount still owed a revalidation is re-checked first; one that is
   not confirmed for the current subtotal is left out of the draft.
2. Create the order. This is the only commit point: if it fails nothing
   else runs and local state is left untouched.
3. Record discount usage (only if a discount was in the draft).
4. Clear the remote cart.
5. Empty the local cart, drop the discount, publish cart-changed.

Steps 3 and 4 are best-effort. Their failures are logged and reported in
the result, never raised, and never undo the order: the ledger already
holds it and re-running creation would charge twice.
"""

from __future__ import annotations

from typing import Any

import structlog

from storefront.application.discount_coordinator import DiscountCoordinator
from storefront.application.dto import CheckoutResult
from storefront.application.notification_bus import NotificationBus, Signal
from storefront.domain.exceptions import CheckoutFailed, DomainException, RemoteUnavailable
from storefront.domain.gateway.cart_store import CartStore
from storefront.domain.gateway.discount_authority import UsageRecorder
from storefront.domain.gateway.order_ledger import OrderLedger
from storefront.domain.model.cart import CartState
from storefront.domain.model.checkout import CheckoutDraft, PaymentDetails
from storefront.domain.model.discount import AppliedDiscount, DiscountSlot, DiscountStatus
from storefront.domain.model.results import OrderRejected
from storefront.domain.model.session import Session

logger = structlog.get_logger(__name__)

GENERIC_FAILURE = "Payment failed, please try again"


class CheckoutSaga:

    def __init__(
        self,
        ledger: OrderLedger,
        usage_recorder: UsageRecorder,
        cart_store: CartStore,
        cart: CartState,
        slot: DiscountSlot,
        discounts: DiscountCoordinator,
        bus: NotificationBus,
    ) -> None:
        self._ledger = ledger
        self._usage_recorder = usage_recorder
        self._cart_store = cart_store
        self._cart = cart
        self._slot = slot
        self._discounts = discounts
        self._bus = bus

    async def run(
        self,
        session: Session,
        payment: PaymentDetails,
        shipping_address: str = "",
    ) -> CheckoutResult:
        discount = await self._current_discount(session)
        draft = CheckoutDraft.build(self._cart, discount, payment, shipping_address)
        log = logger.bind(user_id=session.user_id, total=str(draft.total))

        order_id = await self._create_order(session, draft, log)
        log = log.bind(order_id=order_id)

        usage_recorded = False
        if draft.discount is not None and order_id is not None:
            usage_recorded = await self._record_usage(session, draft, order_id, log)

        cart_cleared = await self._clear_remote_cart(session, log)

        self._cart.clear()
        self._discounts.clear()
        self._bus.publish(Signal.CART_CHANGED)
        log.info("checkout_completed", usage_recorded=usage_recorded, cart_cleared=cart_cleared)

        return CheckoutResult(
            order_id=order_id,
            usage_recorded=usage_recorded,
            cart_cleared=cart_cleared,
        )

    # --- Steps ----------------------------------------------------------------

    async def _current_discount(self, session: Session) -> AppliedDiscount | None:
        """The held discount, only if validated against the subtotal being paid."""
        if self._slot.status in (DiscountStatus.STALE, DiscountStatus.REVALIDATING):
            await self._discounts.revalidate_now()
        if self._slot.status != DiscountStatus.APPLIED:
            if self._slot.applied is not None:
                logger.warning(
                    "unconfirmed_discount_dropped",
                    user_id=session.user_id,
                    code=self._slot.applied.code,
                    status=self._slot.status.value,
                )
            return None
        return self._slot.applied

    async def _create_order(self, session: Session, draft: CheckoutDraft, log: Any) -> int | None:
        try:
            outcome = await self._ledger.create(session.user_id, draft)
        except RemoteUnavailable as exc:
            log.warning("order_create_unavailable", error=str(exc))
            raise CheckoutFailed(GENERIC_FAILURE) from exc

        if isinstance(outcome, OrderRejected):
            log.info("order_rejected", reason=outcome.message)
            raise CheckoutFailed(outcome.message or GENERIC_FAILURE)

        log.info("order_created", order_id=outcome.order_id)
        return outcome.order_id

    async def _record_usage(
        self, session: Session, draft: CheckoutDraft, order_id: int, log: Any
    ) -> bool:
        discount = draft.discount
        try:
            await self._usage_recorder.record(
                coupon_id=discount.coupon_id,  # type: ignore[union-attr]
                user_id=session.user_id,
                order_id=order_id,
                discount=draft.discount_amount,
            )
        except DomainException as exc:
            log.error("discount_usage_record_failed", code=discount.code, error=str(exc))  # type: ignore[union-attr]
            return False
        return True

    async def _clear_remote_cart(self, session: Session, log: Any) -> bool:
        try:
            await self._cart_store.clear(session)
        except DomainException as exc:
            log.error("remote_cart_clear_failed", error=str(exc))
            return False
        return True
