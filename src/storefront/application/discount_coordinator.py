"""Application service: apply, remove and revalidate a discount code.

The authority is the only source of discount amounts. Whenever the cart
subtotal changes while a discount is held, a revalidation is owed; bursts
of changes are coalesced by a ``DebouncedTask`` and the one call that
fires sends the subtotal as it is at fire time.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from storefront.application.debounce import DebouncedTask
from storefront.domain.exceptions import (
    DiscountRejected,
    EmptyCode,
    RemoteUnavailable,
    Unauthenticated,
)
from storefront.domain.gateway.discount_authority import DiscountAuthority
from storefront.domain.gateway.session_lookup import SessionLookup
from storefront.domain.model.cart import CartState
from storefront.domain.model.discount import (
    AppliedDiscount,
    DiscountSlot,
    DiscountStatus,
    normalize_code,
)
from storefront.domain.model.results import DiscountDenied, DiscountGranted

logger = structlog.get_logger(__name__)

DEFAULT_REVALIDATION_DELAY = 0.5


class DiscountCoordinator:

    def __init__(
        self,
        authority: DiscountAuthority,
        session_lookup: SessionLookup,
        cart: CartState,
        slot: DiscountSlot,
        notify: Callable[[str], None],
        revalidation_delay: float = DEFAULT_REVALIDATION_DELAY,
    ) -> None:
        self._authority = authority
        self._session_lookup = session_lookup
        self._cart = cart
        self._slot = slot
        self._notify = notify
        self._revalidation = DebouncedTask(self.revalidate, revalidation_delay)

    # --- Apply / remove -------------------------------------------------------

    async def apply(self, raw_code: str) -> AppliedDiscount:
        """Validate ``raw_code`` against the current subtotal and hold it.

        Raises ``EmptyCode`` before any network call for a blank code,
        ``DiscountRejected`` with the authority's message when refused.
        """
        code = normalize_code(raw_code)
        if not code:
            raise EmptyCode()
        session = self._session_lookup.current()
        if session is None:
            raise Unauthenticated()

        started_at = self._slot.begin_validation()
        try:
            verdict = await self._authority.validate(code, session.user_id, self._cart.subtotal)
        except RemoteUnavailable:
            if self._slot.status == DiscountStatus.VALIDATING:
                self._slot.deny()
            raise

        if self._slot.status != DiscountStatus.VALIDATING:
            # Cleared (sign-out, checkout) while the call was in flight.
            logger.info("validation_discarded", code=code)
            raise DiscountRejected("The discount could not be applied, please try again")

        if isinstance(verdict, DiscountDenied):
            self._slot.deny()
            logger.info("discount_denied", code=code, reason=verdict.message)
            raise DiscountRejected(verdict.message)

        moved_on = self._slot.generation != started_at
        applied = AppliedDiscount(
            code=code,
            coupon_id=verdict.coupon_id,
            type=verdict.discount_type,
            amount=verdict.discount,
            source_message=verdict.message,
        )
        self._slot.grant(applied)
        logger.info("discount_applied", code=code, amount=str(applied.amount))

        if moved_on:
            # The cart changed while we waited; the amount is for an old subtotal.
            self.request_revalidation()
        return applied

    def remove(self) -> AppliedDiscount:
        """Drop the held discount; nothing was redeemed, so no remote call."""
        removed = self._slot.remove()
        self._revalidation.cancel()
        logger.info("discount_removed", code=removed.code)
        return removed

    def clear(self) -> None:
        self._slot.clear()
        self._revalidation.cancel()

    # --- Revalidation ---------------------------------------------------------

    def request_revalidation(self) -> None:
        if self._slot.mark_stale():
            self._revalidation.schedule()

    async def revalidate(self) -> None:
        """Re-check the held code against the subtotal as it is right now."""
        if self._slot.status != DiscountStatus.STALE:
            return
        session = self._session_lookup.current()
        if session is None:
            logger.info("revalidation_skipped", reason="signed out")
            return

        applied = self._slot.applied
        generation = self._slot.begin_revalidation()
        subtotal = self._cart.subtotal
        log = logger.bind(code=applied.code, subtotal=str(subtotal), generation=generation)  # type: ignore[union-attr]

        try:
            verdict = await self._authority.validate(applied.code, session.user_id, subtotal)  # type: ignore[union-attr]
        except RemoteUnavailable as exc:
            if self._slot.revalidation_failed(generation):
                log.warning("revalidation_unavailable", error=str(exc))
            return

        if isinstance(verdict, DiscountGranted):
            if self._slot.refresh(verdict.discount, generation):
                log.info("discount_refreshed", amount=str(verdict.discount))
            else:
                log.info("revalidation_discarded")
            return

        if self._slot.invalidate(generation):
            log.info("discount_invalidated", reason=verdict.message)
            self._notify(f"Discount {applied.code} no longer applies: {verdict.message}")  # type: ignore[union-attr]
        else:
            log.info("revalidation_discarded")

    async def revalidate_now(self) -> None:
        """Skip the quiet period: settle any revalidation that is owed."""
        self._revalidation.cancel()
        await self._revalidation.drain()
        if self._slot.status == DiscountStatus.STALE:
            await self.revalidate()

    @property
    def revalidation_pending(self) -> bool:
        return self._revalidation.pending

    async def drain(self) -> None:
        await self._revalidation.drain()
