"""Discount lifecycle.

``DiscountSlot`` is the single place an applied discount lives. It is a
small state machine::

    ABSENT -> VALIDATING -> APPLIED -> STALE -> REVALIDATING -> APPLIED
                  |                                   |
                  +-> ABSENT                          +-> ABSENT

plus ``APPLIED/STALE/REVALIDATING -> ABSENT`` on explicit removal or
checkout. The discount amount is always the one the authority returned;
nothing here recomputes it.

Every change to the applied discount, and every cart change that makes
it stale, bumps ``generation``. Revalidation responses carry the
generation they were dispatched under and are dropped when it moved on.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from storefront.domain.exceptions import DiscountAlreadyApplied, ValidationError
from storefront.domain.model.value_objects import Money


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class DiscountStatus(Enum):
    ABSENT = "ABSENT"
    VALIDATING = "VALIDATING"
    APPLIED = "APPLIED"
    STALE = "STALE"
    REVALIDATING = "REVALIDATING"


_HOLDING = (DiscountStatus.APPLIED, DiscountStatus.STALE, DiscountStatus.REVALIDATING)


def normalize_code(raw: str) -> str:
    return raw.strip().upper()


@dataclass(frozen=True)
class AppliedDiscount:

    code: str
    coupon_id: int
    type: DiscountType
    amount: Money
    source_message: str

    def with_amount(self, amount: Money) -> AppliedDiscount:
        return replace(self, amount=amount)


class DiscountSlot:
    """Holds at most one applied discount and enforces its transitions."""

    def __init__(self) -> None:
        self.status = DiscountStatus.ABSENT
        self.applied: AppliedDiscount | None = None
        self.generation = 0

    # --- Queries --------------------------------------------------------------

    @property
    def amount(self) -> Money:
        return self.applied.amount if self.applied is not None else Money.zero()

    @property
    def is_holding(self) -> bool:
        return self.status in _HOLDING

    # --- Initial validation ---------------------------------------------------

    def begin_validation(self) -> int:
        if self.status in _HOLDING:
            raise DiscountAlreadyApplied(
                f"Discount {self.applied.code} is already applied; remove it first"  # type: ignore[union-attr]
            )
        if self.status == DiscountStatus.VALIDATING:
            raise ValidationError("A discount code is already being checked")
        self.status = DiscountStatus.VALIDATING
        return self.generation

    def grant(self, discount: AppliedDiscount) -> None:
        self._expect(DiscountStatus.VALIDATING)
        self.applied = discount
        self.status = DiscountStatus.APPLIED
        self.generation += 1

    def deny(self) -> None:
        """Validation refused or failed: nothing is stored."""
        self._expect(DiscountStatus.VALIDATING)
        self.status = DiscountStatus.ABSENT

    # --- Revalidation ---------------------------------------------------------

    def mark_stale(self) -> bool:
        """Record that the subtotal changed.

        Returns True when a revalidation is now owed. While the first
        validation is still in flight only the generation moves, so the
        caller can tell the granted amount was computed on an old total.
        """
        if self.status == DiscountStatus.ABSENT:
            return False
        self.generation += 1
        if self.status == DiscountStatus.VALIDATING:
            return False
        self.status = DiscountStatus.STALE
        return True

    def begin_revalidation(self) -> int:
        self._expect(DiscountStatus.STALE)
        self.status = DiscountStatus.REVALIDATING
        return self.generation

    def refresh(self, amount: Money, generation: int) -> bool:
        """Replace the amount with the authority's fresh value."""
        if not self._current(generation):
            return False
        self.applied = self.applied.with_amount(amount)  # type: ignore[union-attr]
        self.status = DiscountStatus.APPLIED
        return True

    def invalidate(self, generation: int) -> bool:
        """The authority no longer accepts the code at the new subtotal."""
        if not self._current(generation):
            return False
        self._drop()
        return True

    def revalidation_failed(self, generation: int) -> bool:
        """Transport failure: keep the old amount, stay owed a revalidation."""
        if not self._current(generation):
            return False
        self.status = DiscountStatus.STALE
        return True

    # --- Removal --------------------------------------------------------------

    def remove(self) -> AppliedDiscount:
        if self.status not in _HOLDING:
            raise ValidationError("No discount is applied")
        removed = self.applied
        self._drop()
        return removed  # type: ignore[return-value]

    def clear(self) -> None:
        """Terminal reset (checkout completed, identity changed)."""
        self._drop()

    # --- Internal helpers -----------------------------------------------------

    def _current(self, generation: int) -> bool:
        return self.status == DiscountStatus.REVALIDATING and generation == self.generation

    def _drop(self) -> None:
        self.applied = None
        self.status = DiscountStatus.ABSENT
        self.generation += 1

    def _expect(self, status: DiscountStatus) -> None:
        if self.status != status:
            raise ValidationError(
                f"Discount is {self.status.value}, expected {status.value}"
            )
