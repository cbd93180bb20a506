"""Abstract client for the Discount Authority and its usage recorder."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.results import DiscountVerdict
from storefront.domain.model.value_objects import Money


class DiscountAuthority(ABC):

    @abstractmethod
    async def validate(self, code: str, user_id: int, order_total: Money) -> DiscountVerdict:
        """Check ``code`` against ``order_total`` without redeeming it."""


class UsageRecorder(ABC):

    @abstractmethod
    async def record(
        self, coupon_id: int, user_id: int, order_id: int, discount: Money
    ) -> None:
        """Record that a discount was redeemed on an order."""
