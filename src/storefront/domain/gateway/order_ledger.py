"""Abstract client for the Order Ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.checkout import CheckoutDraft
from storefront.domain.model.results import OrderOutcome


class OrderLedger(ABC):

    @abstractmethod
    async def create(self, user_id: int, draft: CheckoutDraft) -> OrderOutcome:
        """Persist an order from ``draft`` (charges payment server-side).

        Returns ``OrderRejected`` when the ledger refuses the order and
        raises ``RemoteUnavailable`` when it cannot be reached.
        """
