"""Abstract client for the remote Cart Store.

Defined in the domain layer so the orchestration never depends on
transport. Every method raises ``RemoteUnavailable`` when the store
cannot be reached.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import CartLine
from storefront.domain.model.session import Session


class CartStore(ABC):

    @abstractmethod
    async def lines(self, session: Session) -> list[CartLine]:
        """Return the user's cart lines in stored order."""

    @abstractmethod
    async def adjust(self, session: Session, product_id: int, delta: int) -> None:
        """Add ``delta`` (may be negative) to a line's quantity."""

    @abstractmethod
    async def remove(self, session: Session, product_id: int) -> None:
        """Delete a line regardless of its quantity."""

    @abstractmethod
    async def clear(self, session: Session) -> None:
        """Delete every line."""

    @abstractmethod
    async def count(self, session: Session) -> int:
        """Return the number of items in the cart."""
