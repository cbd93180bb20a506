"""Abstract product catalog lookup."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product


class ProductCatalog(ABC):

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """Return every product needed to price a cart."""
