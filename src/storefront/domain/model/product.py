"""Catalog entry as seen by the storefront.

The catalog is owned elsewhere; the storefront only reads it to price
cart lines and to snapshot names and prices at checkout.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class Product:

    id: int
    name: str
    price: Money

    @staticmethod
    def fallback_name(product_id: int) -> str:
        """Name recorded for a cart line whose product vanished from the catalog."""
        return f"Product #{product_id}"
