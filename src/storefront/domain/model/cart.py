"""Local copy of the remote cart.

The Cart Store is the source of truth; ``CartState`` is the cached view
the orchestrator prices and displays. Lines are kept in the order the
Cart Store returned them, new products are appended at the end.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class CartLine:

    product_id: int
    quantity: Quantity


@dataclass
class CartState:
    """Cached cart lines plus the catalog prices needed to total them.

    ``subtotal`` is a property rather than a stored field so it can never
    be read stale after a line or price change.
    """

    lines: list[CartLine] = field(default_factory=list)
    catalog: dict[int, Product] = field(default_factory=dict)

    # --- Mutations (applied only after the remote call succeeded) ------------

    def replace(self, lines: list[CartLine], products: list[Product]) -> None:
        self.lines = list(lines)
        self.catalog = {p.id: p for p in products}

    def apply_delta(self, product_id: int, delta: int) -> None:
        """Mirror a Cart Store quantity adjustment.

        A line whose quantity drops to zero or below disappears; an unknown
        product with a positive delta becomes a new line at the end.
        """
        if delta == 0:
            raise ValidationError("Quantity change must be non-zero")

        for index, line in enumerate(self.lines):
            if line.product_id != product_id:
                continue
            new_quantity = line.quantity.value + delta
            if new_quantity > 0:
                self.lines[index] = CartLine(product_id, Quantity(new_quantity))
            else:
                del self.lines[index]
            return

        if delta > 0:
            self.lines.append(CartLine(product_id, Quantity(delta)))

    def remove(self, product_id: int) -> None:
        self.lines = [line for line in self.lines if line.product_id != product_id]

    def clear(self) -> None:
        self.lines = []

    # --- Queries --------------------------------------------------------------

    def product(self, product_id: int) -> Product | None:
        return self.catalog.get(product_id)

    def quantity_of(self, product_id: int) -> int:
        for line in self.lines:
            if line.product_id == product_id:
                return line.quantity.value
        return 0

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            product = self.catalog.get(line.product_id)
            if product is None:
                continue  # unpriced lines count as zero
            result = result + product.price * line.quantity.value
        return result

    @property
    def item_count(self) -> int:
        return sum(line.quantity.value for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines
