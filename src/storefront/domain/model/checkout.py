"""Checkout draft: the snapshot handed to the order ledger.

A draft freezes each line's product name and unit price at the moment
"pay" is pressed, so later catalog changes never alter what an order
recorded. Drafts are built, submitted once, and thrown away.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import CartState
from storefront.domain.model.discount import AppliedDiscount
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class PaymentDetails:

    card_number: str
    cvv: str
    expiry: str

    def __post_init__(self) -> None:
        if not self.card_number.strip():
            raise ValidationError("Card number is required")

    def __repr__(self) -> str:
        return f"PaymentDetails(card=****{self.card_number[-4:]})"


@dataclass(frozen=True)
class DraftLine:

    product_id: int
    product_name: str
    unit_price: Money  # locked at draft time
    quantity: Quantity

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class CheckoutDraft:

    items: tuple[DraftLine, ...]
    subtotal: Money
    discount: AppliedDiscount | None
    total: Money
    payment: PaymentDetails
    shipping_address: str = ""

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def build(
        cart: CartState,
        discount: AppliedDiscount | None,
        payment: PaymentDetails,
        shipping_address: str = "",
    ) -> CheckoutDraft:
        if cart.is_empty:
            raise ValidationError("Cart is empty")

        items = tuple(_snapshot(cart, line.product_id, line.quantity) for line in cart.lines)
        subtotal = cart.subtotal
        discount_amount = discount.amount if discount is not None else Money.zero()

        return CheckoutDraft(
            items=items,
            subtotal=subtotal,
            discount=discount,
            total=subtotal.saturating_sub(discount_amount),
            payment=payment,
            shipping_address=shipping_address,
        )

    @property
    def discount_amount(self) -> Money:
        return self.discount.amount if self.discount is not None else Money.zero()


def _snapshot(cart: CartState, product_id: int, quantity: Quantity) -> DraftLine:
    product = cart.product(product_id)
    if product is None:
        return DraftLine(
            product_id=product_id,
            product_name=Product.fallback_name(product_id),
            unit_price=Money.zero(),
            quantity=quantity,
        )
    return DraftLine(
        product_id=product_id,
        product_name=product.name,
        unit_price=product.price,
        quantity=quantity,
    )
