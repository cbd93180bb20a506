"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data from the orchestrator to the CLI without exposing
domain internals.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartLineDTO:

    product_id: int
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "150.00 TRY"
    line_total: str


@dataclass(frozen=True)
class CartSummaryDTO:

    lines: list[CartLineDTO]
    item_count: int
    subtotal: str
    discount_code: str | None
    discount_status: str
    discount: str
    total: str


@dataclass(frozen=True)
class CheckoutResult:
    """What the caller gets back after the order was committed.

    The two flags report the best-effort steps; neither affects success.
    """

    order_id: int | None
    usage_recorded: bool
    cart_cleared: bool
