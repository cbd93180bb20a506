"""Typed outcomes of remote calls.

Each remote operation that can legitimately say "no" returns one of two
frozen dataclasses instead of an untyped response body. Transport
failures are not outcomes; gateways raise ``RemoteUnavailable`` for those.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from storefront.domain.model.discount import DiscountType
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class DiscountGranted:
    """The authority accepted the code for the given total."""

    coupon_id: int
    discount_type: DiscountType
    discount: Money
    message: str


@dataclass(frozen=True)
class DiscountDenied:
    """The authority refused the code; ``message`` says why."""

    message: str


DiscountVerdict = Union[DiscountGranted, DiscountDenied]


@dataclass(frozen=True)
class OrderPlaced:
    """Committed. ``order_id`` is None if the ledger forgot to echo it."""

    order_id: int | None


@dataclass(frozen=True)
class OrderRejected:

    message: str | None = None


OrderOutcome = Union[OrderPlaced, OrderRejected]
