"""In-memory fake gateways for testing.

These implement the same abstract interfaces as the HTTP clients but
keep everything in dicts and record every call. Each fake can be told to
fail so tests can drive the error paths.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

from storefront.application.notification_bus import NotificationBus
from storefront.application.orchestrator import Orchestrator
from storefront.domain.exceptions import RemoteUnavailable
from storefront.domain.gateway.cart_store import CartStore
from storefront.domain.gateway.catalog import ProductCatalog
from storefront.domain.gateway.discount_authority import DiscountAuthority, UsageRecorder
from storefront.domain.gateway.order_ledger import OrderLedger
from storefront.domain.gateway.session_lookup import SessionLookup
from storefront.domain.model.cart import CartLine
from storefront.domain.model.checkout import CheckoutDraft
from storefront.domain.model.discount import DiscountType
from storefront.domain.model.product import Product
from storefront.domain.model.results import (
    DiscountDenied,
    DiscountGranted,
    DiscountVerdict,
    OrderOutcome,
    OrderPlaced,
    OrderRejected,
)
from storefront.domain.model.session import Session
from storefront.domain.model.value_objects import Money, Quantity

ALICE = Session(user_id=7, token="tok-alice")


class FakeSessionLookup(SessionLookup):

    def __init__(self, session: Session | None = ALICE) -> None:
        self.session = session

    def current(self) -> Session | None:
        return self.session


class FakeCartStore(CartStore):

    def __init__(self, lines: dict[int, int] | None = None) -> None:
        self.store: dict[int, int] = dict(lines or {})
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()

    def _call(self, name: str, *args: object) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise RemoteUnavailable(f"cart store {name} down")

    async def lines(self, session: Session) -> list[CartLine]:
        self._call("lines", session.user_id)
        return [CartLine(pid, Quantity(qty)) for pid, qty in self.store.items()]

    async def adjust(self, session: Session, product_id: int, delta: int) -> None:
        self._call("adjust", session.user_id, product_id, delta)
        new_quantity = self.store.get(product_id, 0) + delta
        if new_quantity > 0:
            self.store[product_id] = new_quantity
        else:
            self.store.pop(product_id, None)

    async def remove(self, session: Session, product_id: int) -> None:
        self._call("remove", session.user_id, product_id)
        self.store.pop(product_id, None)

    async def clear(self, session: Session) -> None:
        self._call("clear", session.user_id)
        self.store.clear()

    async def count(self, session: Session) -> int:
        self._call("count", session.user_id)
        return sum(self.store.values())

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]


class FakeCatalog(ProductCatalog):

    def __init__(self, products: list[Product] | None = None) -> None:
        self.products = list(products or [])
        self.fail = False

    async def list_products(self) -> list[Product]:
        if self.fail:
            raise RemoteUnavailable("catalog down")
        return list(self.products)


class Coupon:
    """Server-side rule the fake authority evaluates, like the real one."""

    def __init__(
        self,
        code: str,
        coupon_id: int,
        kind: DiscountType,
        value: str,
        min_order: str = "0",
    ) -> None:
        self.code = code
        self.coupon_id = coupon_id
        self.kind = kind
        self.value = Decimal(value)
        self.min_order = Decimal(min_order)

    def evaluate(self, total: Money) -> DiscountVerdict:
        if total.amount < self.min_order:
            return DiscountDenied(f"minimum order is {self.min_order}")
        if self.kind == DiscountType.PERCENTAGE:
            discount = total.amount * self.value / Decimal("100")
        else:
            discount = self.value
        return DiscountGranted(
            coupon_id=self.coupon_id,
            discount_type=self.kind,
            discount=Money(min(discount, total.amount)),
            message=f"{self.code} applied",
        )


class FakeDiscountAuthority(DiscountAuthority):
    """Evaluates coupons; ``hold()`` makes calls wait until ``release()``."""

    def __init__(self, coupons: list[Coupon] | None = None) -> None:
        self.coupons = {c.code: c for c in coupons or []}
        self.calls: list[tuple[str, int, Money]] = []
        self.fail = False
        self._gate: asyncio.Event | None = None

    def hold(self) -> None:
        self._gate = asyncio.Event()

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()
            self._gate = None

    async def validate(self, code: str, user_id: int, order_total: Money) -> DiscountVerdict:
        self.calls.append((code, user_id, order_total))
        verdict = self._evaluate(code, order_total)
        if self._gate is not None:
            await self._gate.wait()
        if self.fail:
            raise RemoteUnavailable("discount authority down")
        return verdict

    def _evaluate(self, code: str, order_total: Money) -> DiscountVerdict:
        coupon = self.coupons.get(code)
        if coupon is None:
            return DiscountDenied("Coupon code not found")
        return coupon.evaluate(order_total)


class FakeUsageRecorder(UsageRecorder):

    def __init__(self) -> None:
        self.records: list[tuple[int, int, int, Money]] = []
        self.fail = False

    async def record(
        self, coupon_id: int, user_id: int, order_id: int, discount: Money
    ) -> None:
        if self.fail:
            raise RemoteUnavailable("usage recorder down")
        self.records.append((coupon_id, user_id, order_id, discount))


class FakeOrderLedger(OrderLedger):

    def __init__(self, next_id: int = 55) -> None:
        self.orders: dict[int, CheckoutDraft] = {}
        self.attempts: list[CheckoutDraft] = []
        self._next_id = next_id
        self.reject_with: str | None = None
        self.fail = False
        self.echo_id = True

    async def create(self, user_id: int, draft: CheckoutDraft) -> OrderOutcome:
        self.attempts.append(draft)
        if self.fail:
            raise RemoteUnavailable("order ledger down")
        if self.reject_with is not None:
            return OrderRejected(self.reject_with)
        order_id = self._next_id
        self._next_id += 1
        self.orders[order_id] = draft
        return OrderPlaced(order_id=order_id if self.echo_id else None)


# --- Wiring -------------------------------------------------------------------

PHONE = Product(id=1, name="Phone", price=Money.of("500.00"))
CASE = Product(id=2, name="Case", price=Money.of("25.00"))

HOSGELDIN = Coupon("HOSGELDIN", 1, DiscountType.PERCENTAGE, "10", min_order="100")
SUPER100 = Coupon("SUPER100", 3, DiscountType.FIXED, "100", min_order="500")


class Storefront:
    """An orchestrator wired to fresh fakes, with the fakes kept at hand."""

    def __init__(
        self,
        lines: dict[int, int] | None = None,
        session: Session | None = ALICE,
        revalidation_delay: float = 0.01,
    ) -> None:
        self.sessions = FakeSessionLookup(session)
        self.cart_store = FakeCartStore({1: 2} if lines is None else lines)
        self.catalog = FakeCatalog([PHONE, CASE])
        self.authority = FakeDiscountAuthority([HOSGELDIN, SUPER100])
        self.usage = FakeUsageRecorder()
        self.ledger = FakeOrderLedger()
        self.bus = NotificationBus()
        self.orchestrator = Orchestrator(
            session_lookup=self.sessions,
            cart_store=self.cart_store,
            catalog=self.catalog,
            authority=self.authority,
            usage_recorder=self.usage,
            ledger=self.ledger,
            bus=self.bus,
            revalidation_delay=revalidation_delay,
        )
