"""Tests for cart loading and remote-first cart mutations."""

import pytest

from storefront.application.notification_bus import Signal
from storefront.domain.exceptions import LoadFailed, RemoteUnavailable, Unauthenticated, ValidationError
from storefront.domain.model.discount import DiscountStatus
from storefront.domain.model.value_objects import Money
from tests.fakes import Storefront


class TestLoad:

    @pytest.mark.asyncio
    async def test_prices_lines_from_catalog(self):
        shop = Storefront(lines={1: 2, 2: 4})
        await shop.orchestrator.load()
        assert shop.orchestrator.subtotal == Money.of("1100.00")
        assert shop.orchestrator.cart.item_count == 6

    @pytest.mark.asyncio
    async def test_requires_session(self):
        shop = Storefront(session=None)
        with pytest.raises(Unauthenticated):
            await shop.orchestrator.load()
        assert shop.cart_store.calls == []

    @pytest.mark.asyncio
    async def test_cart_failure_leaves_state_empty(self):
        shop = Storefront()
        await shop.orchestrator.load()
        shop.cart_store.fail_on.add("lines")
        with pytest.raises(LoadFailed):
            await shop.orchestrator.load()
        assert shop.orchestrator.cart.is_empty
        assert shop.orchestrator.subtotal == Money.zero()

    @pytest.mark.asyncio
    async def test_catalog_failure_is_load_failure(self):
        shop = Storefront()
        shop.catalog.fail = True
        with pytest.raises(LoadFailed):
            await shop.orchestrator.load()
        assert shop.orchestrator.cart.is_empty

    @pytest.mark.asyncio
    async def test_reload_revalidates_held_discount(self):
        shop = Storefront()  # 1000
        await shop.orchestrator.load()
        await shop.orchestrator.apply_discount("HOSGELDIN")
        shop.cart_store.store = {2: 1}  # changed elsewhere: 25

        await shop.orchestrator.load()
        assert shop.orchestrator.discount.status == DiscountStatus.STALE
        await shop.orchestrator.settle()

        assert shop.authority.calls[-1] == ("HOSGELDIN", 7, Money.of("25.00"))
        assert shop.orchestrator.discount.status == DiscountStatus.ABSENT
        assert shop.orchestrator.total == Money.of("25.00")

    @pytest.mark.asyncio
    async def test_reload_with_higher_subtotal_refreshes_amount(self):
        shop = Storefront()
        await shop.orchestrator.load()
        await shop.orchestrator.apply_discount("HOSGELDIN")
        shop.cart_store.store = {1: 3}

        await shop.orchestrator.load()
        await shop.orchestrator.settle()

        assert shop.orchestrator.discount.status == DiscountStatus.APPLIED
        assert shop.orchestrator.discount.amount == Money.of("150")

    @pytest.mark.asyncio
    async def test_failed_reload_does_not_trust_held_discount(self):
        shop = Storefront()
        await shop.orchestrator.load()
        await shop.orchestrator.apply_discount("HOSGELDIN")
        shop.cart_store.fail_on.add("lines")

        with pytest.raises(LoadFailed):
            await shop.orchestrator.load()

        assert shop.orchestrator.discount.status == DiscountStatus.STALE
        assert shop.orchestrator.total == Money.zero()
        await shop.orchestrator.settle()

    @pytest.mark.asyncio
    async def test_first_load_without_discount_schedules_nothing(self):
        shop = Storefront()
        await shop.orchestrator.load()
        assert not shop.orchestrator.revalidation_pending
        assert shop.authority.calls == []


class TestAdjustQuantity:

    @pytest.mark.asyncio
    async def test_remote_then_local(self):
        shop = Storefront()
        await shop.orchestrator.load()
        await shop.orchestrator.adjust_quantity(1, 1)
        assert shop.cart_store.calls[-1] == ("adjust", 7, 1, 1)
        assert shop.orchestrator.cart.quantity_of(1) == 3
        assert shop.orchestrator.subtotal == Money.of("1500.00")

    @pytest.mark.asyncio
    async def test_dropping_to_zero_removes_line(self):
        shop = Storefront(lines={1: 1, 2: 1})
        await shop.orchestrator.load()
        await shop.orchestrator.adjust_quantity(1, -1)
        assert [line.product_id for line in shop.orchestrator.cart.lines] == [2]

    @pytest.mark.asyncio
    async def test_adding_new_product(self):
        shop = Storefront()
        await shop.orchestrator.load()
        await shop.orchestrator.adjust_quantity(2, 3)
        assert shop.orchestrator.cart.quantity_of(2) == 3

    @pytest.mark.asyncio
    async def test_failure_leaves_state_untouched(self):
        shop = Storefront()
        await shop.orchestrator.load()
        signals = []
        shop.bus.subscribe(Signal.CART_CHANGED, lambda: signals.append("cart"))
        before = list(shop.orchestrator.cart.lines)

        shop.cart_store.fail_on.add("adjust")
        with pytest.raises(RemoteUnavailable):
            await shop.orchestrator.adjust_quantity(1, 1)

        assert shop.orchestrator.cart.lines == before
        assert signals == []

    @pytest.mark.asyncio
    async def test_zero_delta_rejected_before_remote_call(self):
        shop = Storefront()
        await shop.orchestrator.load()
        with pytest.raises(ValidationError):
            await shop.orchestrator.adjust_quantity(1, 0)
        assert "adjust" not in shop.cart_store.names()

    @pytest.mark.asyncio
    async def test_publishes_before_requesting_revalidation(self):
        shop = Storefront()
        await shop.orchestrator.load()
        await shop.orchestrator.apply_discount("HOSGELDIN")
        seen = []
        shop.bus.subscribe(
            Signal.CART_CHANGED, lambda: seen.append(shop.orchestrator.discount.status)
        )

        await shop.orchestrator.adjust_quantity(1, 1)

        assert seen == [DiscountStatus.APPLIED]
        assert shop.orchestrator.discount.status == DiscountStatus.STALE
        await shop.orchestrator.settle()


class TestRemoveLine:

    @pytest.mark.asyncio
    async def test_removes_whole_line(self):
        shop = Storefront(lines={1: 5, 2: 1})
        await shop.orchestrator.load()
        await shop.orchestrator.remove_line(1)
        assert shop.cart_store.calls[-1] == ("remove", 7, 1)
        assert shop.orchestrator.subtotal == Money.of("25.00")

    @pytest.mark.asyncio
    async def test_failure_leaves_state_untouched(self):
        shop = Storefront(lines={1: 5})
        await shop.orchestrator.load()
        shop.cart_store.fail_on.add("remove")
        with pytest.raises(RemoteUnavailable):
            await shop.orchestrator.remove_line(1)
        assert shop.orchestrator.cart.quantity_of(1) == 5

    @pytest.mark.asyncio
    async def test_without_discount_no_revalidation_is_scheduled(self):
        shop = Storefront(lines={1: 5})
        await shop.orchestrator.load()
        await shop.orchestrator.remove_line(1)
        assert not shop.orchestrator.revalidation_pending
        assert shop.authority.calls == []
