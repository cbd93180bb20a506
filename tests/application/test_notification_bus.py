"""Tests for the signal bus."""

from storefront.application.notification_bus import NotificationBus, Signal, get_bus


class TestPublish:

    def test_every_subscriber_called_once(self):
        bus = NotificationBus()
        calls = []
        bus.subscribe(Signal.CART_CHANGED, lambda: calls.append("a"))
        bus.subscribe(Signal.CART_CHANGED, lambda: calls.append("b"))

        bus.publish(Signal.CART_CHANGED)

        assert sorted(calls) == ["a", "b"]

    def test_signals_are_independent(self):
        bus = NotificationBus()
        calls = []
        bus.subscribe(Signal.IDENTITY_CHANGED, lambda: calls.append("identity"))
        bus.publish(Signal.CART_CHANGED)
        assert calls == []

    def test_no_replay_for_late_subscribers(self):
        bus = NotificationBus()
        bus.publish(Signal.CART_CHANGED)
        calls = []
        bus.subscribe(Signal.CART_CHANGED, lambda: calls.append("late"))
        assert calls == []

    def test_failing_listener_does_not_reach_publisher(self):
        bus = NotificationBus()
        calls = []

        def broken():
            raise RuntimeError("widget crashed")

        bus.subscribe(Signal.CART_CHANGED, broken)
        bus.subscribe(Signal.CART_CHANGED, lambda: calls.append("ok"))

        bus.publish(Signal.CART_CHANGED)

        assert calls == ["ok"]


class TestSubscription:

    def test_close_stops_delivery(self):
        bus = NotificationBus()
        calls = []
        subscription = bus.subscribe(Signal.CART_CHANGED, lambda: calls.append(1))
        subscription.close()
        bus.publish(Signal.CART_CHANGED)
        assert calls == []
        assert bus.subscriber_count(Signal.CART_CHANGED) == 0

    def test_close_twice_is_harmless(self):
        bus = NotificationBus()
        subscription = bus.subscribe(Signal.CART_CHANGED, lambda: None)
        subscription.close()
        subscription.close()
        assert not subscription.active

    def test_context_manager_unsubscribes(self):
        bus = NotificationBus()
        with bus.subscribe(Signal.IDENTITY_CHANGED, lambda: None):
            assert bus.subscriber_count(Signal.IDENTITY_CHANGED) == 1
        assert bus.subscriber_count(Signal.IDENTITY_CHANGED) == 0

    def test_unsubscribe_during_publish_skips_later_listener(self):
        bus = NotificationBus()
        calls = []
        second = None

        def first():
            calls.append("first")
            second.close()

        bus.subscribe(Signal.CART_CHANGED, first)
        second = bus.subscribe(Signal.CART_CHANGED, lambda: calls.append("second"))

        bus.publish(Signal.CART_CHANGED)

        assert calls == ["first"]


def test_process_bus_is_shared():
    assert get_bus() is get_bus()
