"""Тесты реестра подписчиков."""

from trackr.core.listeners import AuthListenerRegistry


def test_notify_in_registration_order(user):
    registry = AuthListenerRegistry()
    calls = []
    registry.add(lambda a, u: calls.append(("first", a, u)))
    registry.add(lambda a, u: calls.append(("second", a, u)))

    assert registry.notify(True, user) == 2
    assert calls == [("first", True, user), ("second", True, user)]


def test_failing_listener_does_not_block_others():
    registry = AuthListenerRegistry()
    calls = []

    def broken(is_auth, user):
        raise RuntimeError("listener bug")

    registry.add(broken)
    registry.add(lambda a, u: calls.append(a))

    assert registry.notify(False, None) == 1
    assert calls == [False]


def test_add_is_idempotent_per_callback():
    registry = AuthListenerRegistry()
    calls = []

    def listener(is_auth, user):
        calls.append(is_auth)

    first = registry.add(listener)
    second = registry.add(listener)
    registry.notify(True, None)

    assert first is second
    assert len(registry) == 1
    assert calls == [True]


def test_subscription_unsubscribes_its_callback():
    registry = AuthListenerRegistry()
    calls = []
    subscription = registry.add(lambda a, u: calls.append(a))

    assert subscription.active
    subscription.unsubscribe()
    subscription.unsubscribe()
    registry.notify(True, None)

    assert not subscription.active
    assert calls == []


def test_remove_unknown_is_noop():
    registry = AuthListenerRegistry()
    registry.remove(lambda a, u: None)
    assert len(registry) == 0


def test_listener_may_unsubscribe_during_notify():
    registry = AuthListenerRegistry()
    calls = []

    def once(is_auth, user):
        calls.append("once")
        registry.remove(once)

    registry.add(once)
    registry.add(lambda a, u: calls.append("always"))

    registry.notify(True, None)
    registry.notify(False, None)

    assert calls == ["once", "always", "always"]
