import pytest

import config
from hubscope.hub import Hub
from hubscope.scope import Scope


def test_on_returns_self_and_fires_once_per_registration():
    hub = Hub()
    hits = []

    def hit(*args):
        hits.append(args)

    assert hub.on("custom", hit) is hub
    hub.on("custom", hit)
    hub.emit("custom", 1, {"k": "v"})

    assert hits == [(1, {"k": "v"}), (1, {"k": "v"})]


def test_off_is_a_noop_for_unknown_listener():
    hub = Hub()
    assert hub.off("custom", print) is hub
    assert hub.listeners("custom") == []


def test_emit_returns_self():
    hub = Hub()
    assert hub.emit("nothing") is hub


def test_publish_feeds_message_then_subscriptions():
    hub = Hub()
    order = []

    hub.subscribe("a", lambda payload, topic: order.append(("sub", payload, topic)))
    hub.on(config.EVENT_MESSAGE, lambda *args: order.append(("raw",) + args))

    assert hub.publish("a", 1, 2, 3) is hub
    assert order == [("raw", "a", 1, 2, 3), ("sub", 1, "a")]


def test_publish_matches_topics_exactly():
    hub = Hub()
    got = []

    hub.subscribe("c.d", lambda payload, topic: got.append(topic))
    hub.subscribe("c.d.e", lambda payload, topic: got.append(topic))
    hub.subscribe("c.*", lambda payload, topic: got.append(topic))

    hub.publish("c.d.e")
    hub.publish("c.x")

    assert got == ["c.d.e"]


def test_subscribe_emits_new_topic_per_call():
    hub = Hub()
    seen = []
    hub.on(config.EVENT_NEW_TOPIC, lambda topic, sub: seen.append((topic, sub.id)))

    a1 = hub.subscribe("a")
    a2 = hub.subscribe("a")

    assert seen == [("a", a1.id), ("a", a2.id)]
    assert a2.id == a1.id + 1


def test_unsubscribe_cancels_in_creation_order():
    hub = Hub()
    cancelled = []
    hub.on(config.EVENT_CANCEL, cancelled.append)

    first = hub.subscribe("a")
    hub.subscribe("b")
    sb = hub.scope()
    second = sb.subscribe("a")

    assert hub.unsubscribe("a") is hub
    assert cancelled == [first, second]
    assert first.cancelled and second.cancelled
    assert hub.count() == {"b": 1}


def test_unsubscribe_unknown_topic_is_a_noop():
    hub = Hub()
    hub.subscribe("a")
    hub.unsubscribe("zzz")
    assert hub.count() == {"a": 1}


def test_scope_is_bound_to_hub():
    hub = Hub()
    sb = hub.scope()

    assert isinstance(sb, Scope)
    assert sb.parent is hub
    assert hub.children == [sb]


def test_count_covers_whole_registry_and_own_count_only_hub():
    hub = Hub()
    hub.subscribe("a")
    sb = hub.scope()
    sb.subscribe("a")
    sb.scope().subscribe("b")

    assert hub.count() == {"a": 2, "b": 1}
    assert hub.count_all() == hub.count()
    assert hub.own_count() == {"a": 1}


def test_listener_may_cancel_during_publish():
    hub = Hub()
    got = []

    late = hub.subscribe("a", lambda payload, topic: got.append("late"))
    hub.subscribe("a", lambda payload, topic: late.cancel())
    hub.subscribe("a", lambda payload, topic: got.append("third"))
    hub.subscribe("a", lambda payload, topic: got.append("self")).set_limit(1)

    hub.publish("a")
    hub.publish("a")

    assert got == ["late", "third", "self", "third"]


def test_listener_exception_propagates():
    hub = Hub()
    hub.subscribe("a", lambda payload, topic: 1 / 0)

    with pytest.raises(ZeroDivisionError):
        hub.publish("a")
