import pytest

import config
from hubscope.hub import Hub


def test_topic_is_fixed_at_creation():
    sub = Hub().subscribe("orders.created")
    assert sub.get_topic() == "orders.created"
    assert sub.topic == "orders.created"
    assert "orders.created" in repr(sub)


def test_cancel_fires_own_listener_and_hub_event():
    hub = Hub()
    seen = []
    hub.on(config.EVENT_CANCEL, lambda s: seen.append(("hub", s)))

    sub = hub.subscribe("a")
    assert sub.on("cancel", lambda s: seen.append(("sub", s))) is sub

    assert sub.cancel() is sub
    assert sub.cancelled is True
    assert sorted(who for who, _ in seen) == ["hub", "sub"]
    assert all(s is sub for _, s in seen)
    assert hub.count() == {}


def test_cancel_twice_is_a_noop():
    hub = Hub()
    cancelled = []
    hub.on(config.EVENT_CANCEL, cancelled.append)

    sub = hub.subscribe("a")
    sub.cancel()
    sub.cancel()

    assert cancelled == [sub]
    assert sub.cancelled is True


def test_cancelled_subscription_gets_no_messages():
    hub = Hub()
    got = []
    sub = hub.subscribe("a", lambda payload, topic: got.append(payload))

    sub.cancel()
    hub.publish("a", 1)

    assert got == []
    assert sub.send(1, "a") is False


def test_extra_message_listeners():
    hub = Hub()
    got = []

    sub = hub.subscribe("a", lambda payload, topic: got.append("first"))
    sub.on("message", lambda payload, topic: got.append("second"))
    hub.publish("a")

    def third(payload, topic):
        got.append("third")

    sub.on("message", third)
    sub.off("message", third)
    hub.publish("a")

    assert got == ["first", "second", "first", "second"]


def test_filter_drops_rejected_messages():
    hub = Hub()
    got = []

    sub = hub.subscribe("n", lambda payload, topic: got.append(payload))
    assert sub.set_filter(lambda payload, topic: payload % 2 == 0) is sub

    for n in range(5):
        hub.publish("n", n)

    assert got == [0, 2, 4]
    assert sub.delivered == 3


def test_limit_cancels_after_n_deliveries():
    hub = Hub()
    got = []
    cancelled = []
    hub.on(config.EVENT_CANCEL, cancelled.append)

    sub = hub.subscribe("n", lambda payload, topic: got.append(payload)).set_limit(2)

    for n in range(4):
        hub.publish("n", n)

    assert got == [0, 1]
    assert sub.cancelled
    assert cancelled == [sub]


def test_filtered_messages_do_not_count_toward_limit():
    hub = Hub()
    got = []

    hub.subscribe("n", lambda payload, topic: got.append(payload)) \
        .set_filter(lambda payload, topic: payload > 1) \
        .set_limit(2)

    for n in range(5):
        hub.publish("n", n)

    assert got == [2, 3]


def test_limit_below_delivered_cancels_immediately():
    hub = Hub()
    sub = hub.subscribe("n")
    hub.publish("n")
    hub.publish("n")

    sub.set_limit(1)

    assert sub.cancelled


@pytest.mark.parametrize("limit", [0, -3])
def test_limit_must_be_positive(limit):
    sub = Hub().subscribe("n")
    with pytest.raises(ValueError):
        sub.set_limit(limit)


def test_direct_cancel_of_scope_subscription_updates_scope_census():
    hub = Hub()
    sb = hub.scope()
    sub = sb.subscribe("a")

    sub.cancel()

    assert sb.count() == {}
    assert hub.count() == {}
