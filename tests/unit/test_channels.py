from proximity.channels import ChannelRegistry
from proximity.subscriber import Subscriber


def test_get_or_create_returns_same_channel():
    registry = ChannelRegistry()

    first = registry.get_or_create("c1")
    second = registry.get_or_create("c1")

    assert first is second
    assert registry.snapshot() == [("c1", 0)]


def test_lookup_never_creates():
    registry = ChannelRegistry()

    assert registry.lookup("ghost") is None
    assert registry.snapshot() == []


def test_remove_only_drops_empty_channels():
    registry = ChannelRegistry()
    channel = registry.get_or_create("c1")
    subscriber = Subscriber("c1")
    channel.add(subscriber)

    registry.remove("c1")
    assert registry.lookup("c1") is channel

    channel.discard(subscriber)
    registry.remove("c1")
    assert registry.lookup("c1") is None

    # unknown ids are a no-op
    registry.remove("never-existed")


def test_snapshot_counts_subscribers_per_channel():
    registry = ChannelRegistry()
    for channel_id, n in (("a", 2), ("b", 1)):
        channel = registry.get_or_create(channel_id)
        for _ in range(n):
            channel.add(Subscriber(channel_id))

    assert sorted(registry.snapshot()) == [("a", 2), ("b", 1)]


def test_drain_empties_the_registry():
    registry = ChannelRegistry()
    registry.get_or_create("a")
    registry.get_or_create("b")

    drained = registry.drain()

    assert sorted(c.id for c in drained) == ["a", "b"]
    assert registry.snapshot() == []
