"""
Tests for the in-process TopicRegistry.
"""

import asyncio

import pytest

from messaging import topics
from messaging.topics import TopicRegistry, get_registry, project_topic, user_topic


class FakeHandle:
    """Connection handle that records every event delivered to it."""

    def __init__(self, name="handle"):
        self.name = name
        self.events = []

    async def deliver(self, event):
        self.events.append(event)

    def __repr__(self):
        return f"<FakeHandle {self.name}>"


class SlowHandle(FakeHandle):
    async def deliver(self, event):
        await asyncio.sleep(1)
        self.events.append(event)


class BrokenHandle(FakeHandle):
    async def deliver(self, event):
        raise ConnectionResetError("socket closed")


def test_topic_names():
    assert user_topic(42) == "user:42"
    assert project_topic("7") == "project:7"


class TestSubscriptions:
    def test_subscribe_is_idempotent(self):
        registry = TopicRegistry()
        handle = FakeHandle()

        assert registry.subscribe("user:1", handle) is True
        assert registry.subscribe("user:1", handle) is False
        assert registry.subscribers("user:1") == [handle]

    def test_unsubscribe(self):
        registry = TopicRegistry()
        handle = FakeHandle()
        registry.subscribe("user:1", handle)

        assert registry.unsubscribe("user:1", handle) is True
        assert registry.unsubscribe("user:1", handle) is False
        assert registry.subscribers("user:1") == []
        assert registry.topics_for(handle) == set()

    def test_unsubscribe_all(self):
        registry = TopicRegistry()
        handle, other = FakeHandle("a"), FakeHandle("b")
        registry.subscribe("user:1", handle)
        registry.subscribe("project:9", handle)
        registry.subscribe("project:9", other)

        left = registry.unsubscribe_all(handle)

        assert left == {"user:1", "project:9"}
        assert registry.subscribers("user:1") == []
        assert registry.subscribers("project:9") == [other]

    def test_unsubscribe_all_without_subscriptions(self):
        assert TopicRegistry().unsubscribe_all(FakeHandle()) == set()


class TestPublish:
    @pytest.mark.asyncio
    async def test_delivers_to_every_subscriber_once(self):
        registry = TopicRegistry()
        first, second, bystander = FakeHandle("1"), FakeHandle("2"), FakeHandle("3")
        registry.subscribe("project:5", first)
        registry.subscribe("project:5", second)
        registry.subscribe("project:6", bystander)

        delivered = await registry.publish("project:5", {"event": "message:receive"})

        assert delivered == 2
        assert first.events == [{"event": "message:receive"}]
        assert second.events == [{"event": "message:receive"}]
        assert bystander.events == []

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self):
        assert await TopicRegistry().publish("user:404", {"event": "message:receive"}) == 0

    @pytest.mark.asyncio
    async def test_failing_handle_does_not_block_others(self, mocker):
        logger = mocker.patch.object(topics, "logger")
        registry = TopicRegistry()
        healthy, broken = FakeHandle("ok"), BrokenHandle("broken")
        registry.subscribe("user:1", healthy)
        registry.subscribe("user:1", broken)

        delivered = await registry.publish("user:1", {"event": "message:typing"})

        assert delivered == 1
        assert healthy.events == [{"event": "message:typing"}]
        logger.warning.assert_called_once()

    @pytest.mark.asyncio
    async def test_slow_handle_is_dropped_after_timeout(self, mocker):
        logger = mocker.patch.object(topics, "logger")
        registry = TopicRegistry(send_timeout=0.05)
        fast, slow = FakeHandle("fast"), SlowHandle("slow")
        registry.subscribe("user:1", fast)
        registry.subscribe("user:1", slow)

        delivered = await registry.publish("user:1", {"event": "message:receive"})

        assert delivered == 1
        assert fast.events == [{"event": "message:receive"}]
        assert slow.events == []
        assert "timed out" in logger.warning.call_args.args[0]

    @pytest.mark.asyncio
    async def test_dropped_handle_stays_subscribed(self, mocker):
        mocker.patch.object(topics, "logger")
        registry = TopicRegistry()
        broken = BrokenHandle()
        registry.subscribe("user:1", broken)

        await registry.publish("user:1", {"event": "message:receive"})

        assert registry.subscribers("user:1") == [broken]


def test_get_registry_is_a_process_singleton(monkeypatch, settings):
    monkeypatch.setattr(topics, "_registry", None)
    settings.REALTIME_SEND_TIMEOUT_SECONDS = 2.5

    registry = get_registry()

    assert get_registry() is registry
    assert registry.send_timeout == 2.5
