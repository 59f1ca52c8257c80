"""
Event System Tests

Tests for the in-process broadcaster behind GraphQL subscriptions:
- Delivery to every subscriber, in publish order
- No replay of events published before subscribing
- drop_oldest and disconnect overflow policies
- Subscriber cleanup on close and cancellation
"""

import asyncio

import pytest

from library_api.services.events import (
    Broadcaster,
    EventType,
    OverflowPolicy,
    get_broadcaster,
)

TOPIC = EventType.BOOK_ADDED


async def collect(stream, count: int) -> list:
    """Read up to ``count`` events from a subscription, then close it."""
    received = []
    try:
        async for payload in stream:
            received.append(payload)
            if len(received) == count:
                break
    finally:
        await stream.aclose()
    return received


async def start(broadcaster: Broadcaster, count: int) -> asyncio.Task:
    """Start a subscriber task and let it register before returning."""
    task = asyncio.create_task(collect(broadcaster.subscribe(TOPIC), count))
    await asyncio.sleep(0)
    return task


class TestBroadcaster:
    """Tests for Broadcaster delivery."""

    def test_publish_without_subscribers(self):
        broadcaster = Broadcaster()

        assert broadcaster.publish(TOPIC, "book") == 0
        assert broadcaster.subscriber_count(TOPIC) == 0

    def test_rejects_invalid_configuration(self):
        with pytest.raises(ValueError):
            Broadcaster(max_queue_size=0)

        with pytest.raises(ValueError):
            Broadcaster(overflow_policy="block")

    @pytest.mark.asyncio
    async def test_delivers_in_publish_order(self):
        broadcaster = Broadcaster()
        task = await start(broadcaster, 3)

        assert broadcaster.subscriber_count(TOPIC) == 1

        for payload in ("first", "second", "third"):
            broadcaster.publish(TOPIC, payload)

        assert await task == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_every_subscriber_receives(self):
        broadcaster = Broadcaster()
        first = await start(broadcaster, 1)
        second = await start(broadcaster, 1)

        assert broadcaster.publish(TOPIC, "book") == 2
        assert await first == ["book"]
        assert await second == ["book"]

    @pytest.mark.asyncio
    async def test_no_replay(self):
        broadcaster = Broadcaster()
        broadcaster.publish(TOPIC, "old")

        task = await start(broadcaster, 1)
        broadcaster.publish(TOPIC, "new")

        assert await task == ["new"]

    @pytest.mark.asyncio
    async def test_topics_are_independent(self):
        broadcaster = Broadcaster()
        task = await start(broadcaster, 1)

        assert broadcaster.publish("OTHER", "ignored") == 0
        broadcaster.publish(TOPIC, "book")

        assert await task == ["book"]


class TestOverflow:
    """Tests for full subscriber queues."""

    @pytest.mark.asyncio
    async def test_drop_oldest(self):
        broadcaster = Broadcaster(
            max_queue_size=2,
            overflow_policy=OverflowPolicy.DROP_OLDEST,
        )
        task = await start(broadcaster, 2)

        # No await between publishes, so the subscriber cannot drain
        for payload in (1, 2, 3):
            assert broadcaster.publish(TOPIC, payload) == 1

        assert await task == [2, 3]

    @pytest.mark.asyncio
    async def test_disconnect(self):
        broadcaster = Broadcaster(
            max_queue_size=1,
            overflow_policy=OverflowPolicy.DISCONNECT,
        )
        task = await start(broadcaster, 5)

        assert broadcaster.publish(TOPIC, 1) == 1
        assert broadcaster.publish(TOPIC, 2) == 0
        assert broadcaster.subscriber_count(TOPIC) == 0

        # The stream ends without delivering the pending events
        assert await task == []

    @pytest.mark.asyncio
    async def test_disconnect_spares_other_subscribers(self):
        broadcaster = Broadcaster(
            max_queue_size=2,
            overflow_policy="disconnect",
        )
        slow = broadcaster.subscribe(TOPIC)
        first = asyncio.ensure_future(slow.__anext__())
        await asyncio.sleep(0)
        fast = await start(broadcaster, 4)

        broadcaster.publish(TOPIC, 1)
        assert await first == 1
        await asyncio.sleep(0)

        # The slow stream stops reading; its queue fills up
        broadcaster.publish(TOPIC, 2)
        broadcaster.publish(TOPIC, 3)
        await asyncio.sleep(0)

        assert broadcaster.publish(TOPIC, 4) == 1
        assert broadcaster.subscriber_count(TOPIC) == 1
        assert await fast == [1, 2, 3, 4]

        with pytest.raises(StopAsyncIteration):
            await slow.__anext__()


class TestCleanup:
    """Tests for subscriber removal."""

    @pytest.mark.asyncio
    async def test_closed_stream_is_removed(self):
        broadcaster = Broadcaster()
        task = await start(broadcaster, 1)
        broadcaster.publish(TOPIC, "book")
        await task

        assert broadcaster.subscriber_count(TOPIC) == 0
        assert broadcaster.get_stats()["topics"] == {}

    @pytest.mark.asyncio
    async def test_cancelled_stream_is_removed(self):
        broadcaster = Broadcaster()
        task = await start(broadcaster, 1)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert broadcaster.subscriber_count(TOPIC) == 0


class TestGlobalBroadcaster:
    """Tests for the process-wide instance."""

    def test_get_broadcaster_returns_singleton(self):
        assert get_broadcaster() is get_broadcaster()

    def test_configured_from_settings(self):
        stats = get_broadcaster().get_stats()

        assert stats["max_queue_size"] == 100
        assert stats["overflow_policy"] == "drop_oldest"
