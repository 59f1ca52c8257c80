"""
Event System for Real-Time Broadcasting

In-process publish/subscribe used by GraphQL subscriptions.

Features:
- Topics named by EventType (only BOOK_ADDED is published today)
- One bounded queue per subscriber, so a slow client never delays
  publishers or other subscribers
- Configurable overflow policy for full queues:
    drop_oldest - discard the oldest undelivered event, keep the new one
    disconnect  - end the slow subscriber's stream
- No replay: a subscriber only sees events published after it started

Usage:
    from library_api.services.events import EventType, get_broadcaster

    # Publisher (never blocks)
    get_broadcaster().publish(EventType.BOOK_ADDED, book)

    # Subscriber
    async for book in get_broadcaster().subscribe(EventType.BOOK_ADDED):
        ...
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from library_api.config import get_settings

logger = logging.getLogger(__name__)


# =============================================================================
# Event Types
# =============================================================================


class EventType(StrEnum):
    """Topics that can be published."""

    BOOK_ADDED = "BOOK_ADDED"


class OverflowPolicy(StrEnum):
    """What happens when a subscriber's queue is full."""

    DROP_OLDEST = "drop_oldest"
    DISCONNECT = "disconnect"


# Placed on a queue to end that subscriber's stream
_DISCONNECT = object()


@dataclass(eq=False)
class Subscriber:
    """
    One live subscription.

    Attributes:
        queue: Undelivered events, oldest first
        dropped: Number of events discarded by the drop_oldest policy
        disconnected: Set once the disconnect policy ended this stream
    """

    queue: asyncio.Queue
    dropped: int = 0
    disconnected: bool = False


# =============================================================================
# Broadcaster
# =============================================================================


class Broadcaster:
    """
    Fans out published payloads to every subscriber of a topic.

    Publishing is synchronous and non-blocking so it can be called from
    sync resolvers running on the event loop. Delivery order per
    subscriber is publish order.
    """

    def __init__(
        self,
        max_queue_size: int = 100,
        overflow_policy: OverflowPolicy | str = OverflowPolicy.DROP_OLDEST,
    ):
        if max_queue_size < 1:
            raise ValueError("max_queue_size must be at least 1")
        self.max_queue_size = max_queue_size
        self.overflow_policy = OverflowPolicy(overflow_policy)
        # Map of topic -> live subscribers
        self._subscribers: dict[str, list[Subscriber]] = {}

    def publish(self, topic: str, payload: Any) -> int:
        """
        Deliver a payload to all current subscribers of a topic.

        Args:
            topic: Topic to publish on
            payload: Object handed to each subscriber as-is

        Returns:
            Number of subscribers the payload was queued for
        """
        delivered = 0

        for subscriber in list(self._subscribers.get(topic, [])):
            if self._offer(topic, subscriber, payload):
                delivered += 1

        logger.debug(f"Published {topic}: {delivered} subscribers")
        return delivered

    def _offer(self, topic: str, subscriber: Subscriber, payload: Any) -> bool:
        """Queue a payload for one subscriber, applying the overflow policy."""
        queue = subscriber.queue

        if queue.full():
            if self.overflow_policy is OverflowPolicy.DISCONNECT:
                logger.warning(
                    f"Subscriber queue full on {topic}, disconnecting subscriber"
                )
                self._disconnect(topic, subscriber)
                return False

            queue.get_nowait()
            subscriber.dropped += 1
            logger.warning(
                f"Subscriber queue full on {topic}, dropped oldest event "
                f"({subscriber.dropped} dropped so far)"
            )

        queue.put_nowait(payload)
        return True

    def _disconnect(self, topic: str, subscriber: Subscriber) -> None:
        """Discard pending events and end the subscriber's stream."""
        while not subscriber.queue.empty():
            subscriber.queue.get_nowait()
        subscriber.disconnected = True
        subscriber.queue.put_nowait(_DISCONNECT)
        self._remove(topic, subscriber)

    def _remove(self, topic: str, subscriber: Subscriber) -> None:
        subscribers = self._subscribers.get(topic)
        if not subscribers or subscriber not in subscribers:
            return

        subscribers.remove(subscriber)
        if not subscribers:
            del self._subscribers[topic]

        logger.info(
            f"Subscriber left {topic} (remaining={self.subscriber_count(topic)})"
        )

    async def subscribe(self, topic: str) -> AsyncGenerator[Any, None]:
        """
        Yield payloads published on a topic, in publish order.

        The subscriber is registered when iteration starts and removed
        when the generator is closed (client disconnect or cancellation).
        """
        subscriber = Subscriber(queue=asyncio.Queue(maxsize=self.max_queue_size))
        self._subscribers.setdefault(topic, []).append(subscriber)
        logger.info(
            f"Subscriber joined {topic} (total={self.subscriber_count(topic)})"
        )

        try:
            while True:
                payload = await subscriber.queue.get()
                if payload is _DISCONNECT:
                    return
                yield payload
        finally:
            self._remove(topic, subscriber)

    def subscriber_count(self, topic: str) -> int:
        """Get the number of live subscribers on a topic."""
        return len(self._subscribers.get(topic, []))

    def get_stats(self) -> dict[str, Any]:
        """Get subscription statistics."""
        return {
            "max_queue_size": self.max_queue_size,
            "overflow_policy": self.overflow_policy.value,
            "topics": {
                topic: len(subscribers)
                for topic, subscribers in self._subscribers.items()
            },
        }


# =============================================================================
# Global Broadcaster Instance
# =============================================================================

_settings = get_settings()

broadcaster = Broadcaster(
    max_queue_size=_settings.subscriber_queue_size,
    overflow_policy=_settings.subscriber_overflow_policy,
)


def get_broadcaster() -> Broadcaster:
    """Get the process-wide broadcaster instance."""
    return broadcaster
