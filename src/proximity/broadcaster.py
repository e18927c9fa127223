"""In-process pub/sub for position updates.

Subscribers attach to a named channel and receive every event published to
that channel while they are attached. Nothing is persisted or replayed:
an event published to a channel nobody listens to is simply dropped.
"""

import asyncio
from collections.abc import AsyncIterator
from collections.abc import Awaitable
from collections.abc import Callable
import logging
from typing import Optional

from proximity.channels import ChannelRegistry
from proximity.errors import InvalidInput
from proximity.schemas import BroadcastEvent
from proximity.schemas import ChannelInfo
from proximity.subscriber import Subscriber
from proximity.utils import KEEPALIVE_FRAME
from proximity.utils import sse_frame
from proximity.utils import utc_timestamp

logger = logging.getLogger("proximity.broadcast")


class Broadcaster:
    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._registry = ChannelRegistry()

    async def subscribe(self, channel_id: str) -> Subscriber:
        """Attaches a new subscriber and queues its welcome frame."""
        subscriber = Subscriber(channel_id, max_pending=self.queue_size)

        with self._registry.lock:
            channel = self._registry.get_or_create(channel_id)
            channel.add(subscriber)
            count = len(channel)
            # Queued under the lock so no position frame can precede it
            subscriber.open(
                sse_frame(
                    "connected",
                    {
                        "channelId": channel_id,
                        "subscriberCount": count,
                        "timestamp": utc_timestamp(),
                    },
                )
            )

        logger.info(f"[{channel_id}] subscriber {subscriber.id} attached ({count} listening)")
        return subscriber

    def unsubscribe(self, subscriber: Subscriber) -> bool:
        """Detaches a subscriber; only the first call for a subscriber has any effect."""
        with self._registry.lock:
            if not subscriber.detach():
                return False
            channel = self._registry.lookup(subscriber.channel_id)
            remaining = 0
            if channel is not None:
                channel.discard(subscriber)
                remaining = len(channel)
                self._registry.remove(subscriber.channel_id)

        logger.info(
            f"[{subscriber.channel_id}] subscriber {subscriber.id} detached ({remaining} listening)"
        )
        return True

    async def publish(self, channel_id: str, event: BroadcastEvent) -> int:
        """Fans an event out to the channel's current subscribers.

        Returns the number of subscribers attached when the event was
        published, including any that rejected it and were dropped.
        """
        if not channel_id:
            raise InvalidInput('"channelId" is required')
        if not event.profile_id or event.location is None:
            raise InvalidInput('"profileId" and "location" are required')

        frame = sse_frame("position", event.to_wire())

        with self._registry.lock:
            channel = self._registry.lookup(channel_id)
            if channel is None:
                return 0

            subscribers = channel.members()
            rejected = [s for s in subscribers if not s.push(frame)]
            for subscriber in rejected:
                if self.unsubscribe(subscriber):
                    logger.warning(
                        f"[{channel_id}] subscriber {subscriber.id} rejected a frame and was dropped"
                    )

        return len(subscribers)

    def channels(self) -> list[ChannelInfo]:
        return [
            ChannelInfo(channel_id=channel_id, subscriber_count=count)
            for channel_id, count in self._registry.snapshot()
        ]

    async def stream(
        self,
        channel_id: str,
        keepalive: Optional[float] = None,
        is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
    ) -> AsyncIterator[bytes]:
        """Attaches to a channel and yields its frames until detached.

        The subscriber is detached however the iteration ends: client
        disconnect, cancellation, a rejected push, or shutdown.
        """
        subscriber = await self.subscribe(channel_id)
        try:
            while True:
                if is_disconnected is not None and await is_disconnected():
                    break
                try:
                    frame = await subscriber.next_frame(timeout=keepalive)
                except asyncio.TimeoutError:
                    yield KEEPALIVE_FRAME
                    continue
                if frame is None:
                    break
                yield frame
        finally:
            self.unsubscribe(subscriber)

    def close(self) -> int:
        """Detaches every subscriber and forgets all channels."""
        closed = 0
        with self._registry.lock:
            for channel in self._registry.drain():
                for subscriber in channel.members():
                    channel.discard(subscriber)
                    if subscriber.detach():
                        closed += 1
        logger.info(f"Broadcaster closed, {closed} open stream(s) ended")
        return closed
