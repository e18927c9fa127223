import threading
from typing import Optional

from proximity.subscriber import Subscriber


class Channel:
    def __init__(self, channel_id: str):
        self.id = channel_id
        self._subscribers: set[Subscriber] = set()

    def __len__(self) -> int:
        return len(self._subscribers)

    def add(self, subscriber: Subscriber) -> None:
        self._subscribers.add(subscriber)

    def discard(self, subscriber: Subscriber) -> None:
        self._subscribers.discard(subscriber)

    def members(self) -> list[Subscriber]:
        return list(self._subscribers)


class ChannelRegistry:
    """Channel id -> Channel map. An empty Channel never stays registered.

    Every method takes ``lock``; it is re-entrant so callers can hold it
    across several registry calls to make them one atomic step.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self._channels: dict[str, Channel] = {}

    def get_or_create(self, channel_id: str) -> Channel:
        with self.lock:
            channel = self._channels.get(channel_id)
            if channel is None:
                channel = self._channels[channel_id] = Channel(channel_id)
            return channel

    def lookup(self, channel_id: str) -> Optional[Channel]:
        with self.lock:
            return self._channels.get(channel_id)

    def remove(self, channel_id: str) -> None:
        with self.lock:
            channel = self._channels.get(channel_id)
            if channel is not None and not len(channel):
                del self._channels[channel_id]

    def snapshot(self) -> list[tuple[str, int]]:
        with self.lock:
            return [(channel_id, len(channel)) for channel_id, channel in self._channels.items()]

    def drain(self) -> list[Channel]:
        """Unregisters every channel and returns them."""
        with self.lock:
            channels = list(self._channels.values())
            self._channels.clear()
            return channels
