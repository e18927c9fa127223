import asyncio
from enum import Enum
from typing import Optional
from uuid import uuid4


class SubscriberState(str, Enum):
    ATTACHING = "attaching"
    OPEN = "open"
    DETACHED = "detached"


class Subscriber:
    """One open stream on a channel.

    Frames are queued until the owning stream reads them. ``push`` is the
    send primitive: it returns False instead of raising when the frame is
    rejected, which happens once the subscriber is detached or when it has
    ``max_pending`` frames still unread.
    """

    def __init__(self, channel_id: str, max_pending: int = 100):
        self.id = uuid4().hex[:12]
        self.channel_id = channel_id
        self.state = SubscriberState.ATTACHING
        self.max_pending = max_pending
        # None marks the end of the stream
        self._frames: asyncio.Queue[Optional[bytes]] = asyncio.Queue()

    def __repr__(self) -> str:
        return f"<Subscriber {self.id} channel={self.channel_id!r} state={self.state.value}>"

    @property
    def pending(self) -> int:
        return self._frames.qsize()

    def open(self, welcome: bytes) -> None:
        if self.state is not SubscriberState.ATTACHING:
            raise RuntimeError(f"cannot open subscriber in state {self.state.value}")
        self.state = SubscriberState.OPEN
        self._frames.put_nowait(welcome)

    def push(self, frame: bytes) -> bool:
        if self.state is not SubscriberState.OPEN:
            return False
        if self._frames.qsize() >= self.max_pending:
            return False
        self._frames.put_nowait(frame)
        return True

    def detach(self) -> bool:
        """Moves to DETACHED. Returns False if it already was."""
        if self.state is SubscriberState.DETACHED:
            return False
        self.state = SubscriberState.DETACHED
        self._frames.put_nowait(None)
        return True

    async def next_frame(self, timeout: Optional[float] = None) -> Optional[bytes]:
        """Next queued frame, or None once the stream has ended.

        Raises asyncio.TimeoutError when nothing arrives within ``timeout``.
        """
        return await asyncio.wait_for(self._frames.get(), timeout=timeout)
