"""Single-producer, single-consumer event channel."""

import asyncio
from collections import deque
from collections.abc import AsyncIterator
from typing import Generic, TypeVar

from ..errors import ChannelClosedError
from ..types import OutputEvent

T = TypeVar("T")


class Channel(Generic[T]):
    """Bounded async channel with an explicit close.

    ``send`` suspends while ``capacity`` items are waiting. After ``close``
    the consumer still drains whatever was sent, then iteration stops.
    """

    def __init__(self, capacity: int = 1):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._items: deque[T] = deque()
        self._closed = False
        self._cond = asyncio.Condition()

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, item: T) -> None:
        async with self._cond:
            await self._cond.wait_for(
                lambda: self._closed or len(self._items) < self._capacity
            )
            if self._closed:
                raise ChannelClosedError("send on closed channel")
            self._items.append(item)
            self._cond.notify_all()

    async def close(self) -> None:
        async with self._cond:
            if self._closed:
                raise ChannelClosedError("close of closed channel")
            self._closed = True
            self._cond.notify_all()

    async def receive(self) -> T:
        """Return the next item.

        Raises:
            ChannelClosedError: Once the channel is closed and drained
        """
        async with self._cond:
            await self._cond.wait_for(lambda: self._closed or bool(self._items))
            if not self._items:
                raise ChannelClosedError()
            item = self._items.popleft()
            self._cond.notify_all()
            return item

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None


EventChannel = Channel[OutputEvent]
