"""
Single-producer, single-consumer event channel.

The producer sends and finally closes; the consumer iterates until the
channel is closed and drained.
"""

import asyncio
from typing import Generic, TypeVar

from .exceptions import ChannelClosedError

T = TypeVar("T")

_CLOSED = object()


class EventChannel(Generic[T]):
    """
    FIFO conduit between a stream pump and its consumer.

    ``maxsize`` 0 makes the channel unbounded; otherwise ``send`` waits
    while the channel is full. Closing is a one-time operation: closing
    again, or sending after close, raises ChannelClosedError.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: asyncio.Queue = asyncio.Queue(maxsize)
        self._closed = False

    async def send(self, item: T) -> None:
        if self._closed:
            raise ChannelClosedError("send on closed channel")
        await self._queue.put(item)

    def close(self) -> None:
        if self._closed:
            raise ChannelClosedError("close of closed channel")
        self._closed = True
        # A full queue has no waiting receiver; receive() checks the flag
        # once it has drained the queue
        if not self._queue.full():
            self._queue.put_nowait(_CLOSED)

    async def receive(self) -> T:
        """
        Return the next item.

        Raises:
            ChannelClosedError: Once the channel is closed and drained
        """
        if self._closed and self._queue.empty():
            raise ChannelClosedError("channel is closed")

        item = await self._queue.get()
        if item is _CLOSED:
            raise ChannelClosedError("channel is closed")
        return item

    def __aiter__(self) -> "EventChannel[T]":
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def maxsize(self) -> int:
        return self._queue.maxsize

