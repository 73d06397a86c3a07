"""
Incremental line reading over an async byte stream.
"""

import asyncio
from typing import AsyncIterator, Optional

from .exceptions import HTTPCoreError, StreamEnded, StreamReadError


class LineReader:
    """
    Read newline-delimited lines from an async iterator of byte chunks.

    ``read_line`` returns the next line with the delimiter and any
    surrounding whitespace removed. The end of the source raises
    ``StreamEnded``; a failing source raises ``StreamReadError``. Both
    are terminal: every later call raises the same exception again.

    A trailing fragment without a final newline is returned as a line
    before ``StreamEnded``.
    """

    DELIMITER = b"\n"

    def __init__(self, source: AsyncIterator[bytes]) -> None:
        self._source = source.__aiter__()
        self._buffer = bytearray()
        self._terminal: Optional[Exception] = None

    async def read_line(self) -> bytes:
        while True:
            index = self._buffer.find(self.DELIMITER)
            if index >= 0:
                line = bytes(self._buffer[:index])
                del self._buffer[:index + 1]
                return line.strip()

            if self._terminal is not None:
                if self._buffer:
                    line = bytes(self._buffer)
                    self._buffer.clear()
                    return line.strip()
                raise self._terminal

            await self._fill()

    async def _fill(self) -> None:
        try:
            chunk = await self._source.__anext__()
        except StopAsyncIteration:
            self._terminal = StreamEnded()
        except (HTTPCoreError, OSError, asyncio.TimeoutError) as e:
            self._terminal = StreamReadError(f"failed to read response body: {e}", cause=e)
        else:
            self._buffer.extend(chunk)

    def __aiter__(self) -> "LineReader":
        return self

    async def __anext__(self) -> bytes:
        """Yield lines until the source ends; read failures propagate."""
        try:
            return await self.read_line()
        except StreamEnded:
            raise StopAsyncIteration
