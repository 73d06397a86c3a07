"""
Response body streaming for stream_http_core.

This module provides the ResponseStream handed out with every Response.
Consumption drives reading from the network: nothing is read until the
caller asks for the next chunk.
"""

import asyncio
from typing import TYPE_CHECKING, Optional

from .exceptions import HTTPCoreError, StreamError

if TYPE_CHECKING:
    from .http11 import HTTP11Connection  # Forward reference


class ResponseStream:
    """
    Stream for HTTP response bodies.

    Iterating yields body chunks until the message ends. The underlying
    connection is closed when the body is exhausted, when a read fails,
    or when ``aclose`` is called, whichever happens first.
    """

    def __init__(
        self,
        connection: "HTTP11Connection",
        content_length: Optional[int] = None,
        chunked: bool = False,
    ) -> None:
        """
        Initialize ResponseStream.

        Args:
            connection: The HTTP11Connection that owns this stream
            content_length: Optional content length for validation
            chunked: Whether response uses chunked transfer encoding
        """
        if content_length is not None and content_length < 0:
            raise ValueError("content_length must be non-negative")

        self._connection = connection
        self._content_length = content_length
        self._chunked = chunked
        self._closed = False
        self._exhausted = False
        self._bytes_read = 0

    def __aiter__(self) -> "ResponseStream":
        """Return self as async iterator."""
        if self._closed and not self._exhausted:
            raise StreamError("Cannot iterate over closed stream")
        return self

    async def __anext__(self) -> bytes:
        """Get next chunk of data."""
        if self._exhausted:
            raise StopAsyncIteration

        if self._closed:
            raise StreamError("Cannot read from closed stream")

        try:
            chunk = await self._connection._receive_body_chunk()
        except (HTTPCoreError, OSError, RuntimeError, asyncio.TimeoutError) as e:
            await self.aclose()
            raise StreamError(f"Error reading from stream: {e}", cause=e) from e

        if chunk is None:
            self._exhausted = True
            await self.aclose()
            raise StopAsyncIteration

        self._bytes_read += len(chunk)
        if self._content_length is not None and self._bytes_read > self._content_length:
            await self.aclose()
            raise StreamError(
                f"Read more bytes ({self._bytes_read}) than "
                f"content_length ({self._content_length})"
            )

        return chunk

    async def aread(self) -> bytes:
        """Read entire stream and return as bytes."""
        if self._closed and not self._exhausted:
            raise StreamError("Cannot read from closed stream")

        chunks = []
        async for chunk in self:
            chunks.append(chunk)

        return b"".join(chunks)

    async def aclose(self) -> None:
        """Close the stream and the connection behind it."""
        if not self._closed:
            self._closed = True
            await self._connection.close()

    @property
    def content_length(self) -> Optional[int]:
        return self._content_length

    @property
    def chunked(self) -> bool:
        return self._chunked

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def bytes_read(self) -> int:
        return self._bytes_read
