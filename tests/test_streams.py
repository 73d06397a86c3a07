"""
Unit tests for response body streaming.

Tests ResponseStream against a mocked connection to check chunk
delivery, content-length validation and connection release.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from stream_http_core.exceptions import ProtocolError, StreamError
from stream_http_core.streams import ResponseStream


def mock_connection(*chunks):
    """Connection whose body reads return ``chunks`` in order."""
    connection = AsyncMock()
    connection._receive_body_chunk.side_effect = list(chunks)
    return connection


class TestResponseStream:
    """Test ResponseStream class functionality."""

    @pytest.mark.asyncio
    async def test_create_basic(self) -> None:
        stream = ResponseStream(mock_connection())

        assert stream.content_length is None
        assert stream.chunked is False
        assert stream.closed is False
        assert stream.bytes_read == 0

    @pytest.mark.asyncio
    async def test_create_with_options(self) -> None:
        stream = ResponseStream(mock_connection(), content_length=13, chunked=True)

        assert stream.content_length == 13
        assert stream.chunked is True

    def test_negative_content_length(self) -> None:
        with pytest.raises(ValueError, match="content_length must be non-negative"):
            ResponseStream(mock_connection(), content_length=-1)

    @pytest.mark.asyncio
    async def test_iteration(self) -> None:
        """Chunks arrive in order; the connection closes once the body ends."""
        connection = mock_connection(b"Hello", b", ", b"World", b"!", None)
        stream = ResponseStream(connection)

        chunks = [chunk async for chunk in stream]

        assert chunks == [b"Hello", b", ", b"World", b"!"]
        assert stream.bytes_read == 13
        assert stream.closed
        connection.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_aread(self) -> None:
        connection = mock_connection(b"Hello", b", World!", None)
        stream = ResponseStream(connection)

        assert await stream.aread() == b"Hello, World!"
        connection.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_iteration_after_exhaustion(self) -> None:
        stream = ResponseStream(mock_connection(b"x", None))
        await stream.aread()

        assert [chunk async for chunk in stream] == []

    @pytest.mark.asyncio
    async def test_content_length_validation(self) -> None:
        connection = mock_connection(b"Hello", b", World!", None)
        stream = ResponseStream(connection, content_length=5)

        with pytest.raises(StreamError, match="Read more bytes"):
            async for _ in stream:
                pass

        connection.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_aclose(self) -> None:
        connection = mock_connection(b"unread", None)
        stream = ResponseStream(connection)

        await stream.aclose()
        await stream.aclose()

        assert stream.closed is True
        connection.close.assert_awaited_once()
        connection._receive_body_chunk.assert_not_awaited()

        with pytest.raises(StreamError, match="Cannot iterate over closed stream"):
            async for _ in stream:
                pass
        with pytest.raises(StreamError, match="Cannot read from closed stream"):
            await stream.aread()

    @pytest.mark.asyncio
    async def test_aclose_early(self) -> None:
        connection = mock_connection(b"Hello", b", ", b"World", None)
        stream = ResponseStream(connection)

        async for chunk in stream:
            if chunk == b", ":
                await stream.aclose()
                break

        assert stream.closed is True
        connection.close.assert_awaited_once()


class TestResponseStreamErrors:
    """Read failures become StreamError and release the connection."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            ProtocolError("incomplete chunked read"),
            ConnectionResetError("reset"),
            RuntimeError("Stream is closed"),
            asyncio.TimeoutError(),
        ],
    )
    async def test_error_during_iteration(self, error) -> None:
        connection = mock_connection(b"Hello", error)
        stream = ResponseStream(connection)

        chunks = []
        with pytest.raises(StreamError, match="Error reading from stream") as exc_info:
            async for chunk in stream:
                chunks.append(chunk)

        assert chunks == [b"Hello"]
        assert exc_info.value.cause is error
        assert stream.closed
        connection.close.assert_awaited_once()
