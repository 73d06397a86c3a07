"""
Unit tests for the line reader.
"""

import pytest

from stream_http_core import LineReader, StreamEnded, StreamReadError
from stream_http_core.exceptions import StreamError


async def chunks(*data, error=None):
    for chunk in data:
        yield chunk
    if error is not None:
        raise error


class TestLineReader:
    """LineReader over async byte sources."""

    @pytest.mark.asyncio
    async def test_reads_lines_in_order(self) -> None:
        reader = LineReader(chunks(b"one\ntwo\n", b"three\n"))

        assert await reader.read_line() == b"one"
        assert await reader.read_line() == b"two"
        assert await reader.read_line() == b"three"

    @pytest.mark.asyncio
    async def test_lines_are_trimmed(self) -> None:
        """Surrounding whitespace and CR are removed."""
        reader = LineReader(chunks(b"  data: x  \r\n\t\n"))

        assert await reader.read_line() == b"data: x"
        assert await reader.read_line() == b""

    @pytest.mark.asyncio
    async def test_line_split_across_chunks(self) -> None:
        reader = LineReader(chunks(b"da", b"ta: he", b"llo", b"\n"))

        assert await reader.read_line() == b"data: hello"

    @pytest.mark.asyncio
    async def test_clean_end(self) -> None:
        """End of the source raises StreamEnded, again on every later call."""
        reader = LineReader(chunks(b"last\n"))

        assert await reader.read_line() == b"last"
        with pytest.raises(StreamEnded):
            await reader.read_line()
        with pytest.raises(StreamEnded):
            await reader.read_line()

    @pytest.mark.asyncio
    async def test_trailing_fragment_returned_before_end(self) -> None:
        """Bytes after the last newline are returned as a final line."""
        reader = LineReader(chunks(b"first\nsecond"))

        assert await reader.read_line() == b"first"
        assert await reader.read_line() == b"second"
        with pytest.raises(StreamEnded):
            await reader.read_line()

    @pytest.mark.asyncio
    async def test_read_failure(self) -> None:
        """A failing source raises StreamReadError, distinct from StreamEnded."""
        reader = LineReader(chunks(b"ok\n", error=ConnectionResetError("reset")))

        assert await reader.read_line() == b"ok"
        with pytest.raises(StreamReadError) as exc_info:
            await reader.read_line()

        assert not isinstance(exc_info.value, StreamEnded)
        assert isinstance(exc_info.value.cause, ConnectionResetError)

    @pytest.mark.asyncio
    async def test_stream_error_from_source(self) -> None:
        reader = LineReader(chunks(error=StreamError("boom")))

        with pytest.raises(StreamReadError):
            await reader.read_line()

    @pytest.mark.asyncio
    async def test_async_iteration(self) -> None:
        """Iterating stops at a clean end."""
        reader = LineReader(chunks(b"a\nb\n", b"c"))

        assert [line async for line in reader] == [b"a", b"b", b"c"]

    @pytest.mark.asyncio
    async def test_async_iteration_propagates_failure(self) -> None:
        reader = LineReader(chunks(b"a\n", error=OSError("gone")))

        lines = []
        with pytest.raises(StreamReadError):
            async for line in reader:
                lines.append(line)

        assert lines == [b"a"]
