"""
Unit tests for SSE line classification.
"""

import pytest

from stream_http_core import EventKind, classify_line
from stream_http_core.sse import DONE_SENTINEL


class TestClassifyLine:
    """Precedence-ordered classification of single lines."""

    def test_empty_line_discarded(self) -> None:
        assert classify_line(b"") is None

    @pytest.mark.parametrize("payload", [b"hello", b"{\"x\": 1}", b"", b"[DONE] ", b"[done]"])
    def test_data_prefix_stripped(self, payload) -> None:
        """data: lines carry the payload without the prefix."""
        assert classify_line(b"data: " + payload) == (EventKind.DATA, payload)

    def test_done_sentinel(self) -> None:
        """data: [DONE] ends the stream."""
        assert classify_line(b"data: [DONE]") == (EventKind.END_OF_STREAM, DONE_SENTINEL)

    def test_bare_done_is_data(self) -> None:
        """The sentinel only counts after the data: prefix."""
        assert classify_line(b"[DONE]") == (EventKind.DATA, b"[DONE]")

    @pytest.mark.parametrize(
        "line, kind, payload",
        [
            (b"event: update", EventKind.EVENT, b"update"),
            (b"id: 17", EventKind.ID, b"17"),
            (b"retry: 1500", EventKind.RETRY, b"1500"),
        ],
    )
    def test_field_prefixes(self, line, kind, payload) -> None:
        assert classify_line(line) == (kind, payload)

    def test_comment_keeps_full_line(self) -> None:
        assert classify_line(b": keep-alive") == (EventKind.COMMENT, b": keep-alive")
        assert classify_line(b":ping") == (EventKind.COMMENT, b":ping")

    def test_data_prefix_wins_over_comment(self) -> None:
        """A data: line whose payload starts with a colon is still data."""
        assert classify_line(b"data: :not a comment") == (EventKind.DATA, b":not a comment")

    def test_prefix_requires_space(self) -> None:
        """Without the space after the colon a field is passed through verbatim."""
        assert classify_line(b"data:hello") == (EventKind.DATA, b"data:hello")
        assert classify_line(b"event:x") == (EventKind.DATA, b"event:x")

    def test_unknown_line_is_data(self) -> None:
        assert classify_line(b"just some text") == (EventKind.DATA, b"just some text")

    def test_field_payload_keeps_inner_prefixes(self) -> None:
        """Only the first matching prefix is stripped."""
        assert classify_line(b"event: data: x") == (EventKind.EVENT, b"data: x")
