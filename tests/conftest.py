"""
Pytest configuration for stream_http_core tests.

This file contains shared fixtures and helpers that script raw
HTTP/1.1 responses for the mock network backend.
"""

import asyncio
from typing import List, Optional, Sequence, Tuple

import pytest

from stream_http_core import ClientConfig, HTTPClient
from stream_http_core.network.mock import MockNetworkBackend, MockNetworkStream


REASONS = {200: b"OK", 201: b"Created", 404: b"Not Found", 500: b"Internal Server Error"}


def build_response(
    status: int = 200,
    body: bytes = b"",
    headers: Optional[List[Tuple[bytes, bytes]]] = None,
) -> bytes:
    """Raw HTTP/1.1 response with a Content-Length body."""
    head = [b"HTTP/1.1 %d %s" % (status, REASONS.get(status, b"Status"))]
    for name, value in headers or []:
        head.append(name + b": " + value)
    head.append(b"Content-Length: %d" % len(body))
    return b"\r\n".join(head) + b"\r\n\r\n" + body


def build_chunked_response(
    chunks: Sequence[bytes],
    status: int = 200,
    headers: Optional[List[Tuple[bytes, bytes]]] = None,
    terminate: bool = True,
) -> bytes:
    """Raw HTTP/1.1 response with a chunked body; ``terminate`` adds the last chunk."""
    head = [b"HTTP/1.1 %d %s" % (status, REASONS.get(status, b"Status"))]
    for name, value in headers or []:
        head.append(name + b": " + value)
    head.append(b"Transfer-Encoding: chunked")
    body = b"".join(b"%x\r\n%s\r\n" % (len(chunk), chunk) for chunk in chunks)
    if terminate:
        body += b"0\r\n\r\n"
    return b"\r\n".join(head) + b"\r\n\r\n" + body


def sse_response(lines: Sequence[bytes], terminate: bool = True) -> bytes:
    """Chunked text/event-stream response, one chunk per line."""
    return build_chunked_response(
        list(lines),
        headers=[(b"Content-Type", b"text/event-stream")],
        terminate=terminate,
    )


class HangingNetworkStream(MockNetworkStream):
    """Mock stream whose reads block forever once the scripted data is used up."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(data)
        self._never = asyncio.Event()

    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        if not self._chunks and not self._closed:
            await self._never.wait()
        return await super().read(max_bytes)


async def collect(stream) -> list:
    """Drain an EventStream into a list."""
    return [event async for event in stream]


@pytest.fixture
def backend():
    """A fresh mock backend."""
    return MockNetworkBackend()


@pytest.fixture
def client(backend):
    """Client pointed at a fake API host, using the mock backend."""
    config = ClientConfig(base_url="http://api.example.com/v1", channel_size=8)
    return HTTPClient(config, backend=backend)
