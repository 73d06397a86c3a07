"""
Mock network implementations for testing.

This module provides mock implementations of NetworkStream and NetworkBackend
that replay scripted server bytes, so the client can be exercised without
real network connections.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .backend import NetworkBackend
from .stream import NetworkStream


class MockNetworkStream(NetworkStream):
    """
    Mock network stream for testing.

    Reads replay ``chunks`` one at a time (each read returns at most one
    chunk, split further by ``max_bytes``). Once the chunks run out the
    stream either raises ``read_error`` or reports end of stream.
    """

    def __init__(
        self,
        data: Union[bytes, Sequence[bytes]] = b"",
        read_error: Optional[BaseException] = None,
    ):
        """
        Initialize the mock stream.

        Args:
            data: Bytes, or a sequence of chunks, available for reading.
            read_error: Raised by reads after all data has been consumed.
        """
        if isinstance(data, bytes):
            self._chunks: List[bytes] = [data] if data else []
        else:
            self._chunks = [chunk for chunk in data if chunk]
        self._read_error = read_error
        self._closed = False
        self._extra_info: Dict[str, Any] = {}
        self._write_buffer: List[bytes] = []
        self.close_count = 0

    async def read(self, max_bytes: Optional[int] = None) -> bytes:
        if self._closed:
            raise RuntimeError("Stream is closed")

        if not self._chunks:
            if self._read_error is not None:
                raise self._read_error
            return b""

        chunk = self._chunks[0]
        if max_bytes is None or max_bytes >= len(chunk):
            self._chunks.pop(0)
            return chunk

        self._chunks[0] = chunk[max_bytes:]
        return chunk[:max_bytes]

    async def write(self, data: bytes) -> None:
        if self._closed:
            raise RuntimeError("Stream is closed")
        self._write_buffer.append(data)

    async def aclose(self) -> None:
        self.close_count += 1
        self._closed = True

    def get_extra_info(self, name: str) -> Optional[Any]:
        return self._extra_info.get(name)

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def written_data(self) -> bytes:
        """Get all data that was written to the stream."""
        return b"".join(self._write_buffer)

    def set_extra_info(self, name: str, value: Any) -> None:
        self._extra_info[name] = value

    def add_data(self, data: bytes) -> None:
        """Queue another chunk to be returned by a later read."""
        if data:
            self._chunks.append(data)


class MockNetworkBackend(NetworkBackend):
    """
    Mock network backend for testing.

    Every ``connect_tcp`` call pops the next scripted stream, in the order
    they were added with ``add_response``. All handed-out streams are kept
    in ``streams`` so tests can inspect what was written and whether the
    connection was closed.
    """

    def __init__(self, connect_error: Optional[BaseException] = None):
        """
        Initialize the mock backend.

        Args:
            connect_error: If set, every connection attempt raises it.
        """
        self._pending: List[MockNetworkStream] = []
        self._connect_error = connect_error
        self.streams: List[MockNetworkStream] = []
        self.connections: List[Tuple[str, int]] = []
        self.tls_hosts: List[str] = []

    def add_response(
        self,
        data: Union[bytes, Sequence[bytes]],
        read_error: Optional[BaseException] = None,
    ) -> MockNetworkStream:
        """
        Script the server side of the next connection.

        Args:
            data: Raw HTTP response bytes, or a sequence of chunks.
            read_error: Raised once the scripted bytes are exhausted.

        Returns:
            The stream that the next connection will use.
        """
        stream = MockNetworkStream(data, read_error=read_error)
        self._pending.append(stream)
        return stream

    def add_stream(self, stream: MockNetworkStream) -> MockNetworkStream:
        """Use a prepared stream for the next connection."""
        self._pending.append(stream)
        return stream

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> MockNetworkStream:
        if self._connect_error is not None:
            raise self._connect_error
        if not self._pending:
            raise OSError(f"No scripted response for {host}:{port}")

        stream = self._pending.pop(0)
        stream.set_extra_info("peername", (host, port))
        stream.set_extra_info("sockname", ("127.0.0.1", 12345))
        self.connections.append((host, port))
        self.streams.append(stream)
        return stream

    async def connect_tls(
        self,
        stream: NetworkStream,
        host: str,
        port: int,
        timeout: Optional[float] = None,
    ) -> NetworkStream:
        if isinstance(stream, MockNetworkStream):
            stream.set_extra_info("ssl_object", True)
        self.tls_hosts.append(host)
        return stream

    @property
    def last_stream(self) -> Optional[MockNetworkStream]:
        """The most recently connected stream, if any."""
        return self.streams[-1] if self.streams else None
