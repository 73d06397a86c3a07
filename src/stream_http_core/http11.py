"""
HTTP/1.1 connection implementation for stream_http_core.

This module implements the HTTP11Connection class that performs one
HTTP/1.1 request/response exchange over a NetworkStream. Connections
are not reused: the connection closes when the response body is
released.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

import h11

from .http_primitives import Request, Response
from .streams import ResponseStream
from .network.stream import NetworkStream
from .exceptions import (
    ConnectionError,
    ProtocolError,
    RequestConstructionError,
    TimeoutError,
)

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """States of an HTTP/1.1 connection."""
    NEW = "new"           # Connection created, not yet used
    ACTIVE = "active"     # Request sent, response being received
    CLOSED = "closed"     # Connection closed, cannot be reused


class HTTP11Connection:
    """
    HTTP/1.1 connection manager.

    Drives an ``h11.Connection`` in client mode over a NetworkStream.
    ``handle_request`` returns once the response head is received; the
    body is pulled chunk by chunk through the response stream.
    """

    # Default configuration
    DEFAULT_READ_TIMEOUT = 30.0  # 30 seconds
    DEFAULT_WRITE_TIMEOUT = 30.0  # 30 seconds
    READ_SIZE = 65536  # 64KB chunks

    def __init__(
        self,
        stream: NetworkStream,
        read_timeout: Optional[float] = None,
        write_timeout: Optional[float] = None,
        body_read_timeout: Optional[float] = None,
    ):
        """
        Initialize HTTP/1.1 connection.

        Args:
            stream: The NetworkStream to use for communication
            read_timeout: Timeout while waiting for the response head
            write_timeout: Timeout for write operations in seconds
            body_read_timeout: Timeout for each body read; None waits forever
        """
        self._stream = stream
        self._h11_connection = h11.Connection(h11.CLIENT)
        self._state = ConnectionState.NEW
        self._state_lock = asyncio.Lock()

        self._read_timeout = read_timeout or self.DEFAULT_READ_TIMEOUT
        self._write_timeout = write_timeout or self.DEFAULT_WRITE_TIMEOUT
        self._body_read_timeout = body_read_timeout

        self._bytes_sent = 0
        self._bytes_received = 0

        logger.debug("HTTP/1.1 connection initialized")

    async def handle_request(self, request: Request) -> Response:
        """
        Send a request and receive the response head.

        Args:
            request: The HTTP request to send

        Returns:
            The HTTP response; its stream yields the body

        Raises:
            ConnectionError: If connection is not available
            RequestConstructionError: If h11 rejects the request
            ProtocolError: If HTTP protocol error occurs
            TimeoutError: If sending or the response head times out
        """
        await self._acquire_connection()

        try:
            await self._send_request(request)
            response = await self._receive_response()
        except BaseException as e:
            logger.debug(f"{request.method.decode()} {request.target} failed: {e!r}")
            await self.close()
            raise

        logger.debug(
            f"{request.method.decode()} {request.target} -> {response.status_code}"
        )
        return response

    async def _send_request(self, request: Request) -> None:
        """
        Send HTTP request using h11.

        Args:
            request: The request to send
        """
        headers = list(request.headers)
        if request.body is not None and not request.has_header(b"content-length"):
            headers.append((b"Content-Length", str(len(request.body)).encode()))

        try:
            h11_request = h11.Request(
                method=request.method,
                target=request.target.encode("ascii"),
                headers=headers,
            )
        except (h11.LocalProtocolError, UnicodeEncodeError) as e:
            raise RequestConstructionError(str(e), cause=e) from e

        await self._send_event(h11_request)

        if request.body:
            await self._send_event(h11.Data(data=request.body))

        await self._send_event(h11.EndOfMessage())

    async def _send_event(self, event: h11.Event) -> None:
        """
        Send an h11 event to the network stream.

        Args:
            event: The h11 event to send
        """
        try:
            data = self._h11_connection.send(event)
        except h11.LocalProtocolError as e:
            raise RequestConstructionError(str(e), cause=e) from e

        if data:
            try:
                await asyncio.wait_for(self._stream.write(data), timeout=self._write_timeout)
            except asyncio.TimeoutError as e:
                raise TimeoutError("write timed out", self._write_timeout) from e
            self._bytes_sent += len(data)

    async def _next_event(self, timeout: Optional[float]) -> h11.Event:
        """Return the next h11 event, reading from the network as needed."""
        while True:
            try:
                event = self._h11_connection.next_event()
            except h11.RemoteProtocolError as e:
                raise ProtocolError(str(e), cause=e) from e

            if event is not h11.NEED_DATA:
                return event

            try:
                data = await asyncio.wait_for(
                    self._stream.read(self.READ_SIZE),
                    timeout=timeout,
                )
            except asyncio.TimeoutError as e:
                raise TimeoutError("read timed out", timeout) from e
            # b"" tells h11 the peer closed; it decides if that is clean
            self._h11_connection.receive_data(data)
            self._bytes_received += len(data)

    async def _receive_response(self) -> Response:
        """
        Receive the response head using h11.

        Returns:
            The HTTP response with streaming body
        """
        while True:
            event = await self._next_event(self._read_timeout)

            if isinstance(event, h11.InformationalResponse):
                continue

            if isinstance(event, h11.Response):
                response_stream = ResponseStream(
                    connection=self,
                    content_length=self._get_content_length(event.headers),
                    chunked=self._is_chunked(event.headers),
                )

                return Response(
                    status_code=event.status_code,
                    headers=list(event.headers),
                    stream=response_stream,
                )

            if isinstance(event, h11.ConnectionClosed):
                raise ProtocolError("Connection closed by server")

            raise ProtocolError(f"Unexpected event before response: {event!r}")

    async def _receive_body_chunk(self) -> Optional[bytes]:
        """
        Receive a chunk of response body.

        Returns:
            Chunk of data or None if end of body
        """
        while True:
            event = await self._next_event(self._body_read_timeout)

            if isinstance(event, h11.Data):
                return bytes(event.data)

            if isinstance(event, h11.EndOfMessage):
                return None

            if isinstance(event, h11.ConnectionClosed):
                raise ProtocolError("Connection closed by server")

    def _get_content_length(self, headers: list) -> Optional[int]:
        """
        Extract Content-Length from headers.

        Args:
            headers: List of (name, value) header tuples

        Returns:
            Content-Length value or None if not present
        """
        for name, value in headers:
            if name.lower() == b"content-length":
                try:
                    return int(value)
                except ValueError:
                    return None
        return None

    def _is_chunked(self, headers: list) -> bool:
        """
        Check if response uses chunked transfer encoding.

        Args:
            headers: List of (name, value) header tuples

        Returns:
            True if chunked transfer encoding is used
        """
        for name, value in headers:
            if name.lower() == b"transfer-encoding" and value.lower() == b"chunked":
                return True
        return False

    async def _acquire_connection(self) -> None:
        """
        Acquire connection for use.

        Raises:
            ConnectionError: If connection is not available
        """
        async with self._state_lock:
            if self._state == ConnectionState.CLOSED:
                raise ConnectionError("Connection is closed")

            if self._state == ConnectionState.ACTIVE:
                raise ConnectionError("Connection is busy")

            self._state = ConnectionState.ACTIVE

    async def close(self) -> None:
        """
        Close the connection and cleanup resources.
        """
        async with self._state_lock:
            if self._state == ConnectionState.CLOSED:
                return
            self._state = ConnectionState.CLOSED
            await self._stream.aclose()

        logger.debug(
            f"Connection closed (sent={self._bytes_sent}, received={self._bytes_received})"
        )

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_closed(self) -> bool:
        """Check if connection is closed."""
        return self._state == ConnectionState.CLOSED

    @property
    def bytes_sent(self) -> int:
        return self._bytes_sent

    @property
    def bytes_received(self) -> int:
        return self._bytes_received
