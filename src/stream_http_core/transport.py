"""
Transport sender for stream_http_core.

The Transport opens one connection per request through a NetworkBackend,
sends the request over HTTP/1.1 and hands back the response with its
body still on the wire.
"""

import asyncio
import logging
import re
from typing import Mapping, Optional

from .exceptions import (
    ConnectionError,
    HTTPCoreError,
    RequestConstructionError,
)
from .http11 import HTTP11Connection
from .http_primitives import Request, Response
from .network import AsyncioNetworkBackend, NetworkBackend, NetworkStream
from .network.utils import format_host_header, parse_url

logger = logging.getLogger(__name__)

# RFC 9110 token
_METHOD_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


class Transport:
    """
    Sends single HTTP requests.

    Nothing is retried: every failure is raised to the caller, who owns
    any retry policy.
    """

    DEFAULT_CONNECT_TIMEOUT = 10.0

    def __init__(
        self,
        backend: Optional[NetworkBackend] = None,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        write_timeout: Optional[float] = None,
        stream_read_timeout: Optional[float] = None,
    ):
        """
        Initialize the transport.

        Args:
            backend: Network backend; defaults to AsyncioNetworkBackend
            connect_timeout: Timeout for TCP connect and TLS handshake
            read_timeout: Timeout for the response head and buffered bodies
            write_timeout: Timeout for each write
            stream_read_timeout: Timeout between chunks of a streamed body;
                                 None waits forever
        """
        self._backend = backend or AsyncioNetworkBackend()
        self._connect_timeout = connect_timeout or self.DEFAULT_CONNECT_TIMEOUT
        self._read_timeout = read_timeout
        self._write_timeout = write_timeout
        self._stream_read_timeout = stream_read_timeout

    @property
    def backend(self) -> NetworkBackend:
        return self._backend

    @backend.setter
    def backend(self, backend: NetworkBackend) -> None:
        self._backend = backend

    def build_request(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes] = None,
    ) -> Request:
        """
        Validate and assemble the wire request.

        Raises:
            RequestConstructionError: On an invalid method, URL or header
        """
        if not _METHOD_RE.fullmatch(method):
            raise RequestConstructionError(f"invalid method: {method!r}")

        try:
            target = parse_url(url)
        except ValueError as e:
            raise RequestConstructionError(f"invalid URL {url!r}: {e}", cause=e) from e

        merged = dict(headers)
        if not any(name.lower() == "host" for name in merged):
            merged = {"Host": format_host_header(target.host, target.port, target.scheme), **merged}

        try:
            return Request.create(method, target, headers=merged, body=body)
        except (UnicodeEncodeError, ValueError) as e:
            raise RequestConstructionError(f"invalid request: {e}", cause=e) from e

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes] = None,
        stream: bool = False,
    ) -> Response:
        """
        Send one request and return once the response head has arrived.

        Args:
            method: HTTP method
            url: Absolute http(s) URL
            headers: Request headers; Host is added when missing
            body: Optional request body
            stream: Whether the body will be streamed, which selects the
                    stream read timeout for body reads

        Returns:
            Response whose stream must be read or closed by the caller

        Raises:
            RequestConstructionError: If the request is invalid
            ConnectionError: If connecting or sending fails
        """
        request = self.build_request(method, url, headers, body)
        network_stream = await self._connect(request)

        connection = HTTP11Connection(
            network_stream,
            read_timeout=self._read_timeout,
            write_timeout=self._write_timeout,
            body_read_timeout=self._stream_read_timeout if stream else self._read_timeout,
        )

        try:
            return await connection.handle_request(request)
        except RequestConstructionError:
            raise
        except (HTTPCoreError, OSError, RuntimeError, asyncio.TimeoutError) as e:
            raise ConnectionError(f"failed to send request: {e!r}", cause=e) from e

    async def _connect(self, request: Request) -> NetworkStream:
        """Open a TCP (and, for https, TLS) connection for the request."""
        try:
            stream = await self._backend.connect_tcp(
                request.host, request.port, timeout=self._connect_timeout
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise ConnectionError(
                f"failed to connect to {request.host}:{request.port}: {e!r}", cause=e
            ) from e

        if request.scheme != "https":
            return stream

        try:
            return await self._backend.connect_tls(
                stream, request.host, request.port, timeout=self._connect_timeout
            )
        except (OSError, asyncio.TimeoutError) as e:
            await stream.aclose()
            raise ConnectionError(
                f"TLS handshake with {request.host} failed: {e!r}", cause=e
            ) from e
