"""
HTTP client facade for stream_http_core.

HTTPClient resolves each ClientRequest against its configuration, sends
it through the Transport and returns either a buffered ClientResponse or,
for streaming calls, an EventStream fed by a StreamPump.
"""

import logging
from typing import Mapping, Optional

from .builder import build_request_params
from .config import ClientConfig
from .exceptions import ConnectionError, StreamError, limit_body_size
from .models import ClientRequest, ClientResponse
from .network import NetworkBackend
from .pump import EventStream, StreamPump
from .transport import Transport

logger = logging.getLogger(__name__)


class HTTPClient:
    """
    Request/response and Server-Sent Events client.

    Every call opens its own connection. Plain calls read the whole body
    and close the connection before returning. Streaming calls return as
    soon as the response status is known; events then arrive on the
    returned EventStream.

    Example:
        client = HTTPClient(ClientConfig(base_url="https://api.example.com"))
        stream = await client.post_stream(ClientRequest(path="/v1/chat", body=payload))
        async for event in stream:
            ...
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        backend: Optional[NetworkBackend] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration; defaults to ClientConfig()
            backend: Network backend; defaults to asyncio sockets
        """
        self._config = config or ClientConfig()
        self._headers = self._config.default_headers()
        self._transport = Transport(
            backend=backend,
            connect_timeout=self._config.connect_timeout,
            read_timeout=self._config.read_timeout,
            write_timeout=self._config.write_timeout,
            stream_read_timeout=self._config.stream_read_timeout,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def headers(self) -> Mapping[str, str]:
        """Headers sent with every request."""
        return dict(self._headers)

    def set_backend(self, backend: NetworkBackend) -> None:
        """Replace the network backend used for subsequent calls."""
        self._transport.backend = backend

    async def get(self, request: ClientRequest) -> ClientResponse:
        return await self._do("GET", request, None)

    async def post(self, request: ClientRequest) -> ClientResponse:
        return await self._do("POST", request, request.body)

    async def put(self, request: ClientRequest) -> ClientResponse:
        return await self._do("PUT", request, request.body)

    async def patch(self, request: ClientRequest) -> ClientResponse:
        return await self._do("PATCH", request, request.body)

    async def delete(self, request: ClientRequest) -> ClientResponse:
        return await self._do("DELETE", request, None)

    async def get_stream(self, request: ClientRequest) -> EventStream:
        return await self._do_stream("GET", request, None)

    async def post_stream(self, request: ClientRequest) -> EventStream:
        return await self._do_stream("POST", request, request.body)

    async def _do(self, method: str, request: ClientRequest, body: Optional[bytes]) -> ClientResponse:
        """
        Perform a buffered call.

        Raises:
            RequestConstructionError: If the request cannot be built
            ConnectionError: If sending or reading the response fails
        """
        url, headers = build_request_params(self._config.base_url, request, self._headers)

        if self._config.log:
            logger.debug(
                f"request {method} {url} headers={headers} "
                f"body={limit_body_size(body or b'')}"
            )

        response = await self._transport.send(method, url, headers, body)
        try:
            data = await response.aread()
        except StreamError as e:
            raise ConnectionError(f"failed to read response body: {e}", cause=e) from e
        finally:
            await response.aclose()

        if self._config.log:
            logger.debug(
                f"response {method} {url} status={response.status_code} "
                f"body={limit_body_size(data)}"
            )

        return ClientResponse(
            status_code=response.status_code,
            body=data,
            headers=response.header_dict(),
        )

    async def _do_stream(self, method: str, request: ClientRequest, body: Optional[bytes]) -> EventStream:
        """
        Open a Server-Sent Events stream.

        Errors before the status is known raise; everything after is
        delivered as the error of the final END_OF_STREAM event.

        Raises:
            RequestConstructionError: If the request cannot be built
            ConnectionError: If the request could not be sent
        """
        url, headers = build_request_params(self._config.base_url, request, self._headers)

        pump = StreamPump(
            self._transport,
            method,
            url,
            headers,
            body=body,
            channel_size=self._config.channel_size,
            trace=self._config.log,
        )
        return await pump.open()
