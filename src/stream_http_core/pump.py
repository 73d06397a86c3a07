"""
Stream pump for Server-Sent Events responses.

A StreamPump opens one streaming request, validates the status and then
runs a background task that reads lines, classifies them and sends typed
events to an EventChannel. The pump is the only writer of the channel
and closes it exactly once, on every way out.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, Mapping, Optional

from .channel import EventChannel
from .exceptions import StreamEnded, StreamError, StreamReadError, UnexpectedStatus, limit_body_size
from .http_primitives import Response
from .lines import LineReader
from .models import EventKind, StreamEvent
from .sse import classify_line
from .transport import Transport

logger = logging.getLogger(__name__)


SUCCESS_STATUS = 200

# Forced on every stream request, replacing caller values
STREAM_HEADERS = {
    "Accept": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def force_stream_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Return headers with the stream headers set, case-insensitively."""
    forced = {name.lower() for name in STREAM_HEADERS}
    merged = {name: value for name, value in headers.items() if name.lower() not in forced}
    merged.update(STREAM_HEADERS)
    return merged


class PumpState(Enum):
    """States of a stream pump."""
    OPENING = "opening"
    STREAMING = "streaming"
    CLOSED = "closed"


class EventStream:
    """
    Handle returned by a streaming call.

    Iterate it to receive StreamEvents; iteration ends when the pump
    closes the channel. The last event received is always an
    END_OF_STREAM event whose ``error`` tells a clean end from a failure.
    ``aclose`` stops the pump early and releases the connection.
    """

    def __init__(
        self,
        channel: EventChannel[StreamEvent],
        task: Optional[asyncio.Task] = None,
        released: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        self._channel = channel
        self._task = task
        self._released = released

    @property
    def channel(self) -> EventChannel[StreamEvent]:
        return self._channel

    @property
    def done(self) -> bool:
        return self._task is None or self._task.done()

    def __aiter__(self) -> EventChannel[StreamEvent]:
        return self._channel.__aiter__()

    async def aclose(self) -> None:
        """
        Cancel the pump and wait until it has released the connection.

        Cancelling the task that awaits ``aclose`` still cancels it.
        """
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise
        await self._wait_released()

    async def wait_closed(self) -> None:
        """Wait for the pump to finish; re-raises anything it failed with."""
        if self._task is not None:
            await self._task
        await self._wait_released()

    async def _wait_released(self) -> None:
        if self._released is not None:
            await self._released()

    async def __aenter__(self) -> "EventStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


class StreamPump:
    """
    Owns one streaming call from request to channel close.

    ``open`` runs until the response status is known. For a success it
    starts the read loop as a task and returns; for any other status it
    delivers a single END_OF_STREAM event carrying the error body before
    returning.
    """

    DEFAULT_CHANNEL_SIZE = 64

    def __init__(
        self,
        transport: Transport,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes] = None,
        channel_size: Optional[int] = None,
        trace: bool = False,
    ):
        """
        Initialize the pump.

        Args:
            transport: Transport used to send the request
            method: HTTP method
            url: Absolute request URL
            headers: Request headers; stream headers are forced on top
            body: Optional request body
            channel_size: Channel capacity, 0 for unbounded
            trace: Emit per-line trace logging
        """
        if channel_size is None:
            channel_size = self.DEFAULT_CHANNEL_SIZE
        self._transport = transport
        self._method = method
        self._url = url
        self._headers = force_stream_headers(headers)
        self._body = body
        self._trace = trace
        self._channel: EventChannel[StreamEvent] = EventChannel(channel_size)
        self._state = PumpState.OPENING
        self._response: Optional[Response] = None
        self._release_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> PumpState:
        return self._state

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    async def open(self) -> EventStream:
        """
        Send the request and start streaming.

        Raises:
            RequestConstructionError: If the request is invalid
            ConnectionError: If the request could not be sent
        """
        if self._state is not PumpState.OPENING:
            raise StreamError("stream pump already opened")

        if self._trace:
            logger.debug(
                f"stream-request {self._method} {self._url} headers={self._headers} "
                f"body={limit_body_size(self._body or b'')}"
            )

        try:
            response = await self._transport.send(
                self._method, self._url, self._headers, self._body, stream=True
            )
        except BaseException:
            self._close()
            raise

        if response.status_code != SUCCESS_STATUS:
            await self._reject(response)
            return EventStream(self._channel)

        if self._trace:
            logger.debug(f"stream-response {self._method} {self._url} status={response.status_code}")

        self._state = PumpState.STREAMING
        self._response = response
        task = asyncio.create_task(self._run(response), name=f"stream-pump {self._method} {self._url}")
        task.add_done_callback(self._on_task_done)
        return EventStream(self._channel, task, self._wait_released)

    async def _reject(self, response: Response) -> None:
        """Deliver the error body of a non-success response and close."""
        cause: Optional[Exception] = None
        try:
            body = await response.aread()
        except StreamError as e:
            body, cause = b"", e
        finally:
            await response.aclose()

        error = UnexpectedStatus(response.status_code, body, cause=cause)
        if self._trace:
            logger.warning(f"stream-response {self._method} {self._url} {error}")

        try:
            await self._channel.send(
                StreamEvent(
                    kind=EventKind.END_OF_STREAM,
                    status_code=response.status_code,
                    headers=response.header_dict(),
                    body=body,
                    error=error,
                )
            )
        finally:
            self._close()

    async def _run(self, response: Response) -> None:
        """Read, classify and send until a terminal condition."""
        status_code = response.status_code
        headers = response.header_dict()
        reader = LineReader(response.stream)

        try:
            while True:
                try:
                    line = await reader.read_line()
                    classified = classify_line(line)
                except (StreamEnded, StreamReadError) as e:
                    error: StreamError = e
                    break
                except Exception as e:
                    # e.g. a custom backend failing outside the library's error types
                    error = StreamReadError(f"failed to process stream: {e!r}", cause=e)
                    break

                if self._trace:
                    logger.debug(f"stream-response {self._method} {self._url} line={limit_body_size(line)}")

                if classified is None:
                    continue

                kind, payload = classified
                await self._channel.send(
                    StreamEvent(kind=kind, status_code=status_code, headers=headers, body=payload)
                )
                if kind is EventKind.END_OF_STREAM:
                    return

            if self._trace:
                logger.debug(f"stream-response {self._method} {self._url} ended: {error}")
            await self._channel.send(
                StreamEvent(
                    kind=EventKind.END_OF_STREAM,
                    status_code=status_code,
                    headers=headers,
                    error=error,
                )
            )
        finally:
            await self._release()

    def _on_task_done(self, task: asyncio.Task) -> None:
        # A task cancelled before its first step never runs _run's cleanup
        if self._state is not PumpState.CLOSED and self._release_task is None:
            self._release_task = asyncio.ensure_future(self._release())

    async def _release(self) -> None:
        """Close the response body, then the channel."""
        try:
            if self._response is not None:
                await self._response.aclose()
        finally:
            self._close()

    async def _wait_released(self) -> None:
        if self._release_task is not None:
            await self._release_task

    def _close(self) -> None:
        self._state = PumpState.CLOSED
        if not self._channel.closed:
            self._channel.close()
