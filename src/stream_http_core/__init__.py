"""
stream_http_core - asyncio HTTP client with Server-Sent Events streaming

Plain request/response calls plus long-lived SSE streams delivered as
typed events through a channel, over HTTP/1.1 (h11).
"""

__version__ = "0.1.0"

# Import main components for easy access
from .client import HTTPClient
from .config import ClientConfig
from .models import ClientRequest, ClientResponse, EventKind, StreamEvent
from .pump import EventStream, PumpState, StreamPump
from .channel import EventChannel
from .lines import LineReader
from .sse import classify_line, DONE_SENTINEL
from .builder import build_request_params
from .transport import Transport
from .json_utils import to_json, from_json
from .headers import user_agent
from .exceptions import (
    HTTPCoreError,
    RequestConstructionError,
    InvalidURL,
    ConnectionError,
    ProtocolError,
    TimeoutError,
    UnexpectedStatus,
    StreamError,
    StreamReadError,
    StreamEnded,
    ChannelClosedError,
    SerializationError,
)

__all__ = [
    "HTTPClient",
    "ClientConfig",
    "ClientRequest",
    "ClientResponse",
    "EventKind",
    "StreamEvent",
    "EventStream",
    "PumpState",
    "StreamPump",
    "EventChannel",
    "LineReader",
    "classify_line",
    "DONE_SENTINEL",
    "build_request_params",
    "Transport",
    "to_json",
    "from_json",
    "user_agent",
    "HTTPCoreError",
    "RequestConstructionError",
    "InvalidURL",
    "ConnectionError",
    "ProtocolError",
    "TimeoutError",
    "UnexpectedStatus",
    "StreamError",
    "StreamReadError",
    "StreamEnded",
    "ChannelClosedError",
    "SerializationError",
]
