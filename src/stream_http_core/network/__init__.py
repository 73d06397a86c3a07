"""
Network backend components for stream_http_core.

This module provides the low-level networking abstractions:
network streams and the backends that open them.
"""

from .backend import NetworkBackend
from .stream import NetworkStream
from .asyncio_backend import AsyncioNetworkBackend, AsyncioNetworkStream
from .mock import MockNetworkBackend, MockNetworkStream
from .utils import (
    URLTarget,
    parse_url,
    format_host_header,
    create_ssl_context,
)

__all__ = [
    "NetworkBackend",
    "NetworkStream",
    "AsyncioNetworkBackend",
    "AsyncioNetworkStream",
    "MockNetworkBackend",
    "MockNetworkStream",
    "URLTarget",
    "parse_url",
    "format_host_header",
    "create_ssl_context",
]
