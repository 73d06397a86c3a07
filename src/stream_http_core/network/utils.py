"""
Network utilities for stream_http_core.

URL splitting for the transport and TLS context creation for the
asyncio backend.
"""

import ssl
from typing import NamedTuple
from urllib.parse import urlsplit


DEFAULT_PORTS = {"http": 80, "https": 443}


class URLTarget(NamedTuple):
    """Connection endpoint and request target of an absolute URL."""
    scheme: str
    host: str
    port: int
    target: str


def parse_url(url: str) -> URLTarget:
    """
    Split an absolute URL into the pieces a connection needs.

    Args:
        url: Absolute http or https URL

    Returns:
        URLTarget where target is the path plus query (fragment dropped)

    Raises:
        ValueError: If the URL is relative, malformed or not http(s)
    """
    parsed = urlsplit(url)

    scheme = parsed.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise ValueError(f"Unsupported URL scheme: {parsed.scheme!r}")

    host = parsed.hostname or ""
    if not host:
        raise ValueError("No hostname found in URL")

    # .port raises ValueError for out-of-range or non-numeric ports
    port = parsed.port or DEFAULT_PORTS[scheme]

    target = parsed.path or "/"
    if parsed.query:
        target += "?" + parsed.query

    return URLTarget(scheme=scheme, host=host, port=port, target=target)


def format_host_header(host: str, port: int, scheme: str) -> str:
    """
    Format the Host header value, omitting the port when it is the default.
    """
    if ":" in host:
        # IPv6 literal
        host = f"[{host}]"
    if DEFAULT_PORTS.get(scheme) == port:
        return host
    return f"{host}:{port}"


def create_ssl_context() -> ssl.SSLContext:
    """Create the platform default client SSL context."""
    context = ssl.create_default_context()
    context.set_alpn_protocols(["http/1.1"])
    return context
