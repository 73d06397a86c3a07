"""
Custom exceptions for stream_http_core.

This module defines the exception hierarchy used throughout
the library. Errors raised before a stream is open propagate to
the caller; errors after that point travel inside StreamEvent.error.
"""

from typing import Optional


# Bytes of a response body quoted in error messages
BODY_PREVIEW_SIZE = 100


def limit_body_size(body: bytes, max_size: int = BODY_PREVIEW_SIZE) -> str:
    """
    Render a body for messages and logs, truncated to max_size bytes.

    Args:
        body: Raw body bytes
        max_size: Maximum number of bytes to keep

    Returns:
        Decoded (lossy) body text, suffixed with "..." when truncated
    """
    if len(body) > max_size:
        return body[:max_size].decode("utf-8", errors="replace") + "..."
    return body.decode("utf-8", errors="replace")


class HTTPCoreError(Exception):
    """Base exception for all stream_http_core errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class RequestConstructionError(HTTPCoreError):
    """Raised when a request cannot be built (method, URL or headers)."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Request construction error: {message}", cause)


class InvalidURL(RequestConstructionError):
    """Raised when the base URL and path cannot be joined."""


class ConnectionError(HTTPCoreError):
    """Raised when there's an error with network connections."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Connection error: {message}", cause)


class ProtocolError(HTTPCoreError):
    """Raised when there's an error with HTTP protocol handling."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Protocol error: {message}", cause)


class TimeoutError(HTTPCoreError):
    """Raised when an operation times out."""

    def __init__(self, message: str, timeout: Optional[float] = None) -> None:
        if timeout is not None:
            message = f"{message} (timeout: {timeout}s)"
        super().__init__(f"Timeout error: {message}")


class UnexpectedStatus(HTTPCoreError):
    """
    Raised (or delivered in-band) for a non-success status on stream open.

    The message quotes a truncated preview of the body; the full body
    is kept on the ``body`` attribute.
    """

    def __init__(self, status_code: int, body: bytes = b"", cause: Optional[Exception] = None) -> None:
        message = f"unexpected status code: {status_code}"
        if body:
            message = f"{message}: {limit_body_size(body)}"
        super().__init__(message, cause)
        self.status_code = status_code
        self.body = body


class StreamError(HTTPCoreError):
    """Raised when there's an error with stream operations."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Stream error: {message}", cause)


class StreamReadError(StreamError):
    """Reading the response body failed after streaming began."""


class StreamEnded(StreamError):
    """The response body ended cleanly, without an explicit terminator."""

    def __init__(self, message: str = "stream ended without explicit termination") -> None:
        super().__init__(message)


class ChannelClosedError(StreamError):
    """Raised on a send to, or a second close of, a closed event channel."""


class SerializationError(HTTPCoreError):
    """Raised when JSON encoding or decoding fails."""
