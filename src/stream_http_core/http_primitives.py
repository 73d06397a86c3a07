"""
HTTP primitives for stream_http_core.

This module defines the wire-level request and response exchanged with
an HTTP11Connection. Both are immutable; the response body is consumed
through its stream.
"""

from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Dict,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from .network.utils import URLTarget, parse_url

if TYPE_CHECKING:
    from .streams import ResponseStream


# Type aliases for better readability
Headers = List[Tuple[bytes, bytes]]
StatusCode = int


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("latin-1")


def normalize_headers(headers: Union[Mapping[str, str], Headers, None]) -> Headers:
    """
    Convert a header mapping or list into (name, value) byte pairs.

    Raises:
        UnicodeEncodeError: If a header is not representable in latin-1
    """
    if headers is None:
        return []
    items = headers.items() if isinstance(headers, Mapping) else headers
    return [(_to_bytes(name), _to_bytes(value)) for name, value in items]


@dataclass(frozen=True)
class Request:
    """
    Immutable wire-level HTTP request.

    ``url`` holds the connection endpoint and the request target; the
    body, when present, is sent with a Content-Length.
    """

    method: bytes
    url: URLTarget
    headers: Headers = field(default_factory=list)
    body: Optional[bytes] = None

    def __post_init__(self) -> None:
        """Validate request data after initialization."""
        if not isinstance(self.method, bytes):
            raise ValueError("method must be bytes")

        if not isinstance(self.url, URLTarget):
            raise ValueError("url must be a URLTarget")

        if not isinstance(self.headers, list):
            raise ValueError("headers must be a list")

        for name, value in self.headers:
            if not isinstance(name, bytes) or not isinstance(value, bytes):
                raise ValueError("header names and values must be bytes")

        if self.body is not None and not isinstance(self.body, bytes):
            raise ValueError("body must be bytes")

    @classmethod
    def create(
        cls,
        method: Union[str, bytes],
        url: Union[str, URLTarget],
        headers: Union[Mapping[str, str], Headers, None] = None,
        body: Optional[bytes] = None,
    ) -> "Request":
        """
        Create a Request with proper type conversion.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Absolute URL string or an already parsed URLTarget
            headers: Header mapping or list of (name, value) pairs
            body: Optional request body

        Returns:
            New Request instance

        Raises:
            ValueError: If the URL cannot be parsed
        """
        if isinstance(method, str):
            method = method.encode("ascii")

        if isinstance(url, str):
            url = parse_url(url)

        return cls(method=method, url=url, headers=normalize_headers(headers), body=body)

    def has_header(self, name: Union[str, bytes]) -> bool:
        """Check if a header exists (case-insensitive)."""
        name_lower = _to_bytes(name).lower()
        return any(header_name.lower() == name_lower for header_name, _ in self.headers)

    @property
    def scheme(self) -> str:
        return self.url.scheme

    @property
    def host(self) -> str:
        return self.url.host

    @property
    def port(self) -> int:
        return self.url.port

    @property
    def target(self) -> str:
        """Path and query sent on the request line."""
        return self.url.target


@dataclass(frozen=True)
class Response:
    """
    Immutable HTTP response representation.

    The status and headers are available as soon as the response head
    has been received; the body is read from ``stream``.
    """

    status_code: StatusCode
    headers: Headers = field(default_factory=list)
    stream: Optional["ResponseStream"] = None

    def __post_init__(self) -> None:
        """Validate response data after initialization."""
        if not isinstance(self.status_code, int):
            raise ValueError("status_code must be int")

        if not isinstance(self.headers, list):
            raise ValueError("headers must be a list")

        for name, value in self.headers:
            if not isinstance(name, bytes) or not isinstance(value, bytes):
                raise ValueError("header names and values must be bytes")

    def get_header(self, name: Union[str, bytes]) -> Optional[bytes]:
        """Get a header value by name (case-insensitive)."""
        name_lower = _to_bytes(name).lower()
        for header_name, header_value in self.headers:
            if header_name.lower() == name_lower:
                return header_value

        return None

    def has_header(self, name: Union[str, bytes]) -> bool:
        """Check if a header exists (case-insensitive)."""
        return self.get_header(name) is not None

    def header_dict(self) -> Dict[str, str]:
        """
        Headers as a dict keyed by lower-case name.

        Repeated headers are joined with ", ".
        """
        result: Dict[str, str] = {}
        for name, value in self.headers:
            key = name.decode("latin-1").lower()
            text = value.decode("latin-1")
            result[key] = f"{result[key]}, {text}" if key in result else text
        return result

    async def aread(self) -> bytes:
        """Read the whole body. Returns b"" for a response without a body."""
        if self.stream is None:
            return b""
        return await self.stream.aread()

    async def aclose(self) -> None:
        """Release the body and the connection behind it."""
        if self.stream is not None:
            await self.stream.aclose()
