"""
Client-facing data model for stream_http_core.

ClientRequest describes one call, ClientResponse is the buffered result
of a plain call, and StreamEvent is one typed line of a streamed response.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union


QueryValue = Union[str, Sequence[str]]


class EventKind(Enum):
    """Kinds of stream events."""
    DATA = "data"
    EVENT = "event"
    ID = "id"
    RETRY = "retry"
    COMMENT = "comment"
    END_OF_STREAM = "end_of_stream"


@dataclass(frozen=True)
class ClientRequest:
    """
    Immutable description of one client call.

    ``id`` and ``session_id`` become the X-Request-ID and X-Session-ID
    correlation headers when non-empty. ``query`` values may be a single
    string or a sequence of strings.
    """

    path: str = ""
    id: str = ""
    session_id: str = ""
    query: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def __post_init__(self) -> None:
        query = {
            key: (value,) if isinstance(value, str) else tuple(value)
            for key, value in dict(self.query).items()
        }
        object.__setattr__(self, "query", MappingProxyType(query))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

        if isinstance(self.body, str):
            object.__setattr__(self, "body", self.body.encode("utf-8"))
        elif self.body is not None and not isinstance(self.body, bytes):
            raise ValueError("body must be bytes or str")


@dataclass(frozen=True)
class ClientResponse:
    """Buffered response of a non-streaming call."""

    status_code: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class StreamEvent:
    """
    One event of a streamed response.

    ``headers`` are the response headers captured when the stream opened.
    ``error`` is set only on terminal END_OF_STREAM events.
    """

    kind: EventKind
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    error: Optional[Exception] = None

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_terminal(self) -> bool:
        return self.kind is EventKind.END_OF_STREAM
