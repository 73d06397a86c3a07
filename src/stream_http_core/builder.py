"""
Request builder: resolves the final URL and header set of a call.
"""

from typing import Dict, List, Mapping, Tuple
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from .exceptions import InvalidURL
from .headers import CLIENT_REQUEST_ID_HEADER, CLIENT_SESSION_ID_HEADER
from .models import ClientRequest

# Characters left as-is when escaping a joined path (keeps existing %XX escapes)
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"


def join_url_path(base_path: str, path: str) -> str:
    """
    Join two URL paths segment by segment.

    Empty and "." segments are dropped and ".." removes the previous
    segment, so the result never contains doubled slashes. A trailing
    slash on ``path`` is kept.

    >>> join_url_path("/api/", "/v1/items")
    '/api/v1/items'
    """
    segments: List[str] = []
    for part in f"{base_path}/{path}".split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if segments:
                segments.pop()
            continue
        segments.append(part)

    joined = "/" + "/".join(segments)
    if path.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def join_url(base_url: str, path: str) -> str:
    """
    Join a base URL and a request path.

    Raises:
        InvalidURL: If the base URL is not an absolute URL
    """
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in base_url):
        raise InvalidURL(f"failed to join URL: {path}: base URL contains whitespace or control characters")

    try:
        parsed = urlsplit(base_url)
        # Validates the port
        parsed.port
    except ValueError as e:
        raise InvalidURL(f"failed to join URL: {path}: {e}", cause=e) from e

    if not parsed.scheme or not parsed.netloc:
        raise InvalidURL(f"failed to join URL: {path}: base URL {base_url!r} is not absolute")

    joined_path = quote(join_url_path(parsed.path, path), safe=_PATH_SAFE)
    return urlunsplit((parsed.scheme, parsed.netloc, joined_path, parsed.query, ""))


def set_header(headers: Dict[str, str], name: str, value: str) -> None:
    """Set a header, replacing any entry whose name differs only in case."""
    for existing in [key for key in headers if key.lower() == name.lower()]:
        del headers[existing]
    headers[name] = value


def encode_query(query: Mapping[str, Tuple[str, ...]]) -> str:
    """URL-encode query parameters, keys sorted, repeated keys kept."""
    pairs = [(key, value) for key in sorted(query) for value in query[key]]
    return urlencode(pairs)


def build_request_params(
    base_url: str,
    request: ClientRequest,
    default_headers: Mapping[str, str],
) -> Tuple[str, Dict[str, str]]:
    """
    Resolve the URL and headers for a request.

    Headers merge in order, later wins: client defaults, request
    overrides, then the correlation headers for non-empty ``id`` and
    ``session_id``. Without a base URL the path is used verbatim.

    Returns:
        (url, headers)

    Raises:
        InvalidURL: If the base URL and path cannot be joined
    """
    headers: Dict[str, str] = {}
    for name, value in default_headers.items():
        set_header(headers, name, value)
    for name, value in request.headers.items():
        set_header(headers, name, value)

    if request.id:
        set_header(headers, CLIENT_REQUEST_ID_HEADER, request.id)
    if request.session_id:
        set_header(headers, CLIENT_SESSION_ID_HEADER, request.session_id)

    url = request.path
    if base_url:
        url = join_url(base_url, request.path)

    query = encode_query(request.query)
    if query:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{query}"

    return url, headers
