"""
Server-Sent Events line classification.

Each line is classified on its own; multi-line events are not grouped.
"""

from typing import Optional, Tuple

from .models import EventKind


DONE_SENTINEL = b"[DONE]"

# Checked in order; the first matching prefix wins
FIELD_PREFIXES = (
    (b"data: ", EventKind.DATA),
    (b"event: ", EventKind.EVENT),
    (b"id: ", EventKind.ID),
    (b"retry: ", EventKind.RETRY),
)
COMMENT_PREFIX = b":"


def classify_line(line: bytes) -> Optional[Tuple[EventKind, bytes]]:
    """
    Classify one trimmed SSE line.

    Args:
        line: A line with delimiter and surrounding whitespace removed

    Returns:
        (kind, payload), or None for an empty line. Field prefixes are
        stripped from the payload; ``data: [DONE]`` maps to END_OF_STREAM;
        comments keep their leading colon; anything else is DATA verbatim.
    """
    if not line:
        return None

    for prefix, kind in FIELD_PREFIXES:
        if line.startswith(prefix):
            payload = line[len(prefix):]
            if kind is EventKind.DATA and payload == DONE_SENTINEL:
                return EventKind.END_OF_STREAM, payload
            return kind, payload

    if line.startswith(COMMENT_PREFIX):
        return EventKind.COMMENT, line

    return EventKind.DATA, line
