"""
JSON helpers for request and response bodies.
"""

from typing import Any, Type, TypeVar, Union

from pydantic import TypeAdapter

from .exceptions import SerializationError

T = TypeVar("T")

_ANY_ADAPTER: TypeAdapter = TypeAdapter(Any)


def to_json(data: Any) -> str:
    """
    Serialize data (dicts, lists, dataclasses, pydantic models) to JSON text.

    Raises:
        SerializationError: If the data cannot be serialized
    """
    try:
        return _ANY_ADAPTER.dump_json(data).decode("utf-8")
    except ValueError as e:
        raise SerializationError(f"failed to marshal data to JSON: {e}", cause=e) from e


def from_json(data: Union[str, bytes], type_: Type[T]) -> T:
    """
    Parse JSON text into ``type_``.

    >>> from_json(b'{"a": 1}', dict)
    {'a': 1}

    Raises:
        SerializationError: If the JSON is malformed or does not match type_
    """
    try:
        return TypeAdapter(type_).validate_json(data)
    except ValueError as e:
        raise SerializationError(f"failed to unmarshal JSON data: {e}", cause=e) from e
