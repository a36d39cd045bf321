"""Thin orjson wrapper used for all JSON encoding and decoding."""

from typing import Any

import orjson

JSONDecodeError = orjson.JSONDecodeError


def loads(data: bytes | bytearray | memoryview | str) -> Any:
    """Decode JSON from bytes or str."""
    return orjson.loads(data)


def dumps(obj: Any) -> bytes:
    """Encode an object to UTF-8 JSON bytes."""
    return orjson.dumps(obj)
