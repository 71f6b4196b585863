"""
Canonical JSON

Deterministic serialization for hashing RPC receipts: sorted keys, no
whitespace, None dropped, bytes as 0x-hex (the JSON-RPC wire form).
Floats are refused since nodes never send them and their text form is
not stable.
"""

import json
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException


def _child(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce `value` to plain JSON types.

    Raises:
        CanonicalizationException: Float or unsupported type, with its path
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, BaseModel):
        return canonicalize_value(
            value.model_dump(mode="json", by_alias=True, exclude_none=True), path
        )
    if isinstance(value, dict):
        return {
            str(key): canonicalize_value(item, _child(path, key))
            for key, item in value.items()
            if item is not None
        }
    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(value)]

    kind = type(value).__name__
    message = "Floats have no canonical form" if kind == "float" else f"Cannot canonicalize value of type {kind}"
    raise CanonicalizationException(message=message, details={"path": path, "type": kind})


def dumps_canonical(obj: Any) -> str:
    """
    Example:
        >>> dumps_canonical({"b": 2, "a": b"\\x01"})
        '{"a":"0x01","b":2}'
    """
    return json.dumps(canonicalize_value(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
