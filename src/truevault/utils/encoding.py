"""Base64/JSON field encoding utilities for TrueVault SDK.

TrueVault transmits free-form JSON (user attributes, group policies, schema
definitions, document contents and search options) as base64-encoded JSON
strings inside form fields and response envelopes.
"""

from __future__ import annotations

import base64
import json
from typing import Any


def to_base64(data: bytes) -> str:
    """Encode bytes to standard base64.

    Args:
        data: The bytes to encode.

    Returns:
        Standard base64 string with padding.
    """
    return base64.b64encode(data).decode("ascii")


def from_base64(s: str) -> bytes:
    """Decode standard base64 string to bytes.

    Args:
        s: The base64 string to decode.

    Returns:
        The decoded bytes.
    """
    return base64.b64decode(s)


def encode_json_field(value: Any) -> str:
    """JSON-serialize a value and base64-encode the result.

    ``None`` is sent as an empty object.

    Args:
        value: Any JSON-serializable value.

    Returns:
        The base64 string to place in the request.
    """
    if value is None:
        value = {}
    return to_base64(json.dumps(value, separators=(",", ":")).encode("utf-8"))


def decode_json_field(value: str | None) -> Any:
    """Base64-decode a field and parse the JSON it holds.

    ``None`` decodes to an empty object.

    Args:
        value: The base64 string from the response envelope.

    Returns:
        The parsed JSON value.

    Raises:
        ValueError: If the value is not base64-encoded JSON.
    """
    if value is None:
        return {}
    return json.loads(from_base64(value).decode("utf-8"))


def decode_field_in_place(item: dict[str, Any], key: str) -> dict[str, Any]:
    """Decode ``item[key]`` when the key is present.

    An absent key stays absent so callers can tell "never returned" apart
    from "explicitly null".
    """
    if key in item:
        item[key] = decode_json_field(item[key])
    return item
