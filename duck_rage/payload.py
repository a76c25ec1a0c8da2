"""Extract a single field from a decrypted JSON secrets document."""

from __future__ import annotations

import json
from typing import Any

from .errors import KeyNotFoundError, KeyTypeError, MalformedPayloadError

_JSON_KINDS: dict[type, str] = {
    dict: "object",
    list: "array",
    bool: "boolean",
    int: "number",
    float: "number",
    type(None): "null",
}


def parse_document(plaintext: bytes) -> dict[str, Any]:
    """Parse decrypted bytes as a JSON object."""

    try:
        text = plaintext.decode("utf-8")
    except UnicodeDecodeError:
        raise MalformedPayloadError("secrets file is not valid JSON: not UTF-8 text") from None
    try:
        document = json.loads(text.strip())
    except json.JSONDecodeError as exc:
        raise MalformedPayloadError(
            f"secrets file is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})"
        ) from None
    except RecursionError:
        raise MalformedPayloadError("secrets file is not valid JSON: nesting too deep") from None
    if not isinstance(document, dict):
        raise MalformedPayloadError(
            f"secrets file is not a JSON object (got {_kind(document)})"
        )
    return document


def extract(plaintext: bytes, key: str) -> str:
    """Return the string stored under ``key`` verbatim."""

    document = parse_document(plaintext)
    if key not in document:
        raise KeyNotFoundError(f"Key '{key}' not found in secrets file")
    value = document[key]
    if not isinstance(value, str):
        raise KeyTypeError(
            f"Key '{key}' in secrets file is not a JSON string (got: {_kind(value)})"
        )
    return value


def _kind(value: object) -> str:
    return _JSON_KINDS.get(type(value), type(value).__name__)


__all__ = ["extract", "parse_document"]
