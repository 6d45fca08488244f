"""Helpers for reading and writing Kubernetes Secret data."""

from __future__ import annotations

import base64
import binascii
from typing import Any


def decode_secret_value(value: str | bytes | None) -> str:
    """Decode a value from a Secret's ``data`` map.

    Args:
        value: Base64 encoded value as returned by the API server

    Returns:
        The decoded string, empty when the value is absent or not valid UTF-8
    """
    if value is None:
        return ""
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return ""


def encode_secret_value(value: str) -> str:
    """Encode a string for a Secret's ``data`` map."""
    return base64.b64encode(value.encode("utf-8")).decode("utf-8")


def read_secret_key(secret: dict[str, Any] | None, key: str) -> str:
    """Read and decode one key of a Secret body.

    Args:
        secret: Secret body as a plain dictionary
        key: Key in the secret

    Returns:
        Decoded value, empty string if the key is missing or unset
    """
    if not secret:
        return ""
    data = secret.get("data") or {}
    return decode_secret_value(data.get(key))


def secret_value_is_set(secret: dict[str, Any] | None, key: str) -> bool:
    """Return True when the Secret holds a non-empty value for ``key``."""
    return read_secret_key(secret, key) != ""
