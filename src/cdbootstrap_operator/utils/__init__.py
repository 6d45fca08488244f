"""Utility functions for the CDBootstrap Operator."""

from .context import correlation_id, with_correlation_id
from .errors import sanitize_error_message, sanitize_exception
from .events import emit_event
from .rate_limit import rate_limit_k8s, rate_limit_vault
from .secrets import (
    decode_secret_value,
    encode_secret_value,
    read_secret_key,
    secret_value_is_set,
)

__all__ = [
    "emit_event",
    "decode_secret_value",
    "encode_secret_value",
    "read_secret_key",
    "secret_value_is_set",
    "rate_limit_k8s",
    "rate_limit_vault",
    "sanitize_error_message",
    "sanitize_exception",
    "correlation_id",
    "with_correlation_id",
]
