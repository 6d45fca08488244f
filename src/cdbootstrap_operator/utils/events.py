"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

import logging
from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_BOOTSTRAP_CREATED,
    EVENT_REASON_BOOTSTRAP_DELETED,
    EVENT_REASON_BOOTSTRAP_UPDATED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_TOKEN_BOOTSTRAPPED,
    EVENT_REASON_VAULT_ACCESS_FAILED,
)

logger = logging.getLogger(__name__)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Events are informational: outside of kopf's per-object handling there is
    no event queue, and the event is only logged.

    Args:
        body: Resource body the event refers to
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    try:
        kopf.event(
            body,
            reason=reason,
            message=message,
            type=type_,
        )
    except LookupError:
        logger.warning(f"Event {reason} not posted outside of resource handling: {message}")


def emit_bootstrap_created(body: dict[str, Any]) -> None:
    """Emit bootstrap created event."""
    emit_event(body, EVENT_REASON_BOOTSTRAP_CREATED, "Agent resources created")


def emit_bootstrap_updated(body: dict[str, Any], replicas: int) -> None:
    """Emit bootstrap updated event."""
    emit_event(body, EVENT_REASON_BOOTSTRAP_UPDATED, f"Agent resources updated to {replicas} replicas")


def emit_bootstrap_deleted(body: dict[str, Any]) -> None:
    """Emit bootstrap deleted event."""
    emit_event(body, EVENT_REASON_BOOTSTRAP_DELETED, "Agent resources deleted")


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_token_bootstrapped(body: dict[str, Any]) -> None:
    """Emit token bootstrapped event."""
    emit_event(body, EVENT_REASON_TOKEN_BOOTSTRAPPED, "AZP_TOKEN collected from the key vault")


def emit_vault_access_failed(body: dict[str, Any], message: str) -> None:
    """Emit vault access failed event."""
    emit_event(body, EVENT_REASON_VAULT_ACCESS_FAILED, message, type_="Warning")
