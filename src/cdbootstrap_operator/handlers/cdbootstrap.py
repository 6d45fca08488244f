"""kopf handlers driving the reconciliation of CDBootstrap resources."""

from __future__ import annotations

import logging
from typing import Any

import kopf

from ..constants import API_GROUP, API_VERSION, PLURAL_CDBOOTSTRAP
from ..models import ResourceKey

logger = logging.getLogger(__name__)


@kopf.daemon(API_GROUP, API_VERSION, PLURAL_CDBOOTSTRAP)
async def reconcile_cdbootstrap(
    name: str,
    namespace: str | None,
    memo: kopf.Memo,
    stopped: kopf.DaemonStopped,
    **_: Any,
) -> None:
    """Reconcile the resource for as long as it exists.

    The loop keeps running after the resource is marked for deletion, so that
    the Delete pass can remove the dependent objects and release it.
    """
    await memo.driver.drive(ResourceKey(namespace, name), stopped=stopped)


@kopf.on.event(API_GROUP, API_VERSION, PLURAL_CDBOOTSTRAP)
async def wake_cdbootstrap(
    event: dict[str, Any],
    name: str | None,
    namespace: str | None,
    meta: kopf.Meta,
    memo: kopf.Memo,
    **_: Any,
) -> None:
    """Start the next pass of the resource's loop right away.

    kopf spawns no loop for a resource that is already being deleted, as
    happens when the operator restarts mid-deletion. The Delete pass then
    runs here.
    """
    if not name or event.get("type") == "DELETED":
        return
    key = ResourceKey(namespace, name)
    logger.debug(f"Received {event.get('type') or 'LIST'} event for CDBootstrap {key}")
    if memo.driver.notify(key):
        return
    if meta.get("deletionTimestamp"):
        await memo.driver.drive(key)
