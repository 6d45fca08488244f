"""Per-resource reconciliation loops run from kopf's per-object handlers."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import kopf

from .. import metrics
from ..constants import REQUEUE_ERROR_SECONDS
from ..models import ResourceKey
from .actions import Outcome
from .reconciler import Reconciler

logger = logging.getLogger(__name__)


@dataclass
class _Slot:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    wakeup: asyncio.Event = field(default_factory=asyncio.Event)
    looping: bool = False


def _operator_stopping(stopped: kopf.DaemonStopped | None) -> bool:
    # A deleted resource keeps its loop until the Delete pass released it.
    if stopped is None or not stopped.is_set() or stopped.reason is None:
        return False
    return bool(stopped.reason & ~kopf.DaemonStoppingReason.RESOURCE_DELETED)


class Driver:
    """Runs reconciliation passes for CDBootstrap resources.

    kopf gives every resource its own daemon task, which calls ``drive``.
    Passes run in threads because the Kubernetes and Azure clients block,
    and a lock per key keeps passes of one resource from overlapping. After
    each pass the loop sleeps for the outcome's requeue delay; ``notify``
    cuts the sleep short when the resource changes.
    """

    def __init__(self, reconciler: Reconciler):
        self.reconciler = reconciler
        self._slots: dict[ResourceKey, _Slot] = {}
        self._stopping = False

    def _slot(self, key: ResourceKey) -> _Slot:
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = _Slot()
        return slot

    def is_looping(self, key: ResourceKey) -> bool:
        slot = self._slots.get(key)
        return slot is not None and slot.looping

    def notify(self, key: ResourceKey) -> bool:
        """Wake the loop of ``key``; returns False when no loop runs for it."""
        if not self.is_looping(key):
            return False
        self._slots[key].wakeup.set()
        return True

    async def reconcile_once(self, key: ResourceKey) -> Outcome:
        """Run one pass for ``key`` once no other pass of it is running."""
        async with self._slot(key).lock:
            try:
                return await asyncio.to_thread(self.reconciler.reconcile_key, key)
            except Exception:
                logger.exception(f"Reconciling {key} failed unexpectedly")
                metrics.error_total.labels(category="unexpected", error_type="Exception").inc()
                metrics.requeue_total.labels(reason="error").inc()
                return Outcome(None, False, REQUEUE_ERROR_SECONDS)

    async def drive(self, key: ResourceKey, stopped: kopf.DaemonStopped | None = None) -> None:
        """Reconcile ``key`` until the resource is gone or the operator stops."""
        slot = self._slot(key)
        slot.looping = True
        metrics.active_resources.inc()
        try:
            while not self._stopping:
                slot.wakeup.clear()
                outcome = await self.reconcile_once(key)
                if outcome.requeue_after is None or _operator_stopping(stopped):
                    return
                await self._sleep(slot, outcome.requeue_after, stopped)
                if _operator_stopping(stopped):
                    return
        finally:
            slot.looping = False
            metrics.active_resources.dec()
            if not slot.lock.locked():
                self._slots.pop(key, None)

    async def _sleep(self, slot: _Slot, delay: float, stopped: kopf.DaemonStopped | None) -> None:
        waiters = [asyncio.ensure_future(slot.wakeup.wait())]
        # Once set for a deletion the flag stays set, so it can no longer wake us.
        if stopped is not None and not stopped.is_set():
            waiters.append(asyncio.ensure_future(stopped.wait()))
        try:
            await asyncio.wait(waiters, timeout=delay, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()

    def is_ready(self) -> bool:
        """Whether resources are being reconciled."""
        return not self._stopping

    def shutdown(self) -> None:
        """Let every loop exit after its current pass."""
        self._stopping = True
        for slot in self._slots.values():
            slot.wakeup.set()
        logger.info("Reconciliation loops stopping")
