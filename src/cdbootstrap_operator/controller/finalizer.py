"""Finalizer protocol guarding the teardown of dependent objects."""

from __future__ import annotations

from typing import Any

from ..constants import FINALIZER
from ..models import BootstrapResource
from .base import ControllerComponent


class FinalizerProtocol(ControllerComponent):
    """Adds and removes this controller's claim on a CDBootstrap resource.

    Both operations are merge patches, so repeating them has no further effect.
    ``add`` must complete before any dependent object is created and
    ``remove`` may only run once every dependent object has been deleted.
    """

    def add(self, resource: BootstrapResource) -> dict[str, Any]:
        """Set the finalizer list to exactly the controller's sentinel."""
        result = self.client.patch_metadata(
            resource.name,
            resource.namespace,
            {"metadata": {"finalizers": [FINALIZER]}},
        )
        self.log_info(resource, "Finalizer added", event="finalizer", reason="FinalizerAdded")
        return result

    def remove(self, resource: BootstrapResource) -> dict[str, Any]:
        """Clear the finalizer list so the platform can delete the resource."""
        result = self.client.patch_metadata(
            resource.name,
            resource.namespace,
            {"metadata": {"finalizers": None}},
        )
        self.log_info(resource, "Finalizer removed", event="finalizer", reason="FinalizerRemoved")
        return result
