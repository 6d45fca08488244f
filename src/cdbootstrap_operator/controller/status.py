"""Status reporting for CDBootstrap resources."""

from __future__ import annotations

from typing import Any

from ..models import BootstrapResource
from .base import ControllerComponent


class StatusReporter(ControllerComponent):
    """Writes and reads the ``status.succeeded`` flag."""

    def patch(self, resource: BootstrapResource, success: bool) -> dict[str, Any]:
        """Overwrite the status of ``resource`` with the outcome of the pass."""
        result = self.client.patch_status(
            resource.name,
            resource.namespace,
            {"status": {"succeeded": success}},
        )
        self.log_info(
            resource,
            f"Patched status succeeded={success}",
            event="status",
            reason="StatusPatched",
            succeeded=success,
        )
        return result

    def get(self, resource: BootstrapResource) -> dict[str, Any]:
        """Read and log the current status of ``resource``."""
        body = self.client.get_bootstrap_status(resource.name, resource.namespace)
        status = body.get("status") or {}
        self.log_info(
            resource,
            f"Got status {status}",
            event="status",
            reason="StatusRead",
            succeeded=status.get("succeeded"),
        )
        return status
