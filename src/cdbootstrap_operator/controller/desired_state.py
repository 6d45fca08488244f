"""Comparison of the live agent Deployment against the desired replica count."""

from __future__ import annotations

from ..constants import DEFAULT_WORKLOAD_REPLICAS
from ..exceptions import PlatformError
from ..models import BootstrapResource, SubresourceKind
from ..orchestrator import object_name
from .base import ControllerComponent


class DesiredStateComparator(ControllerComponent):
    """Reports whether a resource's Deployment runs the declared replica count.

    Only the replica count is compared. Image, ports and environment drift
    are not detected.
    """

    def is_in_desired_state(self, resource: BootstrapResource) -> bool:
        """Return True when the live Deployment matches ``spec.replicas``.

        A Deployment that cannot be read counts as not matching, which sends the
        resource through the Update branch and recreates it.
        """
        name = object_name(SubresourceKind.WORKLOAD, resource.name)
        try:
            deployment = self.client.get(SubresourceKind.WORKLOAD, name, resource.namespace)
        except PlatformError as e:
            self.log_info(
                resource,
                f"Not able to find the existing {name} deployment",
                event="desired_state",
                reason="WorkloadMissing",
                detail=str(e),
            )
            return False

        current = (deployment.get("spec") or {}).get("replicas")
        if current is None:
            current = DEFAULT_WORKLOAD_REPLICAS
        return current == resource.spec.replicas
