"""Builder for the agent egress NetworkPolicy."""

from __future__ import annotations

from typing import Any

from ..constants import EGRESS_CIDRS, EGRESS_PORT, POLICY_NAME_PREFIX
from ..models import BootstrapSpec
from .common import object_metadata, selector_labels


def policy_name(owner: str) -> str:
    """Name of the NetworkPolicy belonging to a CDBootstrap resource."""
    return f"{POLICY_NAME_PREFIX}{owner}"


def build_policy(name: str, namespace: str, owner: str, spec: BootstrapSpec) -> dict[str, Any]:
    """Build the NetworkPolicy allowing agent pods to reach Azure DevOps.

    Only the pod selector depends on the owner; ports and address blocks are fixed.
    """
    return {
        "apiVersion": "networking.k8s.io/v1",
        "kind": "NetworkPolicy",
        "metadata": object_metadata(name, namespace, owner),
        "spec": {
            "podSelector": {"matchLabels": selector_labels(owner)},
            "policyTypes": ["Egress"],
            "egress": [
                {
                    "to": [{"ipBlock": {"cidr": cidr}} for cidr in EGRESS_CIDRS],
                    "ports": [
                        {"port": EGRESS_PORT, "protocol": "TCP"},
                        {"port": EGRESS_PORT, "protocol": "UDP"},
                    ],
                }
            ],
        },
    }
