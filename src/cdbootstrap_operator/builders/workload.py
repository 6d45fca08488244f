"""Builder for the agent Deployment."""

from __future__ import annotations

import os
from typing import Any

from ..constants import (
    CONFIG_KEY_AZP_POOL,
    CONFIG_KEY_AZP_URL,
    DEFAULT_AGENT_IMAGE,
    SECRET_KEY_AZP_TOKEN,
    SECRET_KEY_SPN_SECRET,
)
from ..exceptions import TemplateError
from ..models import BootstrapSpec
from .common import object_metadata, selector_labels


def _secret_env(name: str, secret_name: str) -> dict[str, Any]:
    return {
        "name": name,
        "valueFrom": {
            "secretKeyRef": {"name": secret_name, "key": name, "optional": True},
        },
    }


def _config_env(name: str, config_name: str) -> dict[str, Any]:
    return {
        "name": name,
        "valueFrom": {
            "configMapKeyRef": {"name": config_name, "key": name, "optional": True},
        },
    }


def agent_image() -> str:
    """Container image of the agent, overridable through ``AGENT_IMAGE``."""
    return os.getenv("AGENT_IMAGE", DEFAULT_AGENT_IMAGE)


def build_workload(name: str, namespace: str, owner: str, spec: BootstrapSpec) -> dict[str, Any]:
    """Build the agent Deployment for a CDBootstrap resource.

    The agent reads its token and SPN secret from the Secret and its URL and
    pool from the ConfigMap, all of which share the Deployment's name. Every
    reference is optional so the pods start before the token is bootstrapped.

    Args:
        name: Name of the Deployment
        namespace: Namespace of the Deployment
        owner: Name of the owning CDBootstrap resource
        spec: Desired state of the owning resource

    Returns:
        Deployment manifest

    Raises:
        TemplateError: If the replica count is not a non-negative integer
    """
    replicas = spec.replicas
    if isinstance(replicas, bool) or not isinstance(replicas, int) or replicas < 0:
        raise TemplateError(f"Deployment {name}: invalid replica count {replicas!r}")

    labels = selector_labels(owner)
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": object_metadata(name, namespace, owner),
        "spec": {
            "replicas": replicas,
            "selector": {"matchLabels": dict(labels)},
            "template": {
                "metadata": {"labels": dict(labels)},
                "spec": {
                    "containers": [
                        {
                            "name": name,
                            "image": agent_image(),
                            "env": [
                                _secret_env(SECRET_KEY_AZP_TOKEN, name),
                                _secret_env(SECRET_KEY_SPN_SECRET, name),
                                _config_env(CONFIG_KEY_AZP_URL, name),
                                _config_env(CONFIG_KEY_AZP_POOL, name),
                            ],
                        }
                    ],
                },
            },
        },
    }
