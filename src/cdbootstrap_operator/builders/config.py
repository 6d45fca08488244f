"""Builder for the agent ConfigMap."""

from __future__ import annotations

from typing import Any

from ..constants import CONFIG_KEY_AZP_POOL, CONFIG_KEY_AZP_URL
from ..models import BootstrapSpec
from .common import object_metadata, require_string


def build_config(name: str, namespace: str, owner: str, spec: BootstrapSpec) -> dict[str, Any]:
    """Build the ConfigMap holding the agent's Azure DevOps URL and pool.

    Raises:
        TemplateError: If url or pool is not a string
    """
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": object_metadata(name, namespace, owner),
        "data": {
            CONFIG_KEY_AZP_POOL: require_string(spec.pool, "spec.pool"),
            CONFIG_KEY_AZP_URL: require_string(spec.url, "spec.url"),
        },
    }
