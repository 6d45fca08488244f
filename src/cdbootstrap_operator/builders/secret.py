"""Builder for the agent Secret."""

from __future__ import annotations

from typing import Any

from ..models import BootstrapSpec
from .common import object_metadata


def build_secret(name: str, namespace: str, owner: str, spec: BootstrapSpec) -> dict[str, Any]:
    """Build the Secret that will hold AZP_TOKEN and SPN_SECRET.

    Both keys start unset. The token is written later by the credential
    bootstrap or injected by an operator; the SPN secret is always injected.
    """
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "type": "Opaque",
        "metadata": object_metadata(name, namespace, owner),
        "data": {},
    }
