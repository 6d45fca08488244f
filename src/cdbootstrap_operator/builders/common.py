"""Shared pieces of the dependent object templates."""

from __future__ import annotations

from typing import Any

from ..constants import FIELD_MANAGER, LABEL_APP, LABEL_MANAGED_BY
from ..exceptions import TemplateError


def owner_labels(owner: str) -> dict[str, str]:
    """Labels linking a dependent object to its CDBootstrap resource."""
    return {
        LABEL_APP: owner,
        LABEL_MANAGED_BY: FIELD_MANAGER,
    }


def selector_labels(owner: str) -> dict[str, str]:
    """Labels selecting the agent pods of a CDBootstrap resource."""
    return {LABEL_APP: owner}


def object_metadata(name: str, namespace: str, owner: str) -> dict[str, Any]:
    """Build the metadata block of a dependent object.

    Raises:
        TemplateError: If name, namespace or owner is empty
    """
    for label, value in (("name", name), ("namespace", namespace), ("owner", owner)):
        if not isinstance(value, str) or not value:
            raise TemplateError(f"Cannot build object metadata: {label} is {value!r}")
    return {
        "name": name,
        "namespace": namespace,
        "labels": owner_labels(owner),
    }


def require_string(value: Any, field_name: str) -> str:
    """Return ``value`` if it is a string, raise TemplateError otherwise."""
    if not isinstance(value, str):
        raise TemplateError(f"{field_name} must be a string, got {type(value).__name__}")
    return value
