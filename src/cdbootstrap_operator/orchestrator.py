"""Idempotent create-or-replace and delete of the dependent objects."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from . import metrics
from .builders import build_config, build_policy, build_secret, build_workload, policy_name
from .constants import CONTROLLER_NAME
from .exceptions import PlatformError
from .logging import log_resource_event
from .models import BootstrapSpec, SubresourceKind
from .services.k8s import ResourceClient
from .tracing import trace_span
from .utils.errors import sanitize_exception

logger = logging.getLogger(__name__)

Builder = Callable[[str, str, str, BootstrapSpec], dict[str, Any]]


def _same_name(owner: str) -> str:
    return owner


@dataclass(frozen=True)
class SubresourceHandler:
    """How one kind of dependent object is named and built."""

    kind: SubresourceKind
    build: Builder
    object_name: Callable[[str], str] = _same_name


HANDLERS: dict[SubresourceKind, SubresourceHandler] = {
    SubresourceKind.WORKLOAD: SubresourceHandler(SubresourceKind.WORKLOAD, build_workload),
    SubresourceKind.CONFIG: SubresourceHandler(SubresourceKind.CONFIG, build_config),
    SubresourceKind.SECRET: SubresourceHandler(SubresourceKind.SECRET, build_secret),
    SubresourceKind.POLICY: SubresourceHandler(SubresourceKind.POLICY, build_policy, policy_name),
}


def object_name(kind: SubresourceKind, owner: str) -> str:
    """Name of the ``kind`` object owned by the CDBootstrap resource ``owner``."""
    return HANDLERS[kind].object_name(owner)


class Orchestrator:
    """Applies and deletes the dependent objects of CDBootstrap resources."""

    def __init__(self, client: ResourceClient) -> None:
        self.client = client

    def _log(self, kind: SubresourceKind, name: str, namespace: str, message: str, **kwargs: Any) -> None:
        log_resource_event(
            logger,
            controller=CONTROLLER_NAME,
            resource_kind=kind.value,
            resource_name=name,
            namespace=namespace,
            uid="",
            event="subresource",
            message=message,
            **kwargs,
        )

    def apply(self, kind: SubresourceKind, name: str, namespace: str, spec: BootstrapSpec) -> dict[str, Any]:
        """Create the object or replace it wholesale with one built from ``spec``.

        Any failure to read the existing object is treated as "not found".

        Args:
            kind: Which dependent object to apply
            name: Name of the owning CDBootstrap resource
            namespace: Namespace of the owning CDBootstrap resource
            spec: Desired state of the owning resource

        Returns:
            The object as stored by the API server

        Raises:
            TemplateError: If the object cannot be built from ``spec``
            PlatformError: If the create or replace call fails
        """
        handler = HANDLERS[kind]
        target = handler.object_name(name)

        with trace_span(f"apply_{kind.name.lower()}", attributes={"object.name": target, "object.namespace": namespace}):
            body = handler.build(target, namespace, name, spec)
            try:
                self.client.get(kind, target, namespace)
            except PlatformError as e:
                self._log(kind, target, namespace, "Not found, creating", reason="Create", detail=sanitize_exception(e))
                operation = "create"
            else:
                self._log(kind, target, namespace, "Found, replacing with desired state", reason="Replace")
                operation = "replace"

            try:
                if operation == "create":
                    result = self.client.create(kind, namespace, body)
                else:
                    result = self.client.replace(kind, target, namespace, body)
            except PlatformError:
                metrics.subresource_operations_total.labels(kind=kind.value, operation=operation, result="error").inc()
                raise
            metrics.subresource_operations_total.labels(kind=kind.value, operation=operation, result="success").inc()
            return result

    def delete(self, kind: SubresourceKind, name: str, namespace: str) -> None:
        """Delete the object; a missing object is an error.

        Raises:
            NotFoundError: If the object does not exist
            PlatformError: If the delete call fails
        """
        target = object_name(kind, name)
        with trace_span(f"delete_{kind.name.lower()}", attributes={"object.name": target, "object.namespace": namespace}):
            try:
                self.client.delete(kind, target, namespace)
            except PlatformError:
                metrics.subresource_operations_total.labels(kind=kind.value, operation="delete", result="error").inc()
                raise
            metrics.subresource_operations_total.labels(kind=kind.value, operation="delete", result="success").inc()
            self._log(kind, target, namespace, "Deleted", reason="Delete")
