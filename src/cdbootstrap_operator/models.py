"""Typed views of the CDBootstrap custom resource."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

from .exceptions import InvalidResourceError


class SubresourceKind(str, Enum):
    """The fixed set of objects a CDBootstrap resource owns."""

    WORKLOAD = "Deployment"
    CONFIG = "ConfigMap"
    SECRET = "Secret"
    POLICY = "NetworkPolicy"


class ResourceKey(NamedTuple):
    """Identity of a CDBootstrap resource, keying its reconciliation loop."""

    namespace: str | None
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class BootstrapSpec:
    """Desired state declared in ``spec`` of a CDBootstrap resource."""

    replicas: Any = 1
    url: Any = ""
    pool: Any = ""
    keyvault: str = ""
    spn: str = ""
    tenant: str = ""
    oid: str = ""

    @classmethod
    def from_dict(cls, spec: dict[str, Any] | None) -> BootstrapSpec:
        spec = spec or {}
        return cls(
            replicas=spec.get("replicas", 1),
            url=spec.get("url", ""),
            pool=spec.get("pool", ""),
            keyvault=spec.get("keyvault") or "",
            spn=spec.get("spn") or "",
            tenant=spec.get("tenant") or "",
            oid=spec.get("oid") or "",
        )

    def validate(self) -> None:
        """Check the fields the dependent objects are built from.

        Raises:
            InvalidResourceError: If replicas is not a non-negative integer or
                url/pool are not strings
        """
        if isinstance(self.replicas, bool) or not isinstance(self.replicas, int):
            raise InvalidResourceError(f"spec.replicas must be an integer, got {self.replicas!r}")
        if self.replicas < 0:
            raise InvalidResourceError(f"spec.replicas must not be negative, got {self.replicas}")
        for field_name in ("url", "pool"):
            if not isinstance(getattr(self, field_name), str):
                raise InvalidResourceError(f"spec.{field_name} must be a string")


@dataclass(frozen=True)
class BootstrapResource:
    """A CDBootstrap resource as observed at the start of a reconciliation pass."""

    name: str
    namespace: str
    spec: BootstrapSpec
    uid: str = "unknown"
    deletion_timestamp: str | None = None
    finalizers: tuple[str, ...] = ()
    body: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> BootstrapResource:
        """Build a resource view from a raw API object.

        Raises:
            InvalidResourceError: If the name or namespace is missing
        """
        meta = body.get("metadata") or {}
        name = meta.get("name")
        namespace = meta.get("namespace")
        if not name:
            raise InvalidResourceError("CDBootstrap resource has no metadata.name")
        if not namespace:
            raise InvalidResourceError(f"CDBootstrap {name} has no metadata.namespace")
        return cls(
            name=name,
            namespace=namespace,
            spec=BootstrapSpec.from_dict(body.get("spec")),
            uid=meta.get("uid", "unknown"),
            deletion_timestamp=meta.get("deletionTimestamp"),
            finalizers=tuple(meta.get("finalizers") or ()),
            body=body,
        )

    @property
    def key(self) -> ResourceKey:
        return ResourceKey(self.namespace, self.name)

    @property
    def is_being_deleted(self) -> bool:
        return self.deletion_timestamp is not None

    def has_finalizer(self, finalizer: str) -> bool:
        return finalizer in self.finalizers


class CredentialState(NamedTuple):
    """Which of the two agent credentials are present in the agent Secret."""

    token_set: bool
    spn_secret_set: bool
