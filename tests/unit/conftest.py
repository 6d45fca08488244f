"""Shared fixtures: an in-memory Kubernetes object store and a fake key vault."""

from __future__ import annotations

import copy
from typing import Any
from unittest.mock import Mock

import kopf
import pytest

from cdbootstrap_operator.constants import FINALIZER
from cdbootstrap_operator.exceptions import NotFoundError, PlatformError, VaultSecretNotFoundError
from cdbootstrap_operator.models import BootstrapResource, SubresourceKind
from cdbootstrap_operator.utils.secrets import encode_secret_value


def merge_patch(target: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    """Apply a JSON merge patch to ``target`` in place."""
    for key, value in patch.items():
        if value is None:
            target.pop(key, None)
        elif isinstance(value, dict) and isinstance(target.get(key), dict):
            merge_patch(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target


class FakeResourceClient:
    """Stands in for ``ResourceClient`` and records every call.

    ``failures`` maps ``(verb, kind)`` to the exception that call raises.
    """

    def __init__(self) -> None:
        self.objects: dict[tuple[SubresourceKind, str, str], dict[str, Any]] = {}
        self.bootstraps: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[tuple[str, Any, str, str]] = []
        self.failures: dict[tuple[str, Any], Exception] = {}

    def _record(self, verb: str, kind: Any, name: str, namespace: str) -> None:
        self.calls.append((verb, kind, name, namespace))
        failure = self.failures.get((verb, kind))
        if failure is not None:
            raise failure

    def verbs(self, kind: Any = None) -> list[str]:
        return [verb for verb, call_kind, _, _ in self.calls if kind is None or call_kind == kind]

    def mutations(self) -> list[tuple[str, Any, str, str]]:
        return [call for call in self.calls if not call[0].startswith("get")]

    # Dependent objects

    def get(self, kind: SubresourceKind, name: str, namespace: str) -> dict[str, Any]:
        self._record("get", kind, name, namespace)
        try:
            return copy.deepcopy(self.objects[(kind, namespace, name)])
        except KeyError:
            raise NotFoundError(f"{kind.value} {namespace}/{name} not found") from None

    def create(self, kind: SubresourceKind, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        name = body["metadata"]["name"]
        self._record("create", kind, name, namespace)
        if (kind, namespace, name) in self.objects:
            raise PlatformError(f"{kind.value} {namespace}/{name} already exists", status=409)
        self.objects[(kind, namespace, name)] = copy.deepcopy(body)
        return copy.deepcopy(body)

    def replace(self, kind: SubresourceKind, name: str, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        self._record("replace", kind, name, namespace)
        if (kind, namespace, name) not in self.objects:
            raise NotFoundError(f"{kind.value} {namespace}/{name} not found")
        self.objects[(kind, namespace, name)] = copy.deepcopy(body)
        return copy.deepcopy(body)

    def patch(self, kind: SubresourceKind, name: str, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        self._record("patch", kind, name, namespace)
        if (kind, namespace, name) not in self.objects:
            raise NotFoundError(f"{kind.value} {namespace}/{name} not found")
        return copy.deepcopy(merge_patch(self.objects[(kind, namespace, name)], body))

    def delete(self, kind: SubresourceKind, name: str, namespace: str) -> None:
        self._record("delete", kind, name, namespace)
        if self.objects.pop((kind, namespace, name), None) is None:
            raise NotFoundError(f"{kind.value} {namespace}/{name} not found")

    # CDBootstrap resources

    def get_bootstrap(self, name: str, namespace: str) -> dict[str, Any]:
        self._record("get_bootstrap", "CDBootstrap", name, namespace)
        try:
            return copy.deepcopy(self.bootstraps[(namespace, name)])
        except KeyError:
            raise NotFoundError(f"CDBootstrap {namespace}/{name} not found") from None

    def get_bootstrap_status(self, name: str, namespace: str) -> dict[str, Any]:
        self._record("get_bootstrap_status", "CDBootstrap", name, namespace)
        try:
            return copy.deepcopy(self.bootstraps[(namespace, name)])
        except KeyError:
            raise NotFoundError(f"CDBootstrap {namespace}/{name} not found") from None

    def patch_metadata(self, name: str, namespace: str, merge_doc: dict[str, Any]) -> dict[str, Any]:
        self._record("patch_metadata", "CDBootstrap", name, namespace)
        body = self.bootstraps.get((namespace, name))
        if body is None:
            raise NotFoundError(f"CDBootstrap {namespace}/{name} not found")
        return copy.deepcopy(merge_patch(body, merge_doc))

    def patch_status(self, name: str, namespace: str, merge_doc: dict[str, Any]) -> dict[str, Any]:
        self._record("patch_status", "CDBootstrap", name, namespace)
        body = self.bootstraps.get((namespace, name))
        if body is None:
            raise NotFoundError(f"CDBootstrap {namespace}/{name} not found")
        return copy.deepcopy(merge_patch(body, merge_doc))

    # Test helpers

    def add_bootstrap(self, body: dict[str, Any]) -> dict[str, Any]:
        meta = body["metadata"]
        self.bootstraps[(meta["namespace"], meta["name"])] = body
        return body

    def add_object(self, kind: SubresourceKind, name: str, namespace: str, body: dict[str, Any] | None = None) -> None:
        body = body or {}
        body.setdefault("metadata", {"name": name, "namespace": namespace})
        self.objects[(kind, namespace, name)] = body

    def secret_data(self, name: str, namespace: str) -> dict[str, Any]:
        return self.objects[(SubresourceKind.SECRET, namespace, name)].get("data") or {}


class FakeVault:
    """Stands in for ``VaultClient``; ``secrets`` holds the vault contents."""

    def __init__(self, secrets: dict[str, str] | None = None, auth_error: Exception | None = None) -> None:
        self.secrets = secrets or {}
        self.auth_error = auth_error
        self.created_with: list[tuple[Any, str]] = []
        self.requested: list[str] = []
        self.closed = 0

    def __call__(self, settings: Any, client_secret: str) -> FakeVault:
        self.created_with.append((settings, client_secret))
        return self

    def authenticate(self) -> None:
        if self.auth_error is not None:
            raise self.auth_error

    def get_secret(self, key: str) -> str:
        self.requested.append(key)
        if key not in self.secrets:
            raise VaultSecretNotFoundError(f"Secret {key} not found")
        return self.secrets[key]

    def close(self) -> None:
        self.closed += 1


def make_body(
    name: str = "demo",
    namespace: str | None = "ns1",
    spec: dict[str, Any] | None = None,
    finalizers: list[str] | None = None,
    deletion_timestamp: str | None = None,
    status: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a raw CDBootstrap object."""
    metadata: dict[str, Any] = {"name": name, "uid": f"uid-{name}"}
    if namespace is not None:
        metadata["namespace"] = namespace
    if finalizers is not None:
        metadata["finalizers"] = finalizers
    if deletion_timestamp is not None:
        metadata["deletionTimestamp"] = deletion_timestamp
    body: dict[str, Any] = {
        "apiVersion": "cndev.nl/v1beta1",
        "kind": "CDBootstrap",
        "metadata": metadata,
        "spec": spec if spec is not None else {
            "replicas": 3,
            "url": "https://dev.azure.com/org",
            "pool": "p1",
            "keyvault": "https://kv.vault.azure.net",
            "spn": "spn-id",
            "tenant": "tenant-id",
        },
    }
    if status is not None:
        body["status"] = status
    return body


def make_resource(**kwargs: Any) -> BootstrapResource:
    return BootstrapResource.from_body(make_body(**kwargs))


def managed_resource(**kwargs: Any) -> BootstrapResource:
    """A resource that already carries the controller's finalizer."""
    kwargs.setdefault("finalizers", [FINALIZER])
    return make_resource(**kwargs)


def secret_body(name: str, namespace: str, **values: str) -> dict[str, Any]:
    return {
        "metadata": {"name": name, "namespace": namespace},
        "data": {key: encode_secret_value(value) for key, value in values.items()},
    }


@pytest.fixture
def fake_client() -> FakeResourceClient:
    return FakeResourceClient()


@pytest.fixture
def fake_vault() -> FakeVault:
    return FakeVault()


@pytest.fixture
def kopf_events(monkeypatch: pytest.MonkeyPatch) -> Mock:
    """Capture posted Kubernetes events instead of sending them."""
    event = Mock()
    monkeypatch.setattr(kopf, "event", event)
    return event
