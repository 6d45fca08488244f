"""Kubernetes API access for the CDBootstrap resource and its dependent objects."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from ... import metrics
from ...constants import API_GROUP, API_VERSION, FIELD_MANAGER, PLURAL_CDBOOTSTRAP
from ...exceptions import NotFoundError, PlatformError
from ...models import SubresourceKind
from ...utils.errors import sanitize_exception
from ...utils.rate_limit import rate_limit_k8s

logger = logging.getLogger(__name__)

# API group attribute and method suffix per dependent object kind
_KIND_API: dict[SubresourceKind, tuple[str, str]] = {
    SubresourceKind.WORKLOAD: ("apps", "deployment"),
    SubresourceKind.CONFIG: ("core", "config_map"),
    SubresourceKind.SECRET: ("core", "secret"),
    SubresourceKind.POLICY: ("networking", "network_policy"),
}


def load_kube_config() -> None:
    """Load in-cluster configuration, falling back to the local kubeconfig."""
    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()


class ResourceClient:
    """Typed read/write access to the Kubernetes object store.

    Every method returns plain dictionaries (camelCase, as served by the API)
    and raises ``PlatformError`` or ``NotFoundError`` instead of
    ``ApiException``. The client holds no per-resource state and is shared by
    all concurrent reconciliations.
    """

    def __init__(self, api_client: client.ApiClient | None = None) -> None:
        """Initialize the client.

        Args:
            api_client: Configured Kubernetes ApiClient, the default one when omitted
        """
        self.api_client = api_client or client.ApiClient()
        self.custom = client.CustomObjectsApi(self.api_client)
        self.apps = client.AppsV1Api(self.api_client)
        self.core = client.CoreV1Api(self.api_client)
        self.networking = client.NetworkingV1Api(self.api_client)

    @classmethod
    def from_environment(cls) -> ResourceClient:
        """Create a client from in-cluster or kubeconfig credentials."""
        load_kube_config()
        return cls()

    def _call(self, operation: str, target: str, func: Callable[..., Any], **kwargs: Any) -> Any:
        """Run one API call with rate limiting, metrics and error translation."""
        start_time = time.time()
        try:
            result = rate_limit_k8s(func)(**kwargs)
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="success").inc()
        except ApiException as e:
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
            message = f"{operation} {target} failed: {e.status} {e.reason}"
            if e.status == 404:
                raise NotFoundError(message, cause=e) from e
            raise PlatformError(message, status=e.status, cause=e) from e
        except Exception as e:
            # urllib3 and connection errors surface as plain exceptions
            metrics.api_call_total.labels(api_type="k8s", operation=operation, result="error").inc()
            raise PlatformError(f"{operation} {target} failed: {sanitize_exception(e)}", cause=e) from e
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation=operation).observe(duration)
        return self.api_client.sanitize_for_serialization(result)

    def _method(self, kind: SubresourceKind, verb: str) -> Callable[..., Any]:
        api_name, suffix = _KIND_API[kind]
        return getattr(getattr(self, api_name), f"{verb}_namespaced_{suffix}")

    # Dependent objects

    def get(self, kind: SubresourceKind, name: str, namespace: str) -> dict[str, Any]:
        """Read a dependent object.

        Raises:
            NotFoundError: If the object does not exist
            PlatformError: On any other API failure
        """
        return self._call(
            f"read_{kind.name.lower()}",
            f"{kind.value} {namespace}/{name}",
            self._method(kind, "read"),
            name=name,
            namespace=namespace,
        )

    def create(self, kind: SubresourceKind, namespace: str, body: dict[str, Any]) -> dict[str, Any]:
        """Create a dependent object."""
        name = body.get("metadata", {}).get("name")
        return self._call(
            f"create_{kind.name.lower()}",
            f"{kind.value} {namespace}/{name}",
            self._method(kind, "create"),
            namespace=namespace,
            body=body,
            field_manager=FIELD_MANAGER,
        )

    def replace(
        self, kind: SubresourceKind, name: str, namespace: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        """Replace a dependent object wholesale."""
        return self._call(
            f"replace_{kind.name.lower()}",
            f"{kind.value} {namespace}/{name}",
            self._method(kind, "replace"),
            name=name,
            namespace=namespace,
            body=body,
            field_manager=FIELD_MANAGER,
        )

    def patch(
        self, kind: SubresourceKind, name: str, namespace: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        """Merge-patch a dependent object."""
        return self._call(
            f"patch_{kind.name.lower()}",
            f"{kind.value} {namespace}/{name}",
            self._method(kind, "patch"),
            name=name,
            namespace=namespace,
            body=body,
            field_manager=FIELD_MANAGER,
        )

    def delete(self, kind: SubresourceKind, name: str, namespace: str) -> None:
        """Delete a dependent object, raising NotFoundError if it does not exist."""
        self._call(
            f"delete_{kind.name.lower()}",
            f"{kind.value} {namespace}/{name}",
            self._method(kind, "delete"),
            name=name,
            namespace=namespace,
            propagation_policy="Background",
        )

    # CDBootstrap resources

    def get_bootstrap(self, name: str, namespace: str) -> dict[str, Any]:
        """Read a CDBootstrap resource."""
        return self._call(
            "get_cdbootstrap",
            f"CDBootstrap {namespace}/{name}",
            self.custom.get_namespaced_custom_object,
            group=API_GROUP,
            version=API_VERSION,
            namespace=namespace,
            plural=PLURAL_CDBOOTSTRAP,
            name=name,
        )

    def get_bootstrap_status(self, name: str, namespace: str) -> dict[str, Any]:
        """Read the status subresource of a CDBootstrap resource."""
        return self._call(
            "get_cdbootstrap_status",
            f"CDBootstrap {namespace}/{name}",
            self.custom.get_namespaced_custom_object_status,
            group=API_GROUP,
            version=API_VERSION,
            namespace=namespace,
            plural=PLURAL_CDBOOTSTRAP,
            name=name,
        )

    def patch_metadata(self, name: str, namespace: str, merge_doc: dict[str, Any]) -> dict[str, Any]:
        """Merge-patch a CDBootstrap resource (used for its metadata)."""
        return self._call(
            "patch_cdbootstrap",
            f"CDBootstrap {namespace}/{name}",
            self.custom.patch_namespaced_custom_object,
            group=API_GROUP,
            version=API_VERSION,
            namespace=namespace,
            plural=PLURAL_CDBOOTSTRAP,
            name=name,
            body=merge_doc,
            field_manager=FIELD_MANAGER,
        )

    def patch_status(self, name: str, namespace: str, merge_doc: dict[str, Any]) -> dict[str, Any]:
        """Merge-patch the status subresource of a CDBootstrap resource."""
        return self._call(
            "patch_cdbootstrap_status",
            f"CDBootstrap {namespace}/{name}",
            self.custom.patch_namespaced_custom_object_status,
            group=API_GROUP,
            version=API_VERSION,
            namespace=namespace,
            plural=PLURAL_CDBOOTSTRAP,
            name=name,
            body=merge_doc,
            field_manager=FIELD_MANAGER,
        )
