"""Reconciliation state machine for CDBootstrap resources."""

from __future__ import annotations

import time

from .. import metrics
from ..constants import (
    REQUEUE_CHANGED_SECONDS,
    REQUEUE_ERROR_SECONDS,
    REQUEUE_STEADY_SECONDS,
)
from ..exceptions import InvalidResourceError, NotFoundError, OperatorError, PlatformError
from ..models import BootstrapResource, ResourceKey, SubresourceKind
from ..orchestrator import Orchestrator
from ..services.k8s import ResourceClient
from ..services.vault import VaultClient
from ..services.vault.client import VaultClientFactory
from ..tracing import trace_span
from ..utils.context import with_correlation_id
from ..utils.errors import sanitize_exception
from ..utils.events import (
    emit_bootstrap_created,
    emit_bootstrap_deleted,
    emit_bootstrap_updated,
    emit_reconcile_failed,
)
from .actions import Action, Outcome, select_action
from .base import ControllerComponent
from .credentials import CredentialBootstrap
from .desired_state import DesiredStateComparator
from .finalizer import FinalizerProtocol
from .status import StatusReporter

# Apply order on Create; Update skips the Secret, which only the credential
# bootstrap mutates after creation.
CREATE_ORDER = (
    SubresourceKind.SECRET,
    SubresourceKind.CONFIG,
    SubresourceKind.POLICY,
    SubresourceKind.WORKLOAD,
)
UPDATE_ORDER = (
    SubresourceKind.CONFIG,
    SubresourceKind.POLICY,
    SubresourceKind.WORKLOAD,
)
DELETE_ORDER = (
    SubresourceKind.POLICY,
    SubresourceKind.CONFIG,
    SubresourceKind.SECRET,
    SubresourceKind.WORKLOAD,
)


class Reconciler(ControllerComponent):
    """Drives one CDBootstrap resource towards its declared state.

    A pass selects exactly one action and runs its steps in order. The first
    failing step aborts the pass, marks the resource as failed and schedules
    a retry after ``REQUEUE_ERROR_SECONDS``.
    """

    def __init__(self, client: ResourceClient, vault_factory: VaultClientFactory = VaultClient):
        super().__init__(client)
        self.orchestrator = Orchestrator(client)
        self.finalizer = FinalizerProtocol(client)
        self.comparator = DesiredStateComparator(client)
        self.status = StatusReporter(client)
        self.credentials = CredentialBootstrap(client, vault_factory)

    def reconcile_key(self, key: ResourceKey) -> Outcome:
        """Load the latest version of the resource behind ``key`` and reconcile it."""
        with with_correlation_id():
            if not key.namespace:
                self.logger.error(f"CDBootstrap {key.name} has no namespace, skipping")
                self._count_failure(None, InvalidResourceError(f"CDBootstrap {key.name} has no namespace"))
                return Outcome(None, False, REQUEUE_ERROR_SECONDS)

            try:
                body = self.client.get_bootstrap(key.name, key.namespace)
            except NotFoundError:
                self.logger.info(f"CDBootstrap {key} no longer exists")
                return Outcome(None, True, None)
            except PlatformError as e:
                self.logger.error(f"Loading CDBootstrap {key} failed: {sanitize_exception(e)}")
                self._count_failure(None, e)
                return Outcome(None, False, REQUEUE_ERROR_SECONDS)

            try:
                resource = BootstrapResource.from_body(body)
            except InvalidResourceError as e:
                self.logger.error(f"CDBootstrap {key} is invalid: {e}")
                self._count_failure(None, e)
                return Outcome(None, False, REQUEUE_ERROR_SECONDS)

            return self.reconcile(resource)

    def reconcile(self, resource: BootstrapResource) -> Outcome:
        """Run one reconciliation pass for ``resource``."""
        action: Action | None = None
        start_time = time.time()
        try:
            with trace_span(
                "reconcile_cdbootstrap",
                attributes={"cdbootstrap.name": resource.name, "cdbootstrap.namespace": resource.namespace},
            ):
                action = select_action(resource, self.comparator.is_in_desired_state)
                self.log_info(
                    resource,
                    f"Reconciling with action {action.value}",
                    event="reconcile",
                    reason="ActionSelected",
                    action=action.value,
                )
                requeue_after = self._dispatch(action, resource)
        except OperatorError as e:
            return self._handle_failure(resource, action, e)
        finally:
            duration = time.time() - start_time
            metrics.reconcile_duration_seconds.labels(action=action.value if action else "unknown").observe(duration)

        metrics.reconcile_total.labels(action=action.value, result="success").inc()
        if requeue_after is not None:
            metrics.requeue_total.labels(reason=action.value).inc()
        return Outcome(action, True, requeue_after)

    def _dispatch(self, action: Action, resource: BootstrapResource) -> float | None:
        if action is Action.CREATE:
            return self.create(resource)
        if action is Action.UPDATE:
            return self.update(resource)
        if action is Action.DELETE:
            return self.delete(resource)
        return self.steady_state(resource)

    def create(self, resource: BootstrapResource) -> float:
        """Claim the resource with the finalizer, then create every dependent object."""
        resource.spec.validate()
        self.finalizer.add(resource)
        for kind in CREATE_ORDER:
            self.orchestrator.apply(kind, resource.name, resource.namespace, resource.spec)
        self.status.patch(resource, True)
        emit_bootstrap_created(resource.body)
        return REQUEUE_CHANGED_SECONDS

    def update(self, resource: BootstrapResource) -> float:
        """Re-apply the ConfigMap, NetworkPolicy and Deployment."""
        resource.spec.validate()
        for kind in UPDATE_ORDER:
            self.orchestrator.apply(kind, resource.name, resource.namespace, resource.spec)
        self.status.patch(resource, True)
        emit_bootstrap_updated(resource.body, resource.spec.replicas)
        return REQUEUE_CHANGED_SECONDS

    def delete(self, resource: BootstrapResource) -> None:
        """Delete every dependent object, then release the finalizer.

        Nothing is requeued: once the finalizer is gone the platform removes
        the resource.
        """
        for kind in DELETE_ORDER:
            self.orchestrator.delete(kind, resource.name, resource.namespace)
        self.finalizer.remove(resource)
        emit_bootstrap_deleted(resource.body)
        return None

    def steady_state(self, resource: BootstrapResource) -> float:
        """Report the status and run the credential bootstrap."""
        self.status.get(resource)
        self.credentials.run(resource)
        return REQUEUE_STEADY_SECONDS

    def _count_failure(self, action: Action | None, error: OperatorError) -> None:
        metrics.error_total.labels(category=error.category, error_type=type(error).__name__).inc()
        metrics.reconcile_total.labels(action=action.value if action else "unknown", result="error").inc()
        metrics.requeue_total.labels(reason="error").inc()

    def _handle_failure(
        self,
        resource: BootstrapResource,
        action: Action | None,
        error: OperatorError,
    ) -> Outcome:
        sanitized_error = sanitize_exception(error)
        self.log_error(
            resource,
            "Reconciliation failed",
            error=error,
            event="reconcile",
            reason="ReconcileFailed",
            action=action.value if action else None,
            category=error.category,
        )
        self._count_failure(action, error)

        try:
            self.status.patch(resource, False)
        except PlatformError as status_error:
            self.log_error(resource, "Recording the failed status failed", error=status_error, reason="StatusPatchFailed")

        emit_reconcile_failed(resource.body, f"Reconciliation failed: {sanitized_error}")

        return Outcome(action, False, REQUEUE_ERROR_SECONDS)
