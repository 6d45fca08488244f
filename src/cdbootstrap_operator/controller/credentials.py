"""Credential bootstrap: turn an injected SPN secret into an agent token.

The agent needs ``AZP_TOKEN`` in its Secret. Operators either inject the
token directly or inject ``SPN_SECRET``, the secret of a service principal
that may read the token from an Azure Key Vault. In the second case this
pipeline authenticates to the vault, fetches the token stored under the
resource's namespace and writes it next to the SPN secret.

| token set | SPN secret set | action                                  |
|-----------|----------------|-----------------------------------------|
| no        | no             | log, nothing to do                      |
| no        | yes            | vault lookup, write AZP_TOKEN           |
| yes       | any            | log, nothing to do                      |

Vault failures are logged and leave the Secret untouched; the next
steady-state pass tries again.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .. import metrics
from ..constants import SECRET_KEY_AZP_TOKEN, SECRET_KEY_SPN_SECRET
from ..exceptions import PlatformError, VaultError
from ..models import BootstrapResource, CredentialState, SubresourceKind
from ..orchestrator import object_name
from ..services.k8s import ResourceClient
from ..services.vault import VaultClient, VaultSettings
from ..services.vault.client import VaultClientFactory
from ..tracing import trace_span
from ..utils.events import emit_token_bootstrapped, emit_vault_access_failed
from ..utils.secrets import encode_secret_value, read_secret_key, secret_value_is_set
from .base import ControllerComponent


class CredentialOutcome(str, Enum):
    """What one run of the pipeline did."""

    NO_CREDENTIALS = "no_credentials"
    TOKEN_PRESENT = "token_present"
    TOKEN_WRITTEN = "token_written"
    VAULT_FAILED = "vault_failed"


def vault_secret_name(resource: BootstrapResource) -> str:
    """Name of the vault secret holding the token for ``resource``.

    The namespace, prefixed with ``spec.oid`` when one is set.
    """
    if resource.spec.oid:
        return f"{resource.spec.oid}-{resource.namespace}"
    return resource.namespace


class CredentialBootstrap(ControllerComponent):
    """Runs the credential decision table for one resource."""

    def __init__(self, client: ResourceClient, vault_factory: VaultClientFactory = VaultClient):
        super().__init__(client)
        self.vault_factory = vault_factory

    def _read_secret(self, resource: BootstrapResource) -> dict[str, Any] | None:
        name = object_name(SubresourceKind.SECRET, resource.name)
        try:
            return self.client.get(SubresourceKind.SECRET, name, resource.namespace)
        except PlatformError as e:
            self.log_error(resource, f"Secret {name} could not be read", error=e, reason="SecretUnreadable")
            return None

    @staticmethod
    def _state(secret: dict[str, Any] | None) -> CredentialState:
        return CredentialState(
            token_set=secret_value_is_set(secret, SECRET_KEY_AZP_TOKEN),
            spn_secret_set=secret_value_is_set(secret, SECRET_KEY_SPN_SECRET),
        )

    def run(self, resource: BootstrapResource) -> CredentialOutcome:
        """Apply the decision table to the current Secret of ``resource``.

        Raises:
            PlatformError: If writing the collected token to the Secret fails
        """
        with trace_span("credential_bootstrap", attributes={"cdbootstrap.name": resource.name}):
            secret = self._read_secret(resource)
            state = self._state(secret)

            if state.token_set:
                self.log_info(
                    resource,
                    f"AZP_TOKEN value in namespace {resource.namespace} has been set, "
                    "check the pod logs to see if the agent is polling",
                    event="credentials",
                    reason="TokenPresent",
                )
                outcome = CredentialOutcome.TOKEN_PRESENT
            elif not state.spn_secret_set:
                self.log_info(
                    resource,
                    f"Inject the AZP_TOKEN in namespace {resource.namespace}, "
                    "or set the SPN_SECRET to collect a token from the vault",
                    event="credentials",
                    reason="NoCredentials",
                )
                outcome = CredentialOutcome.NO_CREDENTIALS
            else:
                outcome = self._collect_token(resource, read_secret_key(secret, SECRET_KEY_SPN_SECRET))

            metrics.credential_bootstrap_total.labels(outcome=outcome.value).inc()
            return outcome

    def _collect_token(self, resource: BootstrapResource, spn_secret: str) -> CredentialOutcome:
        settings = VaultSettings.from_spec(resource.spec)
        key = vault_secret_name(resource)
        self.log_info(
            resource,
            "SPN_SECRET has been set, testing authentication to the vault",
            event="credentials",
            reason="VaultLookup",
            vault=settings.url,
        )

        try:
            vault = self.vault_factory(settings, spn_secret)
            try:
                vault.authenticate()
                self.log_info(resource, "Connection to the vault is successful", event="credentials", reason="VaultAuthenticated")
                token = vault.get_secret(key)
            finally:
                vault.close()
        except VaultError as e:
            self.log_warning(
                resource,
                "Connection to the vault is unsuccessful",
                event="credentials",
                reason="VaultAccessFailed",
                error=str(e),
                error_type=type(e).__name__,
            )
            emit_vault_access_failed(resource.body, f"Collecting AZP_TOKEN from the vault failed: {e}")
            return CredentialOutcome.VAULT_FAILED

        secret_name = object_name(SubresourceKind.SECRET, resource.name)
        self.client.patch(
            SubresourceKind.SECRET,
            secret_name,
            resource.namespace,
            {"data": {SECRET_KEY_AZP_TOKEN: encode_secret_value(token)}},
        )
        self.log_info(
            resource,
            f"AZP_TOKEN collected from the vault and set in namespace {resource.namespace}",
            event="credentials",
            reason="TokenWritten",
        )
        emit_token_bootstrapped(resource.body)
        return CredentialOutcome.TOKEN_WRITTEN
