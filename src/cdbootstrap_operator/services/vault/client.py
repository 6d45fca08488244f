"""Azure Key Vault client used to collect agent tokens."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    ResourceNotFoundError,
)
from azure.identity import ClientSecretCredential
from azure.keyvault.secrets import SecretClient

from ... import metrics
from ...exceptions import VaultAuthenticationError, VaultError, VaultSecretNotFoundError
from ...models import BootstrapSpec
from ...utils.errors import sanitize_exception
from ...utils.rate_limit import rate_limit_vault

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


@dataclass(frozen=True)
class VaultSettings:
    """Where the vault lives and which service principal reads it."""

    tenant: str
    url: str
    spn: str

    @classmethod
    def from_spec(cls, spec: BootstrapSpec) -> VaultSettings:
        return cls(tenant=spec.tenant, url=spec.keyvault, spn=spec.spn)


class VaultClient:
    """Service-principal authenticated access to one Azure Key Vault."""

    def __init__(self, settings: VaultSettings, client_secret: str) -> None:
        """Initialize the vault client.

        Args:
            settings: Tenant, vault URL and service principal (client) ID
            client_secret: Secret of the service principal

        Raises:
            VaultAuthenticationError: If the credential or client cannot be constructed
        """
        self.settings = settings
        try:
            self.credential = ClientSecretCredential(
                tenant_id=settings.tenant,
                client_id=settings.spn,
                client_secret=client_secret,
            )
            self.client = SecretClient(vault_url=settings.url, credential=self.credential)
        except (ValueError, AzureError) as e:
            metrics.vault_operations_total.labels(operation="authenticate", result="error").inc()
            raise VaultAuthenticationError(
                f"Cannot create a vault client for {settings.url}: {sanitize_exception(e)}", cause=e
            ) from e

    def _call(self, operation: str, func: Callable[[], _T]) -> _T:
        start_time = time.time()
        try:
            result = rate_limit_vault(func)()
            metrics.vault_operations_total.labels(operation=operation, result="success").inc()
            return result
        except Exception:
            metrics.vault_operations_total.labels(operation=operation, result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="vault", operation=operation).observe(duration)

    def authenticate(self) -> None:
        """Check that the service principal can authenticate and list the vault.

        Raises:
            VaultAuthenticationError: If authentication or the listing fails
        """
        def list_first() -> Any:
            return next(iter(self.client.list_properties_of_secrets()), None)

        try:
            self._call("authenticate", list_first)
        except (AzureError, ValueError) as e:
            raise VaultAuthenticationError(
                f"Authentication to {self.settings.url} failed: {sanitize_exception(e)}", cause=e
            ) from e

    def get_secret(self, key: str) -> str:
        """Fetch the value of a named secret.

        Args:
            key: Name of the secret in the vault

        Returns:
            The secret value

        Raises:
            VaultSecretNotFoundError: If the secret does not exist or has no value
            VaultAuthenticationError: If the service principal is rejected
            VaultError: On any other vault failure
        """
        try:
            secret = self._call("get_secret", lambda: self.client.get_secret(key))
        except ResourceNotFoundError as e:
            raise VaultSecretNotFoundError(f"Secret {key} not found in {self.settings.url}", cause=e) from e
        except ClientAuthenticationError as e:
            raise VaultAuthenticationError(
                f"Authentication to {self.settings.url} failed: {sanitize_exception(e)}", cause=e
            ) from e
        except AzureError as e:
            raise VaultError(f"Reading secret {key} failed: {sanitize_exception(e)}", cause=e) from e

        if not secret.value:
            raise VaultSecretNotFoundError(f"Secret {key} in {self.settings.url} has no value")
        return secret.value

    def close(self) -> None:
        self.client.close()
        self.credential.close()


VaultClientFactory = Callable[[VaultSettings, str], VaultClient]
