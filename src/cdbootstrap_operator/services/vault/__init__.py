"""Azure Key Vault client."""

from .client import VaultClient, VaultSettings

__all__ = ["VaultClient", "VaultSettings"]
