"""Error hierarchy for the CDBootstrap Operator.

Every failure that can abort a reconciliation pass is an ``OperatorError``.
The category tells the controller how the failure was caused; it is only used
for logging and metrics since every category follows the same error requeue.
"""

from __future__ import annotations


class OperatorError(Exception):
    """Base error class for all operator-related exceptions."""

    category = "operator"

    def __init__(self, message: str, cause: Exception | None = None):
        """Initialize operator error.

        Args:
            message: Human-readable error description
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.cause = cause


class PlatformError(OperatorError):
    """A Kubernetes API call failed (network, authorization, conflict)."""

    category = "platform"

    def __init__(
        self,
        message: str,
        status: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.status = status


class NotFoundError(PlatformError):
    """The requested object does not exist."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message, status=404, cause=cause)


class InvalidResourceError(OperatorError):
    """The CDBootstrap resource itself is malformed (user input error)."""

    category = "validation"


class TemplateError(OperatorError):
    """A dependent object could not be constructed from its template."""

    category = "template"


class VaultError(OperatorError):
    """Base error for failures talking to the key vault."""

    category = "vault"


class VaultAuthenticationError(VaultError):
    """The service principal could not authenticate against the vault."""


class VaultSecretNotFoundError(VaultError):
    """The requested secret does not exist in the vault."""
