"""Base class with structured logging shared by the controller components."""

from __future__ import annotations

import logging
from typing import Any

from ..constants import CONTROLLER_NAME, KIND_CDBOOTSTRAP
from ..logging import log_resource_event
from ..models import BootstrapResource
from ..services.k8s import ResourceClient
from ..utils.errors import sanitize_exception


class ControllerComponent:
    """Base class for the parts of a reconciliation pass."""

    def __init__(self, client: ResourceClient):
        """Initialize the component.

        Args:
            client: Shared Kubernetes resource client
        """
        self.client = client
        self.logger = logging.getLogger(type(self).__module__)

    def _log(
        self,
        level: int,
        resource: BootstrapResource,
        message: str,
        event: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        log_resource_event(
            self.logger,
            controller=CONTROLLER_NAME,
            resource_kind=KIND_CDBOOTSTRAP,
            resource_name=resource.name,
            namespace=resource.namespace,
            uid=resource.uid,
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(
        self,
        resource: BootstrapResource,
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log an info-level structured log message."""
        self._log(logging.INFO, resource, message, event, reason, **kwargs)

    def log_warning(
        self,
        resource: BootstrapResource,
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning-level structured log message."""
        self._log(logging.WARNING, resource, message, event, reason, **kwargs)

    def log_error(
        self,
        resource: BootstrapResource,
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            resource: Resource the message is about
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields to include in the log
        """
        if error is not None:
            kwargs["error"] = sanitize_exception(error)
            kwargs["error_type"] = type(error).__name__
        self._log(logging.ERROR, resource, message, event, reason, **kwargs)
