"""Structured JSON logging for the CDBootstrap Operator."""

import json
import logging
import sys
from typing import Any

from .utils.context import correlation_id

# Credential keys that may reach a log call as extra fields
REDACTED_FIELDS = {"AZP_TOKEN", "SPN_SECRET", "client_secret", "token"}

# The Azure SDK logs every HTTP request at INFO
NOISY_LOGGERS = ("azure", "urllib3")


def setup_structured_logging(level: int = logging.INFO) -> None:
    """Log one JSON document per line to stdout."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured event about one resource, tagged with the pass's correlation id."""
    record = {
        "controller": controller,
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        "message": message,
    }
    corr_id = correlation_id.get()
    if corr_id:
        record["correlation_id"] = corr_id
    for key, value in kwargs.items():
        record[key] = "***REDACTED***" if key in REDACTED_FIELDS else value
    logger.log(level, json.dumps(record, default=str))
