"""Main entry point for the CDBootstrap Operator."""

from __future__ import annotations

import logging
import os
from typing import Any

import kopf

from . import handlers  # noqa: F401
from . import health
from . import logging as structured_logging
from .controller import Driver, Reconciler
from .services.k8s import ResourceClient
from .tracing import initialize_tracing

logger = logging.getLogger(__name__)


@kopf.on.startup()
async def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator and create the reconciliation driver."""
    # Set up structured JSON logging
    structured_logging.setup_structured_logging()
    initialize_tracing()

    settings.posting.level = logging.INFO
    settings.networking.request_timeout = 30.0

    client = ResourceClient.from_environment()
    driver = Driver(Reconciler(client))
    memo.driver = driver

    # Start metrics HTTP server with health check endpoints on port 8080
    metrics_port = int(os.getenv("METRICS_PORT", "8080"))
    memo.http_server = health.start_http_server(metrics_port, readiness_check=driver.is_ready)
    logger.info(f"Serving metrics and health checks on port {metrics_port}")


@kopf.on.cleanup()
async def shutdown(memo: kopf.Memo, **_: Any) -> None:
    """Stop the reconciliation loops and the HTTP server."""
    driver = memo.get("driver")
    if driver is not None:
        driver.shutdown()
    server = memo.get("http_server")
    if server is not None:
        server.shutdown()


def run() -> None:
    """Run the operator, watching WATCH_NAMESPACE or the whole cluster."""
    namespaces = [ns.strip() for ns in os.getenv("WATCH_NAMESPACE", "").split(",") if ns.strip()]
    if namespaces:
        kopf.run(standalone=True, namespaces=namespaces)
    else:
        kopf.run(standalone=True, clusterwide=True)


if __name__ == "__main__":
    run()
