"""Prometheus metrics for the CDBootstrap Operator."""

from prometheus_client import Counter, Gauge, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "cdbootstrap_operator_reconcile_total",
    "Total number of reconciliation passes",
    ["action", "result"],
)

reconcile_duration_seconds = Histogram(
    "cdbootstrap_operator_reconcile_duration_seconds",
    "Duration of reconciliation passes in seconds",
    ["action"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

requeue_total = Counter(
    "cdbootstrap_operator_requeue_total",
    "Total number of scheduled requeues",
    ["reason"],
)

error_total = Counter(
    "cdbootstrap_operator_error_total",
    "Total number of reconciliation errors",
    ["category", "error_type"],
)

active_resources = Gauge(
    "cdbootstrap_operator_active_resources",
    "Number of CDBootstrap resources with a running reconciliation loop",
)

# Dependent object metrics
subresource_operations_total = Counter(
    "cdbootstrap_operator_subresource_operations_total",
    "Total number of dependent object operations",
    ["kind", "operation", "result"],
)

# Credential bootstrap metrics
vault_operations_total = Counter(
    "cdbootstrap_operator_vault_operations_total",
    "Total number of key vault operations",
    ["operation", "result"],
)

credential_bootstrap_total = Counter(
    "cdbootstrap_operator_credential_bootstrap_total",
    "Outcomes of the credential bootstrap pipeline",
    ["outcome"],
)

# API call metrics
api_call_total = Counter(
    "cdbootstrap_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "cdbootstrap_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

rate_limit_hits_total = Counter(
    "cdbootstrap_operator_rate_limit_hits_total",
    "Total number of rate limit hits",
    ["api_type"],
)
