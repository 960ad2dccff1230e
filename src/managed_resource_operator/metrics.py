"""Prometheus metrics for the Managed Resource Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "managed_resource_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "managed_resource_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# External API metrics
external_operations_total = Counter(
    "managed_resource_operator_external_operations_total",
    "Total number of external resource operations",
    ["kind", "operation", "result"],
)

external_operation_duration_seconds = Histogram(
    "managed_resource_operator_external_operation_duration_seconds",
    "Duration of external resource operations in seconds",
    ["kind", "operation"],
    buckets=[0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

error_total = Counter(
    "managed_resource_operator_error_total",
    "Total number of reconcile errors",
    ["kind", "error_type"],
)

# Kubernetes API metrics
api_call_total = Counter(
    "managed_resource_operator_api_call_total",
    "Total number of Kubernetes API calls",
    ["api_type", "operation", "result"],
)

# Connection secret metrics
connection_secret_published_total = Counter(
    "managed_resource_operator_connection_secret_published_total",
    "Total number of connection secret publications",
    ["kind", "result"],
)
