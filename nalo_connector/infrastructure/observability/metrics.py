"""Prometheus metrics for monitoring connector runs, documents and Nalo API failures"""

from prometheus_client import Counter, Histogram

# Run metrics
sync_counter = Counter(
    "nalo_sync_total",
    "Total connector runs",
    ["outcome"],  # success | LOGIN_FAILED | VENDOR_DOWN | error
)

# Document metrics
documents_fetched_counter = Counter(
    "nalo_documents_fetched_total",
    "Documents downloaded from Nalo",
    ["category"],  # signed | transactional
)

bills_ignored_counter = Counter(
    "nalo_bills_ignored_total",
    "Transactional documents dropped as not being transfer invoices",
)

# Nalo API metrics
request_failures_counter = Counter(
    "nalo_request_failures_total",
    "Failed Nalo API calls",
    ["endpoint"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_sync(outcome: str) -> None:
    """Record the outcome of one connector run"""
    sync_counter.labels(outcome=outcome).inc()
