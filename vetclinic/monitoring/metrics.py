"""
Prometheus metrics for the Vet Clinic Records API
"""

import time

from prometheus_client import CollectorRegistry, Counter, Histogram
from prometheus_client.exposition import generate_latest

# Create a custom registry
metrics_registry = CollectorRegistry()

# Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=metrics_registry
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=(.005, .01, .025, .05, .075, .1, .25, .5, .75, 1.0, 2.5, 5.0, 7.5, 10.0),
    registry=metrics_registry
)

# Access control metrics
authorization_denials_total = Counter(
    "authorization_denials_total",
    "Requests rejected by the access guard",
    ["reason"],
    registry=metrics_registry
)

# Document metrics
document_revisions_total = Counter(
    "document_revisions_total",
    "Document payload versions written",
    ["operation"],
    registry=metrics_registry
)

document_replace_conflicts_total = Counter(
    "document_replace_conflicts_total",
    "Optimistic replace attempts that lost a race",
    registry=metrics_registry
)

share_link_resolutions_total = Counter(
    "share_link_resolutions_total",
    "Public share-link lookups",
    ["outcome"],
    registry=metrics_registry
)


class RequestTimer:
    """Context manager recording one HTTP request"""

    def __init__(self, method: str, endpoint: str):
        self.method = method
        self.endpoint = endpoint
        self.status = "500"
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        http_requests_total.labels(
            method=self.method,
            endpoint=self.endpoint,
            status=self.status
        ).inc()
        http_request_duration_seconds.labels(
            method=self.method,
            endpoint=self.endpoint
        ).observe(duration)
        return False


def get_metrics() -> bytes:
    """Generate Prometheus metrics exposition format"""
    return generate_latest(metrics_registry)
