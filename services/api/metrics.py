"""Prometheus metrics for the order document service.

Exposes key metrics for monitoring:
- Request counts by endpoint and status
- Request duration histograms
- Document render counts, durations and sizes
- Storage outcomes by backend

Based on Prometheus best practices:
https://prometheus.io/docs/practices/naming/
"""

from prometheus_client import Counter, Histogram, generate_latest
from prometheus_client.openmetrics.exposition import CONTENT_TYPE_LATEST

# Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Rendering metrics
documents_rendered_total = Counter(
    "documents_rendered_total",
    "Total order documents rendered",
    ["role", "status"],  # seller|buyer, success|failed
)

document_render_duration_seconds = Histogram(
    "document_render_duration_seconds",
    "Browser start, paint and PDF conversion duration in seconds",
    buckets=(0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0),
)

document_size_bytes = Histogram(
    "document_size_bytes",
    "Rendered document size in bytes",
    buckets=(10240, 51200, 102400, 512000, 1048576, 5242880),  # 10KB to 5MB
)

# Storage metrics
documents_stored_total = Counter(
    "documents_stored_total",
    "Total document references issued",
    ["backend", "status"],  # object_storage|inline, success|failed
)


def get_metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics in text format.

    Returns:
        Tuple of (metrics bytes, content type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
