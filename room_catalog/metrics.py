"""
Prometheus metrics for the room catalog.

Tracks HTTP requests, page views, calls to the layouts API and layout
write operations.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "room_catalog_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "room_catalog_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

# Page view metrics
page_views_total = Counter(
    "room_catalog_page_views_total", "Total page views", ["page"]
)

# Layouts API metrics
layouts_api_requests_total = Counter(
    "room_catalog_layouts_api_requests_total",
    "Total requests to the layouts API",
    ["operation", "status"],
)

layouts_api_request_duration_seconds = Histogram(
    "room_catalog_layouts_api_request_duration_seconds",
    "Layouts API request duration in seconds",
    ["operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

layouts_api_errors_total = Counter(
    "room_catalog_layouts_api_errors_total",
    "Total failed requests to the layouts API",
    ["operation", "error_type"],
)

# User interaction metrics
layout_operations_total = Counter(
    "room_catalog_layout_operations_total",
    "Create, update and delete actions submitted from the UI",
    ["operation", "status"],
)


def track_request_metrics(
    method: str, endpoint: str, status_code: int, duration: float
):
    """Track HTTP request metrics."""
    http_requests_total.labels(
        method=method, endpoint=endpoint, status=status_code
    ).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
        duration
    )


def track_page_view(page: str):
    page_views_total.labels(page=page).inc()


def track_api_request(operation: str, status_code: int, duration: float):
    """Track one completed call to the layouts API."""
    layouts_api_requests_total.labels(operation=operation, status=status_code).inc()
    layouts_api_request_duration_seconds.labels(operation=operation).observe(duration)


def track_api_error(operation: str, error_type: str):
    layouts_api_errors_total.labels(operation=operation, error_type=error_type).inc()


def track_layout_operation(operation: str, success: bool):
    """Track a create, update or delete submitted from the UI."""
    status = "success" if success else "failure"
    layout_operations_total.labels(operation=operation, status=status).inc()


async def metrics_endpoint():
    """
    Prometheus metrics endpoint.

    Returns:
        Response with Prometheus metrics in text format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
