"""Prometheus metrics for Learning Feed.

All metrics are module-level singletons registered on the default
``REGISTRY``.  They are safe to import from multiple modules because
prometheus_client deduplicates by metric name.

Metrics defined here:

  http_requests_total{method, path, status}
      Counter - HTTP requests handled by the FastAPI application, labelled by
      HTTP method, route template, and response status code.

  http_request_duration_seconds{method, path}
      Histogram - HTTP request latency in seconds.

  feed_requests_total{focus}
      Counter - feed listings by focus level (``all`` when unfiltered).

  content_items_completed_total{type}
      Counter - first-time completions by content type.

  xp_awarded_total
      Counter - XP credited to the user.

Usage::

    from learning_feed.api.metrics import feed_requests_total
    feed_requests_total.labels(focus="high").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by middleware in main.py)
# ---------------------------------------------------------------------------

http_requests_total: Counter = Counter(
    "http_requests_total",
    "HTTP requests handled by the FastAPI application.",
    labelnames=["method", "path", "status"],
)
"""Counter incremented after every HTTP response.

Labels:
  method: HTTP method (GET, POST, …)
  path:   route template (e.g. '/api/content/{item_id}') or 'unmatched'
  status: HTTP response status code as string (e.g. '200', '404')
"""

http_request_duration_seconds: Histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds.",
    labelnames=["method", "path"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# ---------------------------------------------------------------------------
# Feed and lifecycle metrics
# ---------------------------------------------------------------------------

feed_requests_total: Counter = Counter(
    "feed_requests_total",
    "Feed listings by focus level.",
    labelnames=["focus"],
)

content_items_completed_total: Counter = Counter(
    "content_items_completed_total",
    "First-time content completions by content type.",
    labelnames=["type"],
)
"""Not incremented when an already-completed item is completed again."""

xp_awarded_total: Counter = Counter(
    "xp_awarded_total",
    "Total XP credited for completions.",
)


# ---------------------------------------------------------------------------
# Response helper
# ---------------------------------------------------------------------------


def get_metrics_response() -> tuple[bytes, str]:
    """Generate a Prometheus text-format metrics response.

    Returns:
        A tuple of (body_bytes, content_type_string) suitable for constructing
        a FastAPI ``Response`` object.
    """
    from prometheus_client import CONTENT_TYPE_LATEST, generate_latest  # noqa: PLC0415

    return generate_latest(), CONTENT_TYPE_LATEST
