"""Prometheus metrics for monitoring.

Tracks request latency, recommendation and cost projection timings,
conflict warnings, and cache effectiveness.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, Info

# Application info
APP_INFO = Info("stackfast_app", "StackFast application info")

# HTTP metrics
HTTP_REQUESTS_TOTAL = Counter(
    "stackfast_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "stackfast_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Recommendation metrics
RECOMMENDATION_DURATION = Histogram(
    "stackfast_recommendation_duration_seconds",
    "Stack recommendation duration",
)

RECOMMENDATIONS_TOTAL = Counter(
    "stackfast_recommendations_total",
    "Stack recommendations generated",
    ["project_type", "complexity"],
)

TOOL_CONFLICTS = Counter(
    "stackfast_tool_conflicts_total",
    "Tools skipped because of category conflicts",
)

# Cost projection metrics
COST_PROJECTION_DURATION = Histogram(
    "stackfast_cost_projection_duration_seconds",
    "Cost projection duration",
)

COST_CONFIDENCE = Counter(
    "stackfast_cost_confidence_total",
    "Cost projections by confidence level",
    ["confidence"],
)

# Catalog
CATALOG_TOOLS = Gauge(
    "stackfast_catalog_tools",
    "Tools in the loaded catalog",
)

# Cache
RECOMMENDATION_CACHE_HITS = Counter(
    "stackfast_recommendation_cache_hits_total",
    "Recommendation cache hits",
)

RECOMMENDATION_CACHE_MISSES = Counter(
    "stackfast_recommendation_cache_misses_total",
    "Recommendation cache misses",
)

# Rate limiting
RATE_LIMIT_HITS = Counter(
    "stackfast_rate_limit_hits_total",
    "Total rate limit hits",
    ["endpoint", "limit_type"],
)
