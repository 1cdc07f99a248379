"""
Prometheus metrics collection for the Kraljic simulation.

Provides observability into session traffic, scoring latency and store health.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Histogram, start_http_server

# ============================================================================
# Session Store Metrics
# ============================================================================

sessions_created_total = Counter(
    "kraljic_sessions_created_total",
    "Total number of participant sessions created",
)

submissions_recorded_total = Counter(
    "kraljic_submissions_recorded_total",
    "Total number of Layer 1 step submissions recorded",
    ["quadrant"],
)

event_responses_recorded_total = Counter(
    "kraljic_event_responses_recorded_total",
    "Total number of Layer 2 event responses recorded",
    ["quadrant"],
)

store_errors_total = Counter(
    "kraljic_store_errors_total",
    "Total number of session store failures",
    ["operation"],
)

# ============================================================================
# Scoring Metrics
# ============================================================================

dashboards_served_total = Counter(
    "kraljic_dashboards_served_total",
    "Total number of dashboards computed",
    ["grade"],
)

rank_computations_total = Counter(
    "kraljic_rank_computations_total",
    "Total number of rank computations",
    ["outcome"],  # outcome: ranked, omitted
)

content_lookup_misses_total = Counter(
    "kraljic_content_lookup_misses_total",
    "Total number of choice lookups that matched no content",
    ["quadrant"],
)

operation_duration_seconds = Histogram(
    "kraljic_operation_duration_seconds",
    "Duration of boundary operations in seconds",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

operations_processed_total = Counter(
    "kraljic_operations_processed_total",
    "Total number of boundary operations processed",
    ["operation", "status"],  # status: success, failure
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_operation_duration(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to track boundary operation duration and outcome.

    Args:
        operation: Operation name (e.g., "get_dashboard")

    Returns:
        Decorated function that tracks duration
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            status = "success"
            try:
                return func(*args, **kwargs)
            except Exception:
                status = "failure"
                raise
            finally:
                duration = time.perf_counter() - start
                operation_duration_seconds.labels(operation=operation).observe(duration)
                operations_processed_total.labels(
                    operation=operation, status=status
                ).inc()

        return wrapper

    return decorator


def start_metrics_server(port: int = 9090) -> None:
    """
    Start Prometheus metrics HTTP server.

    Args:
        port: Port to listen on (default: 9090)
    """
    start_http_server(port)
