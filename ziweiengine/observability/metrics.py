"""Prometheus metric definitions shared across ZiWeiEngine components."""

from __future__ import annotations

from collections.abc import Iterable

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

__all__ = [
    "CHARTS_COMPUTED",
    "COMPUTE_ERRORS",
    "SERVICE_REQUESTS",
    "STAGE_COMPUTE_DURATION",
    "ensure_metrics_registered",
]


STAGE_COMPUTE_DURATION = Histogram(
    "ziweiengine_stage_duration_seconds",
    "Duration of individual Zi Wei pipeline stages.",
    ("stage",),
    buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5),
    registry=None,
)

COMPUTE_ERRORS = Counter(
    "ziweiengine_compute_errors_total",
    "Total chart calculation failures grouped by stage and error type.",
    ("stage", "error"),
    registry=None,
)

CHARTS_COMPUTED = Counter(
    "ziweiengine_charts_total",
    "Total Zi Wei charts computed successfully.",
    registry=None,
)

SERVICE_REQUESTS = Counter(
    "ziweiengine_service_requests_total",
    "Chart service requests grouped by outcome.",
    ("outcome",),
    registry=None,
)


def _iter_metrics() -> Iterable[Counter | Histogram]:
    yield STAGE_COMPUTE_DURATION
    yield COMPUTE_ERRORS
    yield CHARTS_COMPUTED
    yield SERVICE_REQUESTS


def ensure_metrics_registered(
    registry: CollectorRegistry | None = None,
) -> None:
    """Register shared metrics with ``registry`` if not already present."""

    target = registry or REGISTRY
    for metric in _iter_metrics():
        try:
            target.register(metric)
        except ValueError:
            # Prometheus raises when a metric name already exists in the registry.
            continue
