"""Runtime observability primitives for ZiWeiEngine modules."""

from __future__ import annotations

from .metrics import (
    CHARTS_COMPUTED,
    COMPUTE_ERRORS,
    SERVICE_REQUESTS,
    STAGE_COMPUTE_DURATION,
    ensure_metrics_registered,
)

__all__ = [
    "CHARTS_COMPUTED",
    "COMPUTE_ERRORS",
    "SERVICE_REQUESTS",
    "STAGE_COMPUTE_DURATION",
    "ensure_metrics_registered",
]
