"""
psi_exporter/metrics package marker.
"""

from psi_exporter.metrics.definitions import (
    AUDIT_METRICS,
    METRIC_DEFINITIONS,
    PERFORMANCE_SCORE,
    MetricDefinition,
)
from psi_exporter.metrics.store import MetricStore, UnknownMetricError

__all__ = [
    "AUDIT_METRICS",
    "METRIC_DEFINITIONS",
    "PERFORMANCE_SCORE",
    "MetricDefinition",
    "MetricStore",
    "UnknownMetricError",
]
