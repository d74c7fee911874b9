"""
psi_exporter/metrics/definitions.py

Gauge definitions republished from PageSpeed Insights responses.
"""

from __future__ import annotations

from dataclasses import dataclass

METRIC_LABELS: tuple[str, ...] = ("site", "strategy")


@dataclass(frozen=True)
class MetricDefinition:
    """
    One exported gauge and the Lighthouse field it is read from.

    ``audit_id`` is None for the category score.
    """

    name: str
    documentation: str
    audit_id: str | None = None


PERFORMANCE_SCORE = MetricDefinition(
    name="psi_performance_score",
    documentation="Performance score from PSI (0-1 scale)",
)
FIRST_CONTENTFUL_PAINT = MetricDefinition(
    name="psi_first_contentful_paint",
    documentation="First Contentful Paint in milliseconds",
    audit_id="first-contentful-paint",
)
LARGEST_CONTENTFUL_PAINT = MetricDefinition(
    name="psi_largest_contentful_paint",
    documentation="Largest Contentful Paint in milliseconds",
    audit_id="largest-contentful-paint",
)
CUMULATIVE_LAYOUT_SHIFT = MetricDefinition(
    name="psi_cumulative_layout_shift",
    documentation="Cumulative Layout Shift score",
    audit_id="cumulative-layout-shift",
)
TOTAL_BLOCKING_TIME = MetricDefinition(
    name="psi_total_blocking_time",
    documentation="Total Blocking Time in milliseconds",
    audit_id="total-blocking-time",
)

METRIC_DEFINITIONS: tuple[MetricDefinition, ...] = (
    PERFORMANCE_SCORE,
    FIRST_CONTENTFUL_PAINT,
    LARGEST_CONTENTFUL_PAINT,
    CUMULATIVE_LAYOUT_SHIFT,
    TOTAL_BLOCKING_TIME,
)

AUDIT_METRICS: tuple[MetricDefinition, ...] = tuple(
    definition for definition in METRIC_DEFINITIONS if definition.audit_id is not None
)
