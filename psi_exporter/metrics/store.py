"""
psi_exporter/metrics/store.py

Thread-safe latest-value store backed by Prometheus gauges.
"""

from __future__ import annotations

from collections.abc import Sequence

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from psi_exporter.metrics.definitions import METRIC_DEFINITIONS, METRIC_LABELS, MetricDefinition


class UnknownMetricError(KeyError):
    """
    Raised when a metric name is not registered in the store.
    """


class MetricStore:
    """
    Latest value per (metric, site, strategy), exported in Prometheus text format.

    Each store owns a private registry. Gauge writes are guarded by
    prometheus_client's per-child locks, so concurrent sweeps and on-demand
    fetches may call ``set`` freely; same-key writes are last-write-wins.
    """

    def __init__(
        self,
        *,
        definitions: Sequence[MetricDefinition] = METRIC_DEFINITIONS,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self._registry = registry or CollectorRegistry(auto_describe=True)
        self._gauges: dict[str, Gauge] = {
            definition.name: Gauge(
                definition.name,
                definition.documentation,
                labelnames=METRIC_LABELS,
                registry=self._registry,
            )
            for definition in definitions
        }

    @property
    def metric_names(self) -> tuple[str, ...]:
        return tuple(self._gauges)

    def set(self, metric_name: str, *, site: str, strategy: str, value: float) -> None:
        """
        Record the latest value for one labeled series.
        """

        self._gauge(metric_name).labels(site=site, strategy=strategy).set(value)

    def get(self, metric_name: str, *, site: str, strategy: str) -> float | None:
        """
        Return the latest value for one labeled series, or None if never written.
        """

        self._gauge(metric_name)
        return self._registry.get_sample_value(
            metric_name,
            labels={"site": site, "strategy": strategy},
        )

    def export(self) -> bytes:
        """
        Render every gauge in the Prometheus text exposition format.
        """

        return generate_latest(self._registry)

    def _gauge(self, metric_name: str) -> Gauge:
        try:
            return self._gauges[metric_name]
        except KeyError as exc:
            raise UnknownMetricError(metric_name) from exc
