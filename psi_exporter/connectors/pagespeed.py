"""
psi_exporter/connectors/pagespeed.py

PageSpeed Insights connector: one measurement per target, republished as gauges.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from psi_exporter.config import ExternalHTTPSettings, PageSpeedSettings
from psi_exporter.connectors.base import BaseConnector, ConnectorRequestError, InvalidResponseError
from psi_exporter.domain.fetch import FetchResult
from psi_exporter.domain.targets import Target
from psi_exporter.logging_utils import log_event
from psi_exporter.metrics.definitions import AUDIT_METRICS, PERFORMANCE_SCORE
from psi_exporter.metrics.store import MetricStore
from psi_exporter.schemas.pagespeed import PageSpeedResponse

logger = logging.getLogger(__name__)


class PageSpeedConnector(BaseConnector):
    """
    Fetches Lighthouse results for a target and writes them to the metric store.
    """

    def __init__(
        self,
        *,
        settings: PageSpeedSettings,
        http_settings: ExternalHTTPSettings,
        store: MetricStore,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            source="pagespeed_insights",
            http_settings=http_settings,
            session=session,
            secrets=(settings.api_key,),
        )
        self._settings = settings
        self._store = store

    def fetch(self, target: Target) -> FetchResult:
        """
        Measure one target, retrying transient failures.

        Never raises for request or payload problems; a target that exhausts
        its attempts yields a failed result and leaves the store untouched.
        """

        site = target.url
        strategy = target.strategy.value
        log_event(logger, logging.INFO, "psi_fetch_started", site=site, strategy=strategy)

        try:
            report, attempts = self._request_json(
                method="GET",
                url=self._settings.base_url,
                params={"url": site, "strategy": strategy, "key": self._settings.api_key},
                decode=self._decode_report,
                log_fields={"site": site, "strategy": strategy},
            )
        except ConnectorRequestError as exc:
            log_event(
                logger,
                logging.ERROR,
                "psi_fetch_failed",
                site=site,
                strategy=strategy,
                attempts=exc.attempts,
                error=str(exc),
            )
            return FetchResult(target=target, success=False, attempts=exc.attempts, error=str(exc))

        samples = self._record(target, report)
        log_event(
            logger,
            logging.INFO,
            "psi_fetch_succeeded",
            site=site,
            strategy=strategy,
            attempts=attempts,
            metrics=samples,
        )
        return FetchResult(target=target, success=True, attempts=attempts, samples=samples)

    def _decode_report(self, payload: Any) -> PageSpeedResponse:
        try:
            return PageSpeedResponse.model_validate(payload)
        except ValidationError as exc:
            missing = ", ".join(
                ".".join(str(part) for part in error["loc"]) or "<root>" for error in exc.errors()
            )
            raise InvalidResponseError(
                f"{self.source}: incomplete Lighthouse result ({missing})."
            ) from exc

    def _record(self, target: Target, report: PageSpeedResponse) -> dict[str, float]:
        """
        Write each available field independently; absent audits are skipped.
        """

        site = target.url
        strategy = target.strategy.value
        samples: dict[str, float] = {PERFORMANCE_SCORE.name: report.performance_score}

        for definition in AUDIT_METRICS:
            value = report.audit_value(definition.audit_id)
            if value is None:
                log_event(
                    logger,
                    logging.WARNING,
                    "psi_metric_skipped",
                    site=site,
                    strategy=strategy,
                    metric=definition.name,
                    audit_id=definition.audit_id,
                )
                continue
            samples[definition.name] = value

        for metric_name, value in samples.items():
            self._store.set(metric_name, site=site, strategy=strategy, value=value)
        return samples
