"""
psi_exporter/services/on_demand.py

Single-target fetches requested by external callers.
"""

from __future__ import annotations

import logging

from psi_exporter.connectors.pagespeed import PageSpeedConnector
from psi_exporter.domain.fetch import FetchResult
from psi_exporter.domain.targets import Strategy, Target

logger = logging.getLogger(__name__)


class InvalidTargetError(ValueError):
    """
    Raised when an on-demand request names an empty URL or unknown strategy.
    """


class OnDemandFetchService:
    """
    Builds an ad-hoc target and runs the connector synchronously.

    Independent of the scheduler: no pacing delay and no locking beyond the
    metric store's own.
    """

    def __init__(self, *, connector: PageSpeedConnector) -> None:
        self._connector = connector

    @staticmethod
    def build_target(url: str, strategy: str) -> Target:
        clean_url = url.strip()
        if not clean_url:
            raise InvalidTargetError("URL must not be empty.")
        try:
            parsed_strategy = Strategy(strategy.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(item.value for item in Strategy)
            raise InvalidTargetError(
                f"Unknown strategy {strategy!r}. Allowed values: {allowed}."
            ) from exc
        return Target(url=clean_url, strategy=parsed_strategy)

    def execute(self, *, url: str, strategy: str) -> FetchResult:
        """
        Fetch one target with the full retry policy and return its result.
        """

        target = self.build_target(url, strategy)
        logger.info("On-demand fetch requested site=%s strategy=%s", target.url, target.strategy.value)
        return self._connector.fetch(target)
