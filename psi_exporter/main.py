"""
psi_exporter/main.py

FastAPI application factory.

Wires the metric store, PageSpeed connector, sweep runner and on-demand
service into app state. The lifespan owns the sweep scheduler.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo

import requests
from fastapi import FastAPI

from psi_exporter.config import ExporterSettings, load_exporter_settings
from psi_exporter.connectors.pagespeed import PageSpeedConnector
from psi_exporter.domain.targets import expand_targets
from psi_exporter.logging_utils import configure_logging
from psi_exporter.metrics.store import MetricStore
from psi_exporter.scheduler.jobs import MinuteTrigger, SweepRunner, build_scheduler
from psi_exporter.schemas.execute import HealthResponse
from psi_exporter.services.on_demand import OnDemandFetchService

logger = logging.getLogger(__name__)


def _build_lifespan(
    *,
    sweep: SweepRunner,
    minute_trigger: MinuteTrigger,
    settings: ExporterSettings,
    enable_scheduler: bool,
):
    @asynccontextmanager
    async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
        """Start the sweep scheduler on boot; shut it down on exit."""
        if not enable_scheduler:
            yield
            return

        scheduler = build_scheduler(
            sweep=sweep,
            minute_trigger=minute_trigger,
            run_on_start=settings.scheduler.run_on_start,
            timezone=settings.scheduler.timezone,
        )
        scheduler.start()
        application.state.scheduler = scheduler
        logger.info(
            "Scheduler started with %d jobs targets=%d fetch_minutes=%s",
            len(scheduler.get_jobs()),
            len(sweep.targets),
            sorted(minute_trigger.minutes),
        )
        try:
            yield
        finally:
            # In-flight sweeps have no cancellation point; do not block exit on them.
            scheduler.shutdown(wait=False)
            logger.info("Scheduler shut down")

    return _lifespan


def create_app(
    settings: ExporterSettings | None = None,
    *,
    session: requests.Session | None = None,
    enable_scheduler: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Raises ConfigurationError when the API key or URL list is missing,
    before anything is bound or scheduled.
    """

    settings = settings or load_exporter_settings()
    configure_logging(settings.log_level)

    store = MetricStore()
    targets = expand_targets(settings.urls)
    connector = PageSpeedConnector(
        settings=settings.pagespeed,
        http_settings=settings.http,
        store=store,
        session=session,
    )
    sweep = SweepRunner(
        connector=connector,
        targets=targets,
        pacing_seconds=settings.scheduler.pacing_seconds,
    )
    minute_trigger = MinuteTrigger(
        minutes=settings.scheduler.fetch_minutes,
        sweep=sweep,
        timezone=ZoneInfo(settings.scheduler.timezone) if settings.scheduler.timezone else None,
    )

    application = FastAPI(
        title="PSI Exporter",
        version="1.0.0",
        lifespan=_build_lifespan(
            sweep=sweep,
            minute_trigger=minute_trigger,
            settings=settings,
            enable_scheduler=enable_scheduler,
        ),
    )
    application.state.settings = settings
    application.state.metric_store = store
    application.state.sweep = sweep
    application.state.on_demand_service = OnDemandFetchService(connector=connector)

    from psi_exporter.api.routers import execute_router, metrics_router

    application.include_router(metrics_router)
    application.include_router(execute_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse(
            status="ok",
            targets=len(targets),
            fetch_minutes=sorted(minute_trigger.minutes),
        )

    return application
