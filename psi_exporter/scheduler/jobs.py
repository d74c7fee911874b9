"""
psi_exporter/scheduler/jobs.py

APScheduler-based sweep scheduler for PageSpeed Insights collection.

Timelines
---------
  startup_sweep: one full sweep right after boot, only when run-on-start is set
  minute_tick:   fires at every wall-clock minute; sweeps when the
                 minute-of-hour is one of the configured fetch minutes

A sweep fetches every target in order, pausing a fixed pacing delay after
each one to avoid bursting the external API. Sweeps are not mutually
exclusive: the startup sweep, a scheduled sweep and on-demand fetches may
overlap and share only the metric store.

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable, Sequence
from datetime import datetime, tzinfo
from apscheduler.schedulers.background import BackgroundScheduler

from psi_exporter.connectors.pagespeed import PageSpeedConnector
from psi_exporter.domain.fetch import SweepSummary
from psi_exporter.domain.targets import Target
from psi_exporter.logging_utils import log_event

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sweep
# ---------------------------------------------------------------------------


class SweepRunner:
    """
    Runs the connector over every target, serially, with pacing between calls.
    """

    def __init__(
        self,
        *,
        connector: PageSpeedConnector,
        targets: Sequence[Target],
        pacing_seconds: float = 2.0,
    ) -> None:
        self._connector = connector
        self._targets = tuple(targets)
        self._pacing_seconds = max(0.0, pacing_seconds)

    @property
    def targets(self) -> tuple[Target, ...]:
        return self._targets

    def run(self, trigger: str = "manual") -> SweepSummary:
        """
        Fetch every target once. A failing target never stops the sweep.
        """

        log_event(
            logger,
            logging.INFO,
            "psi_sweep_started",
            trigger=trigger,
            targets=len(self._targets),
        )
        succeeded = 0
        failed = 0
        for target in self._targets:
            try:
                result = self._connector.fetch(target)
            except Exception as exc:  # noqa: BLE001
                logger.exception(
                    "Sweep: unexpected fetch failure site=%s strategy=%s: %s",
                    target.url,
                    target.strategy.value,
                    exc,
                )
                failed += 1
            else:
                if result.success:
                    succeeded += 1
                else:
                    failed += 1
            time.sleep(self._pacing_seconds)

        summary = SweepSummary(
            trigger=trigger,
            targets=len(self._targets),
            succeeded=succeeded,
            failed=failed,
        )
        log_event(
            logger,
            logging.INFO,
            "psi_sweep_completed",
            trigger=trigger,
            targets=summary.targets,
            succeeded=summary.succeeded,
            failed=summary.failed,
        )
        return summary


# ---------------------------------------------------------------------------
# Minute matching
# ---------------------------------------------------------------------------


class MinuteTrigger:
    """
    Starts a sweep when a tick lands on a configured minute-of-hour.

    Each wall-clock minute fires at most once, even if ticked repeatedly.
    Without a timezone the minute is read from local time.
    """

    def __init__(
        self,
        *,
        minutes: Iterable[int],
        sweep: SweepRunner,
        timezone: tzinfo | None = None,
    ) -> None:
        self._minutes = frozenset(minute for minute in minutes if 0 <= minute <= 59)
        self._sweep = sweep
        self._timezone = timezone
        self._last_fired: datetime | None = None
        self._lock = threading.Lock()

    @property
    def minutes(self) -> frozenset[int]:
        return self._minutes

    def tick(self, now: datetime | None = None) -> SweepSummary | None:
        """
        Run a sweep if ``now`` matches a fetch minute not already handled.
        """

        current = now or self._now()
        if current.minute not in self._minutes:
            return None

        slot = current.replace(second=0, microsecond=0)
        with self._lock:
            if self._last_fired == slot:
                logger.debug("Scheduler: minute %02d already handled", current.minute)
                return None
            self._last_fired = slot

        logger.info("Minute match %d: fetching...", current.minute)
        return self._sweep.run(trigger=f"minute:{current.minute:02d}")

    def _now(self) -> datetime:
        if self._timezone is None:
            return datetime.now().astimezone()
        return datetime.now(tz=self._timezone)


# ---------------------------------------------------------------------------
# Scheduler factory
# ---------------------------------------------------------------------------


def build_scheduler(
    *,
    sweep: SweepRunner,
    minute_trigger: MinuteTrigger,
    run_on_start: bool,
    timezone: str | None = None,
) -> BackgroundScheduler:
    """
    Build and register the sweep jobs.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    The caller must call ``.start()`` and ``.shutdown()`` at the
    appropriate lifecycle points.
    """

    # Without a timezone APScheduler runs on the host's local zone.
    scheduler = BackgroundScheduler(timezone=timezone) if timezone else BackgroundScheduler()

    scheduler.add_job(
        minute_trigger.tick,
        trigger="cron",
        minute="*",
        id="minute_tick",
        name="Per-minute fetch check",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=30,
    )
    if run_on_start:
        # A date trigger without run_date fires once, immediately.
        scheduler.add_job(
            sweep.run,
            trigger="date",
            kwargs={"trigger": "startup"},
            id="startup_sweep",
            name="Startup sweep",
            replace_existing=True,
            misfire_grace_time=None,
        )

    return scheduler
