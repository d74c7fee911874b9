"""
Shared fixtures: stub HTTP session, PSI payload builder and recorded sleeps.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from psi_exporter.config import ExternalHTTPSettings, PageSpeedSettings
from psi_exporter.connectors.pagespeed import PageSpeedConnector
from psi_exporter.metrics.store import MetricStore

API_KEY = "test-api-key-123"

_INVALID_JSON = object()


class StubResponse:
    def __init__(self, payload: Any = None, *, status_code: int = 200) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if self._payload is _INVALID_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class StubSession:
    """
    Replays queued responses (or raises queued exceptions) in order.
    """

    def __init__(self, outcomes: list[Any]) -> None:
        self._outcomes = list(outcomes)
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> StubResponse:
        self.calls.append(kwargs)
        if not self._outcomes:
            raise AssertionError("StubSession received more requests than queued outcomes")
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def build_psi_payload(
    *,
    score: Any = 0.9,
    audits: dict[str, Any] | None = None,
) -> dict[str, Any]:
    if audits is None:
        audits = {
            "first-contentful-paint": {"numericValue": 1200.5},
            "largest-contentful-paint": {"numericValue": 2400.0},
            "cumulative-layout-shift": {"numericValue": 0.05},
            "total-blocking-time": {"numericValue": 150},
        }
    return {
        "id": "https://a.com/",
        "lighthouseResult": {
            "categories": {"performance": {"id": "performance", "score": score}},
            "audits": audits,
        },
    }


@pytest.fixture()
def api_key() -> str:
    return API_KEY


@pytest.fixture()
def psi_payload() -> Callable[..., dict[str, Any]]:
    return build_psi_payload


@pytest.fixture()
def ok_response() -> Callable[..., StubResponse]:
    def _factory(payload: Any = None, *, status_code: int = 200) -> StubResponse:
        return StubResponse(payload if payload is not None else build_psi_payload(), status_code=status_code)

    return _factory


@pytest.fixture()
def invalid_json_response() -> StubResponse:
    return StubResponse(_INVALID_JSON)


@pytest.fixture()
def make_session() -> Callable[[list[Any]], StubSession]:
    return StubSession


@pytest.fixture()
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record time.sleep calls instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr("psi_exporter.connectors.base.time.sleep", recorded.append)
    return recorded


@pytest.fixture()
def store() -> MetricStore:
    return MetricStore()


@pytest.fixture()
def http_settings() -> ExternalHTTPSettings:
    return ExternalHTTPSettings(timeout_seconds=30.0)


@pytest.fixture()
def make_connector(
    store: MetricStore,
    http_settings: ExternalHTTPSettings,
) -> Callable[[StubSession], PageSpeedConnector]:
    def _factory(session: StubSession) -> PageSpeedConnector:
        return PageSpeedConnector(
            settings=PageSpeedSettings(api_key=API_KEY),
            http_settings=http_settings,
            store=store,
            session=session,  # type: ignore[arg-type]
        )

    return _factory
