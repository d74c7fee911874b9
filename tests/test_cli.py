from __future__ import annotations

import pytest

from psi_exporter import cli

_ENV_VARS = ("PSI_API_KEY", "PSI_URLS", "PSI_FETCH_MINUTES", "PSI_INITIAL_FETCH", "PORT", "HOST")


@pytest.fixture()
def served(monkeypatch: pytest.MonkeyPatch) -> list[dict]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    calls: list[dict] = []

    def _run(application, **kwargs) -> None:
        calls.append({"app": application, **kwargs})

    monkeypatch.setattr(cli.uvicorn, "run", _run)
    return calls


def test_missing_required_flags_exit_before_serving(served) -> None:
    assert cli.main([]) == 1
    assert served == []


def test_flags_configure_and_serve(served) -> None:
    exit_code = cli.main(["--apikey", "k", "--urls", "https://a.com,https://b.com", "--port", "9200"])

    assert exit_code == 0
    assert len(served) == 1
    assert served[0]["port"] == 9200
    assert served[0]["host"] == "0.0.0.0"
    application = served[0]["app"]
    assert application.state.settings.urls == ("https://a.com", "https://b.com")
    assert application.state.settings.scheduler.run_on_start is False
    assert len(application.state.sweep.targets) == 4


def test_initial_flag_enables_startup_sweep(served) -> None:
    cli.main(["--apikey", "k", "--urls", "https://a.com", "--initial"])

    assert served[0]["app"].state.settings.scheduler.run_on_start is True
