"""
psi_exporter/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_FETCH_MINUTES = "0,30"
DEFAULT_PORT = 2112
DEFAULT_PSI_BASE_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"


class ConfigurationError(RuntimeError):
    """
    Raised when required startup configuration is missing or invalid.
    """


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def split_urls(raw: str | None) -> list[str]:
    """
    Split a comma-separated URL list. Blank handling is left to target expansion.
    """

    if not raw:
        return []
    return raw.split(",")


def parse_minutes(raw: str | None) -> list[int]:
    """
    Parse a comma-separated list of minutes-of-hour.

    Items that are not integers or fall outside [0, 59] are discarded.
    Order of first appearance is kept; duplicates are dropped.
    """

    minutes: list[int] = []
    for token in (raw or "").split(","):
        token = token.strip()
        if not token:
            continue
        try:
            value = int(token)
        except ValueError:
            logger.warning("Ignoring non-integer fetch minute %r", token)
            continue
        if not 0 <= value <= 59:
            logger.warning("Ignoring out-of-range fetch minute %d", value)
            continue
        if value not in minutes:
            minutes.append(value)

    if not minutes:
        logger.warning("No valid fetch minutes specified; no scheduled fetch will occur.")
    return minutes


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Outbound HTTP behavior for the PageSpeed Insights connector.
    """

    timeout_seconds: float = 60.0
    max_attempts: int = 5
    backoff_initial_seconds: float = 2.0
    backoff_multiplier: float = 2.0


@dataclass(frozen=True)
class PageSpeedSettings:
    """
    PageSpeed Insights API settings.
    """

    api_key: str
    base_url: str = DEFAULT_PSI_BASE_URL


@dataclass(frozen=True)
class SchedulerSettings:
    """
    Sweep scheduling settings.
    """

    fetch_minutes: tuple[int, ...] = (0, 30)
    run_on_start: bool = False
    pacing_seconds: float = 2.0
    # None means the host's local wall-clock time.
    timezone: str | None = None


@dataclass(frozen=True)
class ExporterSettings:
    """
    Top-level exporter settings.
    """

    pagespeed: PageSpeedSettings
    urls: tuple[str, ...]
    scheduler: SchedulerSettings = field(default_factory=SchedulerSettings)
    http: ExternalHTTPSettings = field(default_factory=ExternalHTTPSettings)
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def _is_known_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("PSI_HTTP_TIMEOUT_SECONDS", 60.0)),
        max_attempts=max(1, _get_int_env("PSI_HTTP_MAX_ATTEMPTS", 5)),
        backoff_initial_seconds=max(0.0, _get_float_env("PSI_HTTP_BACKOFF_INITIAL_SECONDS", 2.0)),
        backoff_multiplier=max(1.0, _get_float_env("PSI_HTTP_BACKOFF_MULTIPLIER", 2.0)),
    )


def load_exporter_settings(
    *,
    api_key: str | None = None,
    urls: str | None = None,
    minutes: str | None = None,
    port: int | None = None,
    host: str | None = None,
    run_on_start: bool | None = None,
) -> ExporterSettings:
    """
    Build exporter settings from environment variables, with explicit overrides.

    Raises ConfigurationError listing every missing required value so the
    operator can fix all problems in one restart cycle.
    """

    resolved_api_key = (api_key or "").strip() or _get_optional_str_env("PSI_API_KEY")
    resolved_urls = (urls or "").strip() or _get_optional_str_env("PSI_URLS")

    errors: list[str] = []
    if not resolved_api_key:
        errors.append("API key is not set. Provide --apikey or PSI_API_KEY.")

    url_list = tuple(url.strip() for url in split_urls(resolved_urls) if url.strip())
    if not url_list:
        errors.append("No URLs configured. Provide --urls or PSI_URLS.")

    timezone = _get_optional_str_env("PSI_SCHEDULER_TIMEZONE")
    if timezone and not _is_known_timezone(timezone):
        errors.append(f"PSI_SCHEDULER_TIMEZONE '{timezone}' is not a known timezone.")

    if errors:
        raise ConfigurationError(
            "Startup validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )

    raw_minutes = minutes if minutes is not None else _get_str_env("PSI_FETCH_MINUTES", DEFAULT_FETCH_MINUTES)

    return ExporterSettings(
        pagespeed=PageSpeedSettings(
            api_key=resolved_api_key,
            base_url=_get_str_env("PSI_API_BASE_URL", DEFAULT_PSI_BASE_URL),
        ),
        urls=url_list,
        scheduler=SchedulerSettings(
            fetch_minutes=tuple(parse_minutes(raw_minutes)),
            run_on_start=(
                run_on_start if run_on_start is not None else _get_bool_env("PSI_INITIAL_FETCH", False)
            ),
            pacing_seconds=max(0.0, _get_float_env("PSI_SWEEP_PACING_SECONDS", 2.0)),
            timezone=timezone,
        ),
        http=get_external_http_settings(),
        host=host or _get_str_env("HOST", "0.0.0.0"),
        port=port if port is not None else _get_int_env("PORT", DEFAULT_PORT),
        log_level=_get_str_env("LOG_LEVEL", "INFO").upper(),
    )
