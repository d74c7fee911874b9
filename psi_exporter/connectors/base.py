"""
psi_exporter/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

import requests

from psi_exporter.config import ExternalHTTPSettings
from psi_exporter.logging_utils import log_event

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConnectorRequestError(RuntimeError):
    """
    Raised when a connector cannot fetch data after retries.
    """

    def __init__(self, message: str, *, attempts: int = 0) -> None:
        super().__init__(message)
        self.attempts = attempts


class InvalidResponseError(ConnectorRequestError):
    """
    Raised when a response body is not valid JSON or lacks required fields.
    """


class BaseConnector:
    """
    Shared request loop for external API connectors.

    Every failed attempt (transport error, timeout, non-200 status, undecodable
    body) is retried after an exponentially growing delay until the attempt
    budget is spent.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        secrets: tuple[str, ...] = (),
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._secrets = tuple(secret for secret in secrets if secret)
        self._timeout_seconds = http_settings.timeout_seconds
        self._max_attempts = max(1, http_settings.max_attempts)
        self._backoff_initial_seconds = http_settings.backoff_initial_seconds
        self._backoff_multiplier = http_settings.backoff_multiplier

    def backoff_seconds(self, attempt: int) -> float:
        """
        Delay after the given failed attempt (1-based).
        """

        return self._backoff_initial_seconds * (self._backoff_multiplier ** (attempt - 1))

    def redact(self, message: str) -> str:
        """
        Mask configured secrets (API keys) in text bound for logs or callers.
        """

        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        decode: Callable[[Any], T],
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        log_fields: dict[str, Any] | None = None,
    ) -> tuple[T, int]:
        """
        Execute an HTTP request, parse JSON and decode it, with retry support.

        Returns the decoded value and the number of attempts used. ``decode``
        signals an incomplete payload by raising InvalidResponseError.
        """

        context = log_fields or {}
        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    headers=headers,
                    timeout=self._timeout_seconds,
                )
                if response.status_code != 200:
                    raise requests.HTTPError(
                        f"Unexpected HTTP status code: {response.status_code}",
                        response=response,
                    )
                try:
                    payload = response.json()
                except ValueError as exc:
                    raise InvalidResponseError(f"{self.source}: response was not valid JSON.") from exc
                return decode(payload), attempt
            except (requests.RequestException, InvalidResponseError) as exc:
                last_error = exc

            backoff_seconds = self.backoff_seconds(attempt)
            log_event(
                logger,
                logging.WARNING,
                "psi_fetch_retry",
                source=self.source,
                attempt=attempt,
                max_attempts=self._max_attempts,
                wait_seconds=backoff_seconds,
                error=self.redact(str(last_error)),
                **context,
            )
            time.sleep(backoff_seconds)

        raise ConnectorRequestError(
            self.redact(f"{self.source}: request failed after {self._max_attempts} attempts: {last_error}"),
            attempts=self._max_attempts,
        ) from last_error
