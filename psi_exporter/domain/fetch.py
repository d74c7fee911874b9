"""
psi_exporter/domain/fetch.py

Domain models for PageSpeed Insights fetch runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from psi_exporter.domain.targets import Target


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of one fetch for a single target.

    ``samples`` maps metric names to the values written by this fetch.
    """

    target: Target
    success: bool
    attempts: int
    samples: dict[str, float] = field(default_factory=dict)
    error: str | None = None


@dataclass(frozen=True)
class SweepSummary:
    """
    Summary for one pass over every configured target.
    """

    trigger: str
    targets: int
    succeeded: int
    failed: int
