"""
psi_exporter/domain/targets.py

Monitoring targets and their expansion from a URL list.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class Strategy(str, Enum):
    """
    PageSpeed Insights measurement profile.
    """

    MOBILE = "mobile"
    DESKTOP = "desktop"


STRATEGY_ORDER: tuple[Strategy, ...] = (Strategy.MOBILE, Strategy.DESKTOP)


@dataclass(frozen=True)
class Target:
    """
    One (URL, strategy) pair to measure.
    """

    url: str
    strategy: Strategy


def expand_targets(urls: Iterable[str]) -> list[Target]:
    """
    Cross every non-blank URL with both strategies.

    URL order is preserved and each URL yields mobile before desktop.
    Surrounding whitespace is trimmed; blank entries are dropped.
    """

    targets: list[Target] = []
    for raw_url in urls:
        url = raw_url.strip()
        if not url:
            continue
        for strategy in STRATEGY_ORDER:
            targets.append(Target(url=url, strategy=strategy))
    return targets
