"""
psi_exporter/domain package marker.
"""

from psi_exporter.domain.fetch import FetchResult, SweepSummary
from psi_exporter.domain.targets import STRATEGY_ORDER, Strategy, Target, expand_targets

__all__ = [
    "FetchResult",
    "STRATEGY_ORDER",
    "Strategy",
    "SweepSummary",
    "Target",
    "expand_targets",
]
