"""
psi_exporter/services package marker.
"""

from psi_exporter.services.on_demand import InvalidTargetError, OnDemandFetchService

__all__ = [
    "InvalidTargetError",
    "OnDemandFetchService",
]
