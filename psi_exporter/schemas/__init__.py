"""
psi_exporter/schemas package marker.
"""

from psi_exporter.schemas.execute import ExecuteResponse, HealthResponse
from psi_exporter.schemas.pagespeed import PageSpeedResponse

__all__ = [
    "ExecuteResponse",
    "HealthResponse",
    "PageSpeedResponse",
]
