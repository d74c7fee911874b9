"""
psi_exporter/api/routers package marker.
"""

from psi_exporter.api.routers.execute import router as execute_router
from psi_exporter.api.routers.metrics import router as metrics_router

__all__ = [
    "execute_router",
    "metrics_router",
]
