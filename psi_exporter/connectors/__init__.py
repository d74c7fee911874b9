"""
psi_exporter/connectors package marker.
"""

from psi_exporter.connectors.base import BaseConnector, ConnectorRequestError, InvalidResponseError
from psi_exporter.connectors.pagespeed import PageSpeedConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "InvalidResponseError",
    "PageSpeedConnector",
]
