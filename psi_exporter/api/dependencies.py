"""
psi_exporter/api/dependencies.py

Shared FastAPI dependencies resolving runtime collaborators from app state.
"""

from __future__ import annotations

from fastapi import Request

from psi_exporter.metrics.store import MetricStore
from psi_exporter.services.on_demand import OnDemandFetchService


def get_metric_store(request: Request) -> MetricStore:
    return request.app.state.metric_store


def get_on_demand_service(request: Request) -> OnDemandFetchService:
    return request.app.state.on_demand_service

