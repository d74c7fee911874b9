"""
psi_exporter/api/routers/metrics.py

Prometheus scrape endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST

from psi_exporter.api.dependencies import get_metric_store
from psi_exporter.metrics.store import MetricStore

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
def metrics(store: MetricStore = Depends(get_metric_store)) -> Response:
    return Response(content=store.export(), media_type=CONTENT_TYPE_LATEST)
