"""
psi_exporter/api/routers/execute.py

On-demand PageSpeed Insights fetch endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from psi_exporter.api.dependencies import get_on_demand_service
from psi_exporter.schemas.execute import ExecuteResponse
from psi_exporter.services.on_demand import InvalidTargetError, OnDemandFetchService

router = APIRouter(tags=["execute"])


@router.get("/execute", response_model=ExecuteResponse)
def execute(
    url: str | None = Query(default=None, description="Page URL to measure"),
    strategy: str | None = Query(default=None, description="mobile or desktop"),
    service: OnDemandFetchService = Depends(get_on_demand_service),
) -> ExecuteResponse:
    """
    Fetch one URL/strategy now and return the values written to the gauges.

    Blocks until the fetch, including retries, completes.
    """

    if not (url and url.strip()) or not (strategy and strategy.strip()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing URL or strategy",
        )

    try:
        result = service.execute(url=url, strategy=strategy)
    except InvalidTargetError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return ExecuteResponse(
        url=result.target.url,
        strategy=result.target.strategy.value,
        success=result.success,
        attempts=result.attempts,
        metrics=dict(result.samples),
        error=result.error,
    )
