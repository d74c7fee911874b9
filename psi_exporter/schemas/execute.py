"""
psi_exporter/schemas/execute.py

Response schemas for on-demand fetch and health endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ExecuteResponse(BaseModel):
    """
    API response model for one on-demand fetch.
    """

    url: str
    strategy: str
    success: bool
    attempts: int = Field(..., ge=0)
    metrics: dict[str, float] = Field(default_factory=dict)
    error: str | None = None


class HealthResponse(BaseModel):
    """
    API response model for the liveness probe.
    """

    status: str
    targets: int = Field(..., ge=0)
    fetch_minutes: list[int] = Field(default_factory=list)
