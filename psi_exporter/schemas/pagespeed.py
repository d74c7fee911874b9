"""
psi_exporter/schemas/pagespeed.py

Typed view of the PageSpeed Insights v5 response subset the exporter consumes.

Only these paths are read:

    lighthouseResult.categories.performance.score
    lighthouseResult.audits.<audit-id>.numericValue

The envelope (``lighthouseResult``, ``categories.performance`` with a numeric
``score``, and an ``audits`` object) is mandatory and fails validation as a
whole. Individual audits are optional: an absent audit, a non-object audit or
a non-numeric ``numericValue`` decodes to None.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_number(value: Any) -> float | None:
    """
    Return value as a finite float when it is a JSON number, else None.
    """

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


class AuditResult(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    numeric_value: float | None = Field(default=None, alias="numericValue")

    @field_validator("numeric_value", mode="before")
    @classmethod
    def _coerce_numeric_value(cls, value: Any) -> float | None:
        return _as_number(value)


class PerformanceCategory(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    score: float

    @field_validator("score", mode="before")
    @classmethod
    def _require_numeric_score(cls, value: Any) -> float:
        number = _as_number(value)
        if number is None:
            raise ValueError("performance score must be a number")
        return number


class Categories(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    performance: PerformanceCategory


class LighthouseResult(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    categories: Categories
    audits: dict[str, AuditResult]

    @field_validator("audits", mode="before")
    @classmethod
    def _drop_malformed_audits(cls, value: Any) -> Any:
        # A non-object audits value is left for pydantic to reject.
        if not isinstance(value, dict):
            return value
        return {
            str(audit_id): audit
            for audit_id, audit in value.items()
            if isinstance(audit, dict)
        }

    def audit_value(self, audit_id: str) -> float | None:
        audit = self.audits.get(audit_id)
        return audit.numeric_value if audit is not None else None


class PageSpeedResponse(BaseModel):
    """
    Decoded PageSpeed Insights response.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    lighthouse_result: LighthouseResult = Field(alias="lighthouseResult")

    @property
    def performance_score(self) -> float:
        return self.lighthouse_result.categories.performance.score

    def audit_value(self, audit_id: str) -> float | None:
        return self.lighthouse_result.audit_value(audit_id)
