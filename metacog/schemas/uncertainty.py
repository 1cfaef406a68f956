"""Uncertainty report schema."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class UncertaintyType(StrEnum):
    """Coarse bucket, meaningful even when ``metrics`` is empty."""

    NONE = "none"
    PARTIAL = "partial"
    HIGH = "high"
    UNKNOWN = "unknown"


class UncertaintyReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    confidence: float = Field(..., ge=0.0, le=1.0)
    uncertainty_type: UncertaintyType
    metrics: dict[str, float] = Field(default_factory=dict)
    source: str = "unknown"  # which estimator produced the report
