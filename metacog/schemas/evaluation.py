"""Evaluation records produced by the dimension judges."""

from __future__ import annotations

from datetime import timedelta
from enum import StrEnum
from statistics import fmean

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Dimension(StrEnum):
    """The four fixed evaluation axes."""

    FACTUAL_ACCURACY = "factual_accuracy"
    REASONING_QUALITY = "reasoning_quality"
    RELEVANCE = "relevance"
    COMPLETENESS = "completeness"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class EvaluationDimension(BaseModel):
    """One judge verdict. ``rationale`` is the raw judge text, kept for audit."""

    model_config = ConfigDict(frozen=True)

    name: Dimension
    score: float = Field(..., ge=0.0, le=1.0)
    rationale: str


class MetacognitiveEvaluation(BaseModel):
    """Aggregated verdict for one (query, response) pair.

    Holds exactly one ``EvaluationDimension`` per ``Dimension``, stored in
    enum order regardless of the order the judges finished in.
    """

    model_config = ConfigDict(frozen=True)

    query_id: str
    dimensions: tuple[EvaluationDimension, ...]
    improvement_suggestions: tuple[str, ...] = ()
    evaluation_duration: timedelta = timedelta(0)

    @field_validator("dimensions")
    @classmethod
    def _one_per_dimension(
        cls, value: tuple[EvaluationDimension, ...]
    ) -> tuple[EvaluationDimension, ...]:
        by_name = {d.name: d for d in value}
        if len(by_name) != len(value):
            raise ValueError("each dimension must appear exactly once")
        missing = [d.value for d in Dimension if d not in by_name]
        if missing:
            raise ValueError(f"missing dimensions: {', '.join(missing)}")
        return tuple(by_name[d] for d in Dimension)

    def get(self, dimension: Dimension | str) -> EvaluationDimension:
        dimension = Dimension(dimension)
        for item in self.dimensions:
            if item.name == dimension:
                return item
        raise KeyError(dimension)

    @property
    def scores(self) -> dict[Dimension, float]:
        return {d.name: d.score for d in self.dimensions}

    @property
    def overall_score(self) -> float:
        return fmean(d.score for d in self.dimensions)
