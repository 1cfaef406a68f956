"""Read-only evidence handed to the judges by upstream subsystems.

Knowledge documents come from retrieval and perspective analyses from the
multi-perspective reasoning step. Neither is produced or mutated here.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field


class KnowledgeDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    source: str = ""


class PerspectiveResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    perspective: str
    analysis: str


class MultiPerspectiveAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    perspective_results: tuple[PerspectiveResult, ...] = ()
    synthesis: str = ""


class EvaluationContext(BaseModel):
    """Everything the judges may consult besides the query and response."""

    model_config = ConfigDict(frozen=True)

    query_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    knowledge_results: tuple[KnowledgeDocument, ...] = ()
    perspective_analysis: MultiPerspectiveAnalysis = Field(
        default_factory=MultiPerspectiveAnalysis
    )
