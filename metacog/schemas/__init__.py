"""Pydantic schemas and graph state for the oversight layer."""

from metacog.schemas.context import (
    EvaluationContext,
    KnowledgeDocument,
    MultiPerspectiveAnalysis,
    PerspectiveResult,
)
from metacog.schemas.escalation import EscalationDecision, EscalationRequest
from metacog.schemas.evaluation import (
    Dimension,
    EvaluationDimension,
    MetacognitiveEvaluation,
)
from metacog.schemas.uncertainty import UncertaintyReport, UncertaintyType

__all__ = [
    "Dimension",
    "EscalationDecision",
    "EscalationRequest",
    "EvaluationContext",
    "EvaluationDimension",
    "KnowledgeDocument",
    "MetacognitiveEvaluation",
    "MultiPerspectiveAnalysis",
    "PerspectiveResult",
    "UncertaintyReport",
    "UncertaintyType",
]
