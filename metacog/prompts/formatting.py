"""Render evidence and evaluations into prompt text."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from metacog.prompts.templates import NO_KNOWLEDGE, NO_PERSPECTIVES, NO_SUGGESTIONS
from metacog.schemas.context import KnowledgeDocument, MultiPerspectiveAnalysis
from metacog.schemas.evaluation import MetacognitiveEvaluation


def format_knowledge(
    documents: Sequence[KnowledgeDocument], limit: int | None = None
) -> str:
    """Render knowledge documents; ``limit`` keeps only the first N."""
    if limit is not None:
        documents = documents[:limit]
    if not documents:
        return NO_KNOWLEDGE

    blocks = []
    for doc in documents:
        lines = [f"--- {doc.title} ---"]
        if doc.source:
            lines.append(f"Source: {doc.source}")
        lines.append(doc.content)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def format_perspectives(analysis: MultiPerspectiveAnalysis) -> str:
    blocks = [
        f"--- {result.perspective} Perspective ---\n{result.analysis}"
        for result in analysis.perspective_results
    ]
    if analysis.synthesis:
        blocks.append(f"--- Synthesis ---\n{analysis.synthesis}")
    return "\n\n".join(blocks) if blocks else NO_PERSPECTIVES


def format_evaluations(evaluation: MetacognitiveEvaluation) -> str:
    """One block per dimension: label, two-decimal score, judge rationale."""
    return "\n\n".join(
        f"{dim.name.label} (Score: {dim.score:.2f}):\n{dim.rationale.strip()}"
        for dim in evaluation.dimensions
    )


def format_suggestions(suggestions: Iterable[str]) -> str:
    lines = [f"- {s}" for s in suggestions]
    return "\n".join(lines) if lines else NO_SUGGESTIONS
