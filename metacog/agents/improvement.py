"""Improvement Synthesizer: turn an evaluation into advice and a rewrite.

``synthesize_suggestions`` shows the oracle all four scores with their
rationales and parses the numbered list it returns. ``regenerate`` feeds
those suggestions back with a bounded slice of the evidence (at most
``regeneration.max_context_documents`` knowledge documents) and returns the
rewritten response verbatim. The rewrite is just a new candidate; callers
may run it through another evaluation round.
"""

from __future__ import annotations

import structlog

from metacog.config import OversightSettings, get_oversight_settings
from metacog.oracle import Oracle
from metacog.prompts.formatting import (
    format_evaluations,
    format_knowledge,
    format_perspectives,
    format_suggestions,
)
from metacog.prompts.templates import (
    REGENERATION_SYSTEM,
    REGENERATION_TASK,
    SUGGESTIONS_SYSTEM,
    SUGGESTIONS_TASK,
)
from metacog.schemas.context import EvaluationContext
from metacog.schemas.evaluation import MetacognitiveEvaluation
from metacog.utils.suggestion_parser import parse_suggestions

logger = structlog.get_logger(__name__)

SUGGESTIONS_ROLE = "suggestions"
REGENERATION_ROLE = "regeneration"


class ImprovementSynthesizer:
    def __init__(
        self,
        oracle: Oracle,
        oversight_settings: OversightSettings | None = None,
    ) -> None:
        self._oracle = oracle
        self._settings = oversight_settings or get_oversight_settings()

    async def synthesize_suggestions(
        self,
        query: str,
        response: str,
        evaluation: MetacognitiveEvaluation,
    ) -> list[str]:
        """Ask the oracle for 3-5 concrete improvements, one per list item."""
        user_prompt = SUGGESTIONS_TASK.format(
            query=query,
            response=response,
            evaluations_text=format_evaluations(evaluation),
        )
        reply = await self._oracle.complete(
            SUGGESTIONS_SYSTEM,
            user_prompt,
            temperature=self._settings.get_temperature(SUGGESTIONS_ROLE),
            max_output_tokens=self._settings.get_max_tokens(SUGGESTIONS_ROLE),
            role=SUGGESTIONS_ROLE,
        )
        suggestions = parse_suggestions(reply)
        logger.info(
            "suggestions_synthesized",
            query_id=evaluation.query_id,
            count=len(suggestions),
        )
        return suggestions

    async def regenerate(
        self,
        query: str,
        original_response: str,
        evaluation: MetacognitiveEvaluation,
        context: EvaluationContext | None = None,
    ) -> str:
        """Return the oracle's rewritten response, unvalidated."""
        context = context or EvaluationContext(query_id=evaluation.query_id)
        max_docs = self._settings.regeneration.max_context_documents

        user_prompt = REGENERATION_TASK.format(
            query=query,
            original_response=original_response,
            suggestions_text=format_suggestions(evaluation.improvement_suggestions),
            knowledge_text=format_knowledge(context.knowledge_results, limit=max_docs),
            perspectives_text=format_perspectives(context.perspective_analysis),
        )
        improved = await self._oracle.complete(
            REGENERATION_SYSTEM,
            user_prompt,
            temperature=self._settings.get_temperature(REGENERATION_ROLE),
            max_output_tokens=self._settings.get_max_tokens(REGENERATION_ROLE),
            role=REGENERATION_ROLE,
        )
        logger.info(
            "response_regenerated",
            query_id=evaluation.query_id,
            documents_used=min(len(context.knowledge_results), max_docs),
        )
        return improved
