"""Dimension Evaluator: one judge call per quality dimension.

Each of the four dimensions has its own system prompt, task prompt and
evidence: factual accuracy reads the knowledge documents, reasoning quality
reads the perspective analyses, relevance and completeness see only the
query and the response. Sampling is near-deterministic and the output cap
comes from oversight.toml (factual accuracy and reasoning quality get more
room so the judge can cite contradictions).

The judge text is kept verbatim as the rationale and scored by
``extract_score``. If the oracle call fails no score is invented: the
failure is re-raised as ``DimensionEvaluationError``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import structlog

from metacog.config import OversightSettings, get_oversight_settings
from metacog.errors import DimensionEvaluationError, OracleError
from metacog.oracle import Oracle
from metacog.prompts.formatting import format_knowledge, format_perspectives
from metacog.prompts.templates import (
    COMPLETENESS_SYSTEM,
    COMPLETENESS_TASK,
    FACTUAL_ACCURACY_SYSTEM,
    FACTUAL_ACCURACY_TASK,
    REASONING_QUALITY_SYSTEM,
    REASONING_QUALITY_TASK,
    RELEVANCE_SYSTEM,
    RELEVANCE_TASK,
)
from metacog.schemas.context import EvaluationContext
from metacog.schemas.evaluation import Dimension, EvaluationDimension
from metacog.utils.score_extraction import extract_score

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DimensionPrompt:
    system: str
    task: str
    # Extra template fields drawn from the context (e.g. knowledge_text)
    evidence: Callable[[EvaluationContext], dict[str, str]]


def _no_evidence(context: EvaluationContext) -> dict[str, str]:
    return {}


DIMENSION_PROMPTS: dict[Dimension, DimensionPrompt] = {
    Dimension.FACTUAL_ACCURACY: DimensionPrompt(
        system=FACTUAL_ACCURACY_SYSTEM,
        task=FACTUAL_ACCURACY_TASK,
        evidence=lambda ctx: {"knowledge_text": format_knowledge(ctx.knowledge_results)},
    ),
    Dimension.REASONING_QUALITY: DimensionPrompt(
        system=REASONING_QUALITY_SYSTEM,
        task=REASONING_QUALITY_TASK,
        evidence=lambda ctx: {
            "perspectives_text": format_perspectives(ctx.perspective_analysis)
        },
    ),
    Dimension.RELEVANCE: DimensionPrompt(
        system=RELEVANCE_SYSTEM,
        task=RELEVANCE_TASK,
        evidence=_no_evidence,
    ),
    Dimension.COMPLETENESS: DimensionPrompt(
        system=COMPLETENESS_SYSTEM,
        task=COMPLETENESS_TASK,
        evidence=_no_evidence,
    ),
}


class DimensionEvaluator:
    """Grades a response on one dimension per call."""

    def __init__(
        self,
        oracle: Oracle,
        oversight_settings: OversightSettings | None = None,
    ) -> None:
        self._oracle = oracle
        self._settings = oversight_settings or get_oversight_settings()

    def build_prompts(
        self,
        dimension: Dimension,
        query: str,
        response: str,
        context: EvaluationContext,
    ) -> tuple[str, str]:
        """Return the (system, user) prompt pair for a dimension."""
        prompt = DIMENSION_PROMPTS[dimension]
        user_prompt = prompt.task.format(
            query=query,
            response=response,
            **prompt.evidence(context),
        )
        return prompt.system, user_prompt

    async def evaluate(
        self,
        dimension: Dimension,
        query: str,
        response: str,
        context: EvaluationContext | None = None,
    ) -> EvaluationDimension:
        dimension = Dimension(dimension)
        context = context or EvaluationContext()
        system_prompt, user_prompt = self.build_prompts(dimension, query, response, context)

        try:
            judge_text = await self._oracle.complete(
                system_prompt,
                user_prompt,
                temperature=self._settings.get_temperature(dimension.value),
                max_output_tokens=self._settings.get_max_tokens(dimension.value),
                role=dimension.value,
            )
        except OracleError as exc:
            logger.error(
                "dimension_evaluation_failed",
                dimension=dimension.value,
                query_id=context.query_id,
                error=str(exc),
            )
            raise DimensionEvaluationError(
                dimension.value,
                f"Evaluation of dimension '{dimension.value}' failed: {exc}",
            ) from exc

        score = extract_score(judge_text)
        logger.info(
            "dimension_evaluated",
            dimension=dimension.value,
            query_id=context.query_id,
            score=score,
        )
        return EvaluationDimension(name=dimension, score=score, rationale=judge_text)
