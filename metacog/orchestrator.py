"""Evaluation Orchestrator: the oversight layer's entry point.

``evaluate_response`` runs the evaluation graph (four judges in parallel,
then suggestion synthesis), stamps the wall-clock duration and emits one
metric sample per dimension plus the duration. Any judge failure fails the
whole evaluation; a partial ``MetacognitiveEvaluation`` is never returned.

``oversee`` is the outer control loop built on top of it: evaluate,
optionally regenerate, measure confidence in the evaluation and escalate
to a human when the policy says so.
"""

from __future__ import annotations

import time
from datetime import timedelta

import structlog
from pydantic import BaseModel, ConfigDict

from metacog.agents.dimension_evaluator import DimensionEvaluator
from metacog.agents.improvement import ImprovementSynthesizer
from metacog.config import OversightSettings, get_oversight_settings
from metacog.escalation.policy import EscalationPolicy
from metacog.escalation.port import CollaborationPort
from metacog.graphs.evaluation_graph import (
    build_evaluation_graph,
    build_retry_policy,
    draft_evaluation,
)
from metacog.metrics import MetricsSink, NullMetricsSink
from metacog.oracle import Oracle
from metacog.schemas.context import EvaluationContext
from metacog.schemas.escalation import EscalationDecision
from metacog.schemas.evaluation import MetacognitiveEvaluation
from metacog.schemas.uncertainty import UncertaintyReport
from metacog.uncertainty.quantifier import UncertaintyQuantifier

logger = structlog.get_logger(__name__)


class OversightResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    evaluation: MetacognitiveEvaluation
    confidence: UncertaintyReport
    decision: EscalationDecision
    improved_response: str | None = None
    escalated: bool = False


class EvaluationOrchestrator:
    def __init__(
        self,
        oracle: Oracle,
        *,
        oversight_settings: OversightSettings | None = None,
        metrics: MetricsSink | None = None,
        collaboration_port: CollaborationPort | None = None,
        quantifier: UncertaintyQuantifier | None = None,
    ) -> None:
        self.settings = oversight_settings or get_oversight_settings()
        self.metrics = metrics or NullMetricsSink()
        self.evaluator = DimensionEvaluator(oracle, self.settings)
        self.synthesizer = ImprovementSynthesizer(oracle, self.settings)
        self.quantifier = quantifier or UncertaintyQuantifier(collaboration_port)
        self.policy = EscalationPolicy(collaboration_port, self.settings.escalation)
        self.graph = build_evaluation_graph(
            self.evaluator,
            self.synthesizer,
            retry_policy=build_retry_policy(self.settings.retry),
        ).compile()

    async def evaluate_response(
        self,
        query: str,
        response: str,
        context: EvaluationContext | None = None,
    ) -> MetacognitiveEvaluation:
        context = context or EvaluationContext()
        started_at = time.perf_counter()

        with structlog.contextvars.bound_contextvars(query_id=context.query_id):
            logger.info("evaluation_started")
            try:
                state = await self.graph.ainvoke(
                    {
                        "query": query,
                        "response": response,
                        "context": context,
                        "started_at": started_at,
                        "dimensions": {},
                    }
                )
            except Exception as exc:
                self.metrics.record_evaluation_outcome("failed")
                logger.error("evaluation_failed", error=str(exc))
                raise

            draft = draft_evaluation(state)
            evaluation = draft.model_copy(
                update={
                    "improvement_suggestions": tuple(state.get("improvement_suggestions", ())),
                    "evaluation_duration": timedelta(
                        seconds=time.perf_counter() - started_at
                    ),
                }
            )

            for dim in evaluation.dimensions:
                self.metrics.record_dimension_score(
                    evaluation.query_id, dim.name.value, dim.score
                )
            self.metrics.record_evaluation_duration(
                evaluation.query_id, evaluation.evaluation_duration.total_seconds()
            )
            self.metrics.record_evaluation_outcome("succeeded")

            logger.info(
                "evaluation_complete",
                scores={d.name.value: d.score for d in evaluation.dimensions},
                suggestions=len(evaluation.improvement_suggestions),
                duration_s=round(evaluation.evaluation_duration.total_seconds(), 3),
            )
            return evaluation

    async def regenerate(
        self,
        query: str,
        original_response: str,
        evaluation: MetacognitiveEvaluation,
        context: EvaluationContext | None = None,
    ) -> str:
        return await self.synthesizer.regenerate(query, original_response, evaluation, context)

    async def oversee(
        self,
        query: str,
        response: str,
        context: EvaluationContext | None = None,
        *,
        regenerate: bool = False,
        threshold: float | None = None,
    ) -> OversightResult:
        """Evaluate, optionally rewrite, and escalate when confidence is short.

        Escalation failures propagate: the caller must not ship a response
        that needed review when the review could not be requested.
        """
        context = context or EvaluationContext()
        evaluation = await self.evaluate_response(query, response, context)

        improved = None
        if regenerate:
            improved = await self.regenerate(query, response, evaluation, context)

        report = await self.quantifier.quantify(evaluation)
        confidence = await self.quantifier.confidence(evaluation)
        decision = self.policy.assess(evaluation, confidence, threshold)

        if decision.escalate:
            for reason in decision.reasons:
                self.metrics.record_escalation(reason)
            await self.policy.escalate(decision.request)

        return OversightResult(
            evaluation=evaluation,
            confidence=report,
            decision=decision,
            improved_response=improved,
            escalated=decision.escalate,
        )
