"""Evaluation graph: parallel dimension judges → suggestion synthesis.

  factual_accuracy ───┐
  reasoning_quality ──┤
  relevance ──────────┼──→ synthesize_suggestions
  completeness ───────┘

The four judges have no data dependency on each other and run in PARALLEL
(fan-out). Suggestion synthesis needs all four verdicts and waits for them
(fan-in). A judge that still fails after its retries aborts the whole run;
the graph never reaches the fan-in with a missing dimension.
"""

from __future__ import annotations

import time
from datetime import timedelta

from langgraph.constants import END, START
from langgraph.graph import StateGraph
from langgraph.types import RetryPolicy

from metacog.agents.dimension_evaluator import DimensionEvaluator
from metacog.agents.improvement import ImprovementSynthesizer
from metacog.config import RetryConfig
from metacog.errors import OracleError
from metacog.schemas.evaluation import Dimension, MetacognitiveEvaluation
from metacog.schemas.state import EvaluationState

SYNTHESIZE_NODE = "synthesize_suggestions"


def build_retry_policy(retry: RetryConfig) -> RetryPolicy:
    """Retry oracle failures only; programming errors surface immediately."""
    return RetryPolicy(
        max_attempts=retry.max_attempts,
        initial_interval=retry.initial_interval,
        backoff_factor=retry.backoff_factor,
        retry_on=OracleError,
    )


def draft_evaluation(state: EvaluationState) -> MetacognitiveEvaluation:
    """Assemble the four verdicts in state into an evaluation (no suggestions yet)."""
    context = state["context"]
    elapsed = time.perf_counter() - state.get("started_at", time.perf_counter())
    return MetacognitiveEvaluation(
        query_id=context.query_id,
        dimensions=tuple(state["dimensions"].values()),
        evaluation_duration=timedelta(seconds=max(elapsed, 0.0)),
    )


def _make_dimension_node(evaluator: DimensionEvaluator, dimension: Dimension):
    async def dimension_node(state: EvaluationState) -> dict:
        result = await evaluator.evaluate(
            dimension,
            state["query"],
            state["response"],
            state["context"],
        )
        return {"dimensions": {dimension.value: result}}

    dimension_node.__name__ = f"{dimension.value}_node"
    return dimension_node


def _make_synthesize_node(synthesizer: ImprovementSynthesizer):
    async def synthesize_node(state: EvaluationState) -> dict:
        suggestions = await synthesizer.synthesize_suggestions(
            state["query"],
            state["response"],
            draft_evaluation(state),
        )
        return {"improvement_suggestions": suggestions}

    return synthesize_node


def build_evaluation_graph(
    evaluator: DimensionEvaluator,
    synthesizer: ImprovementSynthesizer,
    retry_policy: RetryPolicy | None = None,
) -> StateGraph:
    """Build the evaluation graph.

    Fan-out:  START → one node per Dimension  (parallel)
    Fan-in:   all dimension nodes → synthesize_suggestions → END
    """
    builder = StateGraph(EvaluationState)

    for dimension in Dimension:
        builder.add_node(
            dimension.value,
            _make_dimension_node(evaluator, dimension),
            retry_policy=retry_policy,
        )
        builder.add_edge(START, dimension.value)

    builder.add_node(
        SYNTHESIZE_NODE,
        _make_synthesize_node(synthesizer),
        retry_policy=retry_policy,
    )
    # A list of sources makes the fan-in wait for every judge.
    builder.add_edge([d.value for d in Dimension], SYNTHESIZE_NODE)
    builder.add_edge(SYNTHESIZE_NODE, END)

    return builder
