"""Tests for the evaluation orchestrator and the oversight loop."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest

from conftest import FakeOracle, RecordingPort
from metacog.errors import (
    DimensionEvaluationError,
    EscalationError,
    EscalationUnavailableError,
    OracleError,
    OracleTimeoutError,
)
from metacog.orchestrator import EvaluationOrchestrator, OversightResult
from metacog.schemas.evaluation import Dimension, MetacognitiveEvaluation
from metacog.schemas.uncertainty import UncertaintyType


class TestEvaluateResponse:
    @pytest.mark.asyncio
    async def test_all_dimensions_scored(self, fake_oracle, no_retry_settings, sample_context):
        orchestrator = EvaluationOrchestrator(fake_oracle, oversight_settings=no_retry_settings)
        evaluation = await orchestrator.evaluate_response("q", "r", sample_context)

        assert isinstance(evaluation, MetacognitiveEvaluation)
        assert evaluation.query_id == "q-42"
        assert [d.name for d in evaluation.dimensions] == list(Dimension)
        assert evaluation.scores == {
            Dimension.FACTUAL_ACCURACY: pytest.approx(0.9),
            Dimension.REASONING_QUALITY: pytest.approx(0.8),
            Dimension.RELEVANCE: pytest.approx(0.85),
            Dimension.COMPLETENESS: pytest.approx(0.7),
        }

    @pytest.mark.asyncio
    async def test_suggestions_populated(self, fake_oracle, no_retry_settings):
        orchestrator = EvaluationOrchestrator(fake_oracle, oversight_settings=no_retry_settings)
        evaluation = await orchestrator.evaluate_response("q", "r")
        assert len(evaluation.improvement_suggestions) == 3
        assert evaluation.improvement_suggestions[0].startswith("1. ")

    @pytest.mark.asyncio
    async def test_suggestion_call_sees_all_four_scores(self, fake_oracle, no_retry_settings):
        orchestrator = EvaluationOrchestrator(fake_oracle, oversight_settings=no_retry_settings)
        await orchestrator.evaluate_response("q", "r")

        (call,) = fake_oracle.calls_for("suggestions")
        for label in ("Factual Accuracy", "Reasoning Quality", "Relevance", "Completeness"):
            assert label in call["user_prompt"]
        # Synthesis is issued only after every judge call
        assert fake_oracle.calls[-1]["role"] == "suggestions"

    @pytest.mark.asyncio
    async def test_one_call_per_dimension_plus_suggestions(self, fake_oracle, no_retry_settings):
        orchestrator = EvaluationOrchestrator(fake_oracle, oversight_settings=no_retry_settings)
        await orchestrator.evaluate_response("q", "r")
        roles = sorted(c["role"] for c in fake_oracle.calls)
        assert roles == sorted([d.value for d in Dimension] + ["suggestions"])

    @pytest.mark.asyncio
    async def test_dimension_calls_run_concurrently(self, no_retry_settings):
        oracle = FakeOracle(delay=0.05)
        orchestrator = EvaluationOrchestrator(oracle, oversight_settings=no_retry_settings)
        await orchestrator.evaluate_response("q", "r")
        assert oracle.max_in_flight >= 2

    @pytest.mark.asyncio
    async def test_duration_recorded(self, no_retry_settings):
        oracle = FakeOracle(delay=0.01)
        orchestrator = EvaluationOrchestrator(oracle, oversight_settings=no_retry_settings)
        evaluation = await orchestrator.evaluate_response("q", "r")
        assert evaluation.evaluation_duration >= timedelta(seconds=0.01)

    @pytest.mark.asyncio
    async def test_query_id_generated_without_context(self, fake_oracle, no_retry_settings):
        orchestrator = EvaluationOrchestrator(fake_oracle, oversight_settings=no_retry_settings)
        evaluation = await orchestrator.evaluate_response("q", "r")
        assert evaluation.query_id


class TestMetrics:
    @pytest.mark.asyncio
    async def test_four_scores_and_duration_per_evaluation(
        self, fake_oracle, metrics_sink, no_retry_settings, sample_context
    ):
        orchestrator = EvaluationOrchestrator(
            fake_oracle, oversight_settings=no_retry_settings, metrics=metrics_sink
        )
        evaluation = await orchestrator.evaluate_response("q", "r", sample_context)

        assert len(metrics_sink.dimension_scores) == 4
        assert {qid for qid, _, _ in metrics_sink.dimension_scores} == {"q-42"}
        assert {dim for _, dim, _ in metrics_sink.dimension_scores} == {d.value for d in Dimension}
        assert metrics_sink.durations == [
            ("q-42", evaluation.evaluation_duration.total_seconds())
        ]
        assert metrics_sink.outcomes == ["succeeded"]

    @pytest.mark.asyncio
    async def test_failed_evaluation_counted(self, metrics_sink, no_retry_settings):
        oracle = FakeOracle(errors={"completeness": OracleError("boom")})
        orchestrator = EvaluationOrchestrator(
            oracle, oversight_settings=no_retry_settings, metrics=metrics_sink
        )
        with pytest.raises(OracleError):
            await orchestrator.evaluate_response("q", "r")
        assert metrics_sink.outcomes == ["failed"]
        assert metrics_sink.dimension_scores == []
        assert metrics_sink.durations == []


class TestFailures:
    @pytest.mark.asyncio
    async def test_reasoning_quality_timeout_fails_whole_evaluation(self, no_retry_settings):
        oracle = FakeOracle(errors={"reasoning_quality": OracleTimeoutError("timed out")})
        orchestrator = EvaluationOrchestrator(oracle, oversight_settings=no_retry_settings)

        result = None
        with pytest.raises(DimensionEvaluationError) as exc_info:
            result = await orchestrator.evaluate_response("q", "r")

        assert result is None
        assert exc_info.value.dimension == "reasoning_quality"
        assert isinstance(exc_info.value.__cause__, OracleTimeoutError)

    @pytest.mark.asyncio
    async def test_no_suggestion_call_after_failure(self, no_retry_settings):
        oracle = FakeOracle(errors={"factual_accuracy": OracleError("auth")})
        orchestrator = EvaluationOrchestrator(oracle, oversight_settings=no_retry_settings)
        with pytest.raises(OracleError):
            await orchestrator.evaluate_response("q", "r")
        assert oracle.calls_for("suggestions") == []

    @pytest.mark.asyncio
    async def test_suggestion_failure_fails_evaluation(self, no_retry_settings):
        oracle = FakeOracle(errors={"suggestions": OracleError("down")})
        orchestrator = EvaluationOrchestrator(oracle, oversight_settings=no_retry_settings)
        with pytest.raises(OracleError):
            await orchestrator.evaluate_response("q", "r")

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, no_retry_settings):
        oracle = FakeOracle(delay=10)
        orchestrator = EvaluationOrchestrator(oracle, oversight_settings=no_retry_settings)
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(orchestrator.evaluate_response("q", "r"), timeout=0.05)

    @pytest.mark.asyncio
    async def test_task_cancel_raises_cancelled(self, no_retry_settings):
        oracle = FakeOracle(delay=10)
        orchestrator = EvaluationOrchestrator(oracle, oversight_settings=no_retry_settings)
        task = asyncio.create_task(orchestrator.evaluate_response("q", "r"))
        await asyncio.sleep(0.02)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task


class TestOversee:
    @pytest.mark.asyncio
    async def test_confident_evaluation_not_escalated(
        self, fake_oracle, recording_port, no_retry_settings
    ):
        orchestrator = EvaluationOrchestrator(
            fake_oracle,
            oversight_settings=no_retry_settings,
            collaboration_port=recording_port,
        )
        result = await orchestrator.oversee("q", "r")

        assert isinstance(result, OversightResult)
        assert result.decision.escalate is False
        assert result.escalated is False
        assert result.improved_response is None
        assert result.confidence.source == "evaluation"
        assert result.confidence.uncertainty_type is UncertaintyType.PARTIAL
        assert recording_port.sessions == []

    @pytest.mark.asyncio
    async def test_regenerate_included(self, fake_oracle, no_retry_settings):
        orchestrator = EvaluationOrchestrator(fake_oracle, oversight_settings=no_retry_settings)
        result = await orchestrator.oversee("q", "r", regenerate=True)
        assert result.improved_response == fake_oracle.replies["regeneration"]
        assert fake_oracle.calls[-1]["role"] == "regeneration"

    @pytest.mark.asyncio
    async def test_low_scores_escalate_through_port(
        self, recording_port, metrics_sink, no_retry_settings, sample_context
    ):
        oracle = FakeOracle(
            replies={
                "factual_accuracy": "Score: 0.2. Several claims contradict the sources.",
                "reasoning_quality": "Score: 0.3",
            }
        )
        orchestrator = EvaluationOrchestrator(
            oracle,
            oversight_settings=no_retry_settings,
            metrics=metrics_sink,
            collaboration_port=recording_port,
        )
        result = await orchestrator.oversee("q", "r", sample_context)

        assert result.escalated is True
        assert result.decision.reasons == ("low_confidence", "factual_accuracy_below_floor")
        (session,) = recording_port.sessions
        assert session["session_name"] == "metacognitive-review-q-42"
        assert session["participant_ids"] == ["oversight-reviewers"]
        assert metrics_sink.escalations == ["low_confidence", "factual_accuracy_below_floor"]

    @pytest.mark.asyncio
    async def test_threshold_override(self, fake_oracle, recording_port, no_retry_settings):
        orchestrator = EvaluationOrchestrator(
            fake_oracle,
            oversight_settings=no_retry_settings,
            collaboration_port=recording_port,
        )
        result = await orchestrator.oversee("q", "r", threshold=0.99)
        assert result.decision.reasons == ("low_confidence",)
        assert len(recording_port.sessions) == 1

    @pytest.mark.asyncio
    async def test_escalation_without_port_fails_loudly(self, no_retry_settings):
        oracle = FakeOracle(replies={"factual_accuracy": "Score: 0.1"})
        orchestrator = EvaluationOrchestrator(oracle, oversight_settings=no_retry_settings)
        with pytest.raises(EscalationUnavailableError):
            await orchestrator.oversee("q", "r")

    @pytest.mark.asyncio
    async def test_port_failure_propagates(self, no_retry_settings):
        oracle = FakeOracle(replies={"factual_accuracy": "Score: 0.1"})
        orchestrator = EvaluationOrchestrator(
            oracle,
            oversight_settings=no_retry_settings,
            collaboration_port=RecordingPort(error=ConnectionError("offline")),
        )
        with pytest.raises(EscalationError) as exc_info:
            await orchestrator.oversee("q", "r")
        assert isinstance(exc_info.value.__cause__, ConnectionError)
