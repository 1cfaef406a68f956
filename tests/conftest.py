"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import os

import pytest

# Ensure tests don't accidentally call real APIs
os.environ.setdefault("OPENROUTER_API_KEY", "test-key")
os.environ.setdefault("GROQ_API_KEY", "test-key")

from metacog.config import OversightSettings  # noqa: E402
from metacog.schemas.context import (  # noqa: E402
    EvaluationContext,
    KnowledgeDocument,
    MultiPerspectiveAnalysis,
    PerspectiveResult,
)
from metacog.schemas.evaluation import (  # noqa: E402
    Dimension,
    EvaluationDimension,
    MetacognitiveEvaluation,
)

DEFAULT_REPLIES = {
    "factual_accuracy": "Score: 0.9. Every claim matches the knowledge sources.",
    "reasoning_quality": "Score: 0.8. The argument is coherent but skips one step.",
    "relevance": "Rating: 0.85. Directly answers the question.",
    "completeness": "Score: 0.7. Misses the second half of the question.",
    "suggestions": (
        "1. Add a citation for the boiling point claim.\n"
        "2. Explain the pressure dependency.\n"
        "3. Answer the second half of the question."
    ),
    "regeneration": "Water boils at 100 °C at sea level; lower at altitude.",
}


class FakeOracle:
    """Scripted oracle: one reply (or exception) per role, with optional delay."""

    def __init__(self, replies=None, errors=None, delay: float = 0.0):
        self.replies = {**DEFAULT_REPLIES, **(replies or {})}
        self.errors = errors or {}
        self.delay = delay
        self.calls: list[dict] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def complete(
        self,
        system_prompt,
        user_prompt,
        *,
        temperature,
        max_output_tokens,
        role=None,
    ):
        self.calls.append(
            {
                "role": role,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "temperature": temperature,
                "max_output_tokens": max_output_tokens,
            }
        )
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if role in self.errors:
                raise self.errors[role]
            return self.replies[role]
        finally:
            self.in_flight -= 1

    def calls_for(self, role):
        return [c for c in self.calls if c["role"] == role]


class RecordingMetricsSink:
    def __init__(self):
        self.dimension_scores: list[tuple[str, str, float]] = []
        self.durations: list[tuple[str, float]] = []
        self.outcomes: list[str] = []
        self.escalations: list[str] = []

    def record_dimension_score(self, query_id, dimension, score):
        self.dimension_scores.append((query_id, dimension, score))

    def record_evaluation_duration(self, query_id, seconds):
        self.durations.append((query_id, seconds))

    def record_evaluation_outcome(self, status):
        self.outcomes.append(status)

    def record_escalation(self, reason):
        self.escalations.append(reason)


class RecordingPort:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.sessions: list[dict] = []

    async def create_collaboration_session(self, session_name, description, participant_ids):
        if self.error is not None:
            raise self.error
        self.sessions.append(
            {
                "session_name": session_name,
                "description": description,
                "participant_ids": list(participant_ids),
            }
        )


def make_evaluation(scores=None, query_id="q-1", suggestions=()):
    """Build a MetacognitiveEvaluation from a {dimension: score} mapping."""
    scores = scores or {}
    return MetacognitiveEvaluation(
        query_id=query_id,
        dimensions=tuple(
            EvaluationDimension(
                name=dim,
                score=scores.get(dim.value, 0.8),
                rationale=f"Score: {scores.get(dim.value, 0.8)}",
            )
            for dim in Dimension
        ),
        improvement_suggestions=tuple(suggestions),
    )


@pytest.fixture
def fake_oracle():
    return FakeOracle()


@pytest.fixture
def metrics_sink():
    return RecordingMetricsSink()


@pytest.fixture
def recording_port():
    return RecordingPort()


@pytest.fixture
def no_retry_settings():
    """Oversight settings with retries disabled so failures surface at once."""
    return OversightSettings.model_validate({"retry": {"max_attempts": 1}})


@pytest.fixture
def sample_context():
    return EvaluationContext(
        query_id="q-42",
        knowledge_results=tuple(
            KnowledgeDocument(
                title=f"Doc {i}",
                content=f"Content of document {i}.",
                source=f"https://example.org/{i}",
            )
            for i in range(1, 6)
        ),
        perspective_analysis=MultiPerspectiveAnalysis(
            perspective_results=(
                PerspectiveResult(perspective="Physics", analysis="Boiling depends on pressure."),
                PerspectiveResult(perspective="Cooking", analysis="Altitude changes cook times."),
            ),
            synthesis="Both views agree that pressure matters.",
        ),
    )
