"""Prometheus metrics for the oversight layer.

Per evaluation: one score sample per dimension and one duration sample,
labelled by query id. Outcome and escalation counters sit alongside.

Metrics are an injected capability, not a process-wide client: the
orchestrator takes any ``MetricsSink``. ``NullMetricsSink`` is the default
and the test double; ``PrometheusMetricsSink`` owns its own registry so
several instances can coexist in one process.

The gauges carry a ``query_id`` label, so each evaluation adds series. The
CLI evaluates one case per process and never notices; a long-lived caller
should call ``forget_query`` after scraping to keep the series count flat.
"""

from __future__ import annotations

from contextlib import suppress
from typing import Protocol

from prometheus_client import CollectorRegistry, Counter, Gauge, generate_latest

from metacog.schemas.evaluation import Dimension


class MetricsSink(Protocol):
    def record_dimension_score(self, query_id: str, dimension: str, score: float) -> None: ...

    def record_evaluation_duration(self, query_id: str, seconds: float) -> None: ...

    def record_evaluation_outcome(self, status: str) -> None: ...

    def record_escalation(self, reason: str) -> None: ...


class NullMetricsSink:
    """Drops every sample."""

    def record_dimension_score(self, query_id: str, dimension: str, score: float) -> None:
        pass

    def record_evaluation_duration(self, query_id: str, seconds: float) -> None:
        pass

    def record_evaluation_outcome(self, status: str) -> None:
        pass

    def record_escalation(self, reason: str) -> None:
        pass


class PrometheusMetricsSink:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.dimension_score = Gauge(
            "metacog_dimension_score",
            "Judge score per evaluation dimension",
            ["query_id", "dimension"],
            registry=self.registry,
        )
        self.evaluation_duration = Gauge(
            "metacog_evaluation_duration_seconds",
            "Wall-clock duration of one metacognitive evaluation",
            ["query_id"],
            registry=self.registry,
        )
        self.evaluations = Counter(
            "metacog_evaluations_total",
            "Evaluations by outcome",
            ["status"],
            registry=self.registry,
        )
        self.escalations = Counter(
            "metacog_escalations_total",
            "Escalations to human reviewers by trigger",
            ["reason"],
            registry=self.registry,
        )

    def record_dimension_score(self, query_id: str, dimension: str, score: float) -> None:
        self.dimension_score.labels(query_id=query_id, dimension=dimension).set(score)

    def record_evaluation_duration(self, query_id: str, seconds: float) -> None:
        self.evaluation_duration.labels(query_id=query_id).set(seconds)

    def record_evaluation_outcome(self, status: str) -> None:
        self.evaluations.labels(status=status).inc()

    def record_escalation(self, reason: str) -> None:
        self.escalations.labels(reason=reason).inc()

    def forget_query(self, query_id: str) -> None:
        """Drop the per-query gauge series once a query has been scraped."""
        for dimension in Dimension:
            with suppress(KeyError):
                self.dimension_score.remove(query_id, dimension.value)
        with suppress(KeyError):
            self.evaluation_duration.remove(query_id)

    def render(self) -> str:
        """Prometheus text exposition of this sink's registry."""
        return generate_latest(self.registry).decode("utf-8")
