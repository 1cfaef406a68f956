"""Escalation policy: decide when automated oversight is not enough.

An evaluation escalates to a human when the confidence in it falls below
the threshold, or when any dimension falls below its configured floor
(factual accuracy < 0.4 by default). The decision is pure; ``escalate``
performs the side effect through the collaboration port and fails loudly,
since a swallowed failure would let a low-confidence response ship
unreviewed.
"""

from __future__ import annotations

import structlog

from metacog.config import EscalationConfig, get_oversight_settings
from metacog.errors import EscalationError, EscalationUnavailableError
from metacog.escalation.port import CollaborationPort
from metacog.schemas.escalation import EscalationDecision, EscalationRequest
from metacog.schemas.evaluation import MetacognitiveEvaluation

logger = structlog.get_logger(__name__)

LOW_CONFIDENCE = "low_confidence"


class EscalationPolicy:
    def __init__(
        self,
        port: CollaborationPort | None = None,
        config: EscalationConfig | None = None,
    ) -> None:
        self._port = port
        self.config = config or get_oversight_settings().escalation

    def floor_violations(self, evaluation: MetacognitiveEvaluation) -> list[str]:
        """Dimensions scoring below their configured floor, e.g. ``factual_accuracy``."""
        violations = []
        for dimension, floor in self.config.dimension_floors.items():
            if evaluation.get(dimension).score < floor:
                violations.append(dimension.value)
        return violations

    def build_request(
        self, query_id: str, reasons: list[str], evaluation: MetacognitiveEvaluation | None = None
    ) -> EscalationRequest:
        lines = [f"Automated oversight requested human review of query {query_id}."]
        lines.append(f"Triggers: {', '.join(reasons)}.")
        if evaluation is not None:
            lines.extend(
                f"- {dim.name.label}: {dim.score:.2f}" for dim in evaluation.dimensions
            )
        return EscalationRequest(
            session_name=f"{self.config.session_prefix}-{query_id}",
            description="\n".join(lines),
            participant_ids=frozenset(self.config.participant_ids),
        )

    def assess(
        self,
        evaluation: MetacognitiveEvaluation,
        confidence: float,
        threshold: float | None = None,
    ) -> EscalationDecision:
        threshold = self.config.confidence_threshold if threshold is None else threshold

        reasons: list[str] = []
        if confidence < threshold:
            reasons.append(LOW_CONFIDENCE)
        reasons.extend(f"{name}_below_floor" for name in self.floor_violations(evaluation))

        if not reasons:
            return EscalationDecision(escalate=False)

        logger.info(
            "escalation_required",
            query_id=evaluation.query_id,
            confidence=confidence,
            threshold=threshold,
            reasons=reasons,
        )
        return EscalationDecision(
            escalate=True,
            reasons=tuple(reasons),
            request=self.build_request(evaluation.query_id, reasons, evaluation),
        )

    async def escalate(self, request: EscalationRequest) -> None:
        if self._port is None:
            logger.error("escalation_unavailable", session_name=request.session_name)
            raise EscalationUnavailableError(
                f"No collaboration port configured; cannot open session "
                f"'{request.session_name}'"
            )

        try:
            await self._port.create_collaboration_session(
                request.session_name,
                request.description,
                sorted(request.participant_ids),
            )
        except Exception as exc:
            logger.error(
                "escalation_failed",
                session_name=request.session_name,
                error=str(exc),
            )
            raise EscalationError(
                f"Opening collaboration session '{request.session_name}' failed: {exc}"
            ) from exc

        logger.info(
            "escalation_requested",
            session_name=request.session_name,
            participants=sorted(request.participant_ids),
        )
