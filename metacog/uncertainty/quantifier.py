"""Uncertainty Quantifier: confidence scores and threshold gating.

``quantify`` picks an estimator by the shape of the data:

  text                     → hedge-word ratio ("maybe", "might", ...)
  MetacognitiveEvaluation  → judge agreement (mean score minus spread)
  mapping of numbers       → normalised Shannon entropy of the distribution
  iterable of numbers      → coefficient of variation of repeated samples
  None / anything else     → unknown (also NaN or infinite numbers)

``confidence`` is the scalar shortcut and may be replaced wholesale by
passing ``estimator=`` (e.g. an oracle-backed scorer) without changing any
caller. Every method is a pure function of its inputs; the only side
effects live in mitigation strategies.
"""

from __future__ import annotations

import inspect
import math
import re
from collections.abc import Awaitable, Callable, Iterable, Mapping
from numbers import Real
from statistics import fmean, pstdev, stdev
from typing import Any

import structlog

from metacog.escalation.port import CollaborationPort
from metacog.schemas.evaluation import MetacognitiveEvaluation
from metacog.schemas.uncertainty import UncertaintyReport, UncertaintyType

logger = structlog.get_logger(__name__)

HEDGE_WORDS = frozenset({
    "maybe", "perhaps", "possibly", "probably", "unlikely", "uncertain",
    "doubt", "assume", "guess", "approximately", "might", "could", "seem",
    "suggest",
})
_WORD_SPLIT = re.compile(r"[\s.,;!?]+")

# 20% hedge words → zero confidence
DEFAULT_HEDGE_WEIGHT = 5.0
DEFAULT_NONE_AT = 0.8
DEFAULT_HIGH_BELOW = 0.5

STRATEGY_REQUEST_HUMAN_INTERVENTION = "request_human_intervention"
STRATEGY_FALLBACK_TO_DEFAULT = "fallback_to_default"
STRATEGY_CONSERVATIVE_EXECUTION = "conservative_execution"

Estimator = Callable[[Any], float | Awaitable[float]]
MitigationHandler = Callable[[Mapping[str, Any]], Awaitable[None]]


def _clamp(value: float) -> float:
    # NaN and infinities carry no confidence
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, value))


def _bucket(confidence: float, parameters: Mapping[str, Any]) -> UncertaintyType:
    if confidence >= float(parameters.get("none_at", DEFAULT_NONE_AT)):
        return UncertaintyType.NONE
    if confidence >= float(parameters.get("high_below", DEFAULT_HIGH_BELOW)):
        return UncertaintyType.PARTIAL
    return UncertaintyType.HIGH


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _all_finite(values: list[float]) -> bool:
    return all(math.isfinite(v) for v in values)


# ---------------------------------------------------------------------------
# Estimators: each returns (confidence, metrics, source)
# ---------------------------------------------------------------------------


def text_uncertainty(text: str, hedge_weight: float = DEFAULT_HEDGE_WEIGHT):
    words = [w for w in _WORD_SPLIT.split(text) if w]
    if not words:
        return 0.0, {"word_count": 0.0}, "linguistic"

    hedge_count = sum(1 for w in words if w.lower() in HEDGE_WORDS)
    ratio = hedge_count / len(words)
    confidence = max(0.0, 1.0 - ratio * hedge_weight)
    metrics = {
        "hedge_word_count": float(hedge_count),
        "word_count": float(len(words)),
        "hedge_ratio": ratio,
    }
    return confidence, metrics, "linguistic"


def numeric_uncertainty(values: list[float]):
    if not values:
        return 0.0, {"count": 0.0}, "statistical"
    if len(values) == 1:
        # A single point estimate carries no spread information.
        return 1.0, {"value": values[0], "count": 1.0}, "statistical"

    mean = fmean(values)
    std = stdev(values)
    spread = std / abs(mean) if abs(mean) > 1e-9 else std
    metrics = {
        "mean": mean,
        "variance": std**2,
        "standard_deviation": std,
        "count": float(len(values)),
    }
    return 1.0 / (1.0 + spread), metrics, "statistical"


def entropy_uncertainty(weights: list[float]):
    if not weights:
        return 0.0, {"count": 0.0}, "entropy"

    total = sum(weights)
    if total > 0 and abs(total - 1.0) > 1e-5:
        weights = [w / total for w in weights]

    entropy = -sum(p * math.log2(p) for p in weights if p > 0)
    max_entropy = math.log2(len(weights))
    normalized = entropy / max_entropy if max_entropy > 0 else 0.0
    metrics = {
        "entropy": entropy,
        "normalized_entropy": normalized,
        "max_entropy": max_entropy,
        "count": float(len(weights)),
    }
    return _clamp(1.0 - normalized), metrics, "entropy"


def evaluation_uncertainty(evaluation: MetacognitiveEvaluation):
    """Judges that agree on a high score → confident; low or split → not."""
    scores = [d.score for d in evaluation.dimensions]
    mean = fmean(scores)
    spread = pstdev(scores)
    metrics = {
        "mean": mean,
        "std": spread,
        "min": min(scores),
        "max": max(scores),
    }
    metrics.update({d.name.value: d.score for d in evaluation.dimensions})
    return _clamp(mean - spread), metrics, "evaluation"


# ---------------------------------------------------------------------------
# Quantifier
# ---------------------------------------------------------------------------


class UncertaintyQuantifier:
    def __init__(
        self,
        collaboration_port: CollaborationPort | None = None,
        estimator: Estimator | None = None,
    ) -> None:
        self._port = collaboration_port
        self._estimator = estimator
        self._strategies: dict[str, MitigationHandler] = {
            STRATEGY_REQUEST_HUMAN_INTERVENTION: self._request_human_intervention,
            STRATEGY_FALLBACK_TO_DEFAULT: self._fallback_to_default,
            STRATEGY_CONSERVATIVE_EXECUTION: self._conservative_execution,
        }

    # -- confidence ---------------------------------------------------------

    async def confidence(self, data: Any) -> float:
        """Scalar trustworthiness estimate in [0, 1]."""
        if self._estimator is not None:
            value = self._estimator(data)
            if inspect.isawaitable(value):
                value = await value
            return _clamp(float(value))
        report = await self.quantify(data)
        return report.confidence

    async def quantify(
        self, data: Any, parameters: Mapping[str, Any] | None = None
    ) -> UncertaintyReport:
        parameters = parameters or {}

        if data is None:
            return UncertaintyReport(
                confidence=0.0, uncertainty_type=UncertaintyType.UNKNOWN, source="null"
            )

        if isinstance(data, str):
            hedge_weight = float(parameters.get("hedge_weight", DEFAULT_HEDGE_WEIGHT))
            result = text_uncertainty(data, hedge_weight)
        elif isinstance(data, MetacognitiveEvaluation):
            result = evaluation_uncertainty(data)
        elif isinstance(data, Mapping) and all(_is_number(v) for v in data.values()):
            weights = [float(v) for v in data.values()]
            if not _all_finite(weights):
                return self._non_finite(data)
            result = entropy_uncertainty(weights)
        elif isinstance(data, Iterable) and not isinstance(data, (bytes, Mapping)):
            values = list(data)
            if all(_is_number(v) for v in values):
                samples = [float(v) for v in values]
                if not _all_finite(samples):
                    return self._non_finite(data)
                result = numeric_uncertainty(samples)
            else:
                result = None
        else:
            result = None

        if result is None:
            logger.debug("uncertainty_unsupported_data", data_type=type(data).__name__)
            return UncertaintyReport(
                confidence=0.5,
                uncertainty_type=UncertaintyType.UNKNOWN,
                source="unsupported",
            )

        confidence, metrics, source = result
        confidence = _clamp(confidence)
        return UncertaintyReport(
            confidence=confidence,
            uncertainty_type=_bucket(confidence, parameters),
            metrics=metrics,
            source=source,
        )

    @staticmethod
    def _non_finite(data: Any) -> UncertaintyReport:
        logger.warning("uncertainty_non_finite_data", data_type=type(data).__name__)
        return UncertaintyReport(
            confidence=0.0, uncertainty_type=UncertaintyType.UNKNOWN, source="non_finite"
        )

    async def is_within_threshold(self, data: Any, threshold: float) -> bool:
        """True iff ``confidence(data) >= threshold``."""
        return await self.confidence(data) >= threshold

    # -- mitigation ---------------------------------------------------------

    def register_strategy(self, name: str, handler: MitigationHandler) -> None:
        self._strategies[name] = handler

    @property
    def strategies(self) -> list[str]:
        return sorted(self._strategies)

    async def apply_mitigation(
        self, strategy_name: str, parameters: Mapping[str, Any] | None = None
    ) -> bool:
        """Run a named remediation. Returns False if it could not be applied.

        Unknown names and handler failures are logged and reported, never
        raised: the caller has already decided its escalation path and a
        broken remediation must not change it.
        """
        handler = self._strategies.get(strategy_name)
        if handler is None:
            logger.warning(
                "mitigation_unknown_strategy",
                strategy=strategy_name,
                known=self.strategies,
            )
            return False

        try:
            await handler(parameters or {})
        except Exception as exc:
            logger.warning(
                "mitigation_failed",
                strategy=strategy_name,
                error=str(exc),
                exc_info=True,
            )
            return False

        logger.info("mitigation_applied", strategy=strategy_name)
        return True

    async def _request_human_intervention(self, parameters: Mapping[str, Any]) -> None:
        if self._port is None:
            raise RuntimeError("no collaboration port configured")
        participants = parameters.get("participant_ids") or []
        await self._port.create_collaboration_session(
            str(parameters.get("session_name") or "uncertainty-review"),
            parameters.get("description"),
            list(participants),
        )

    async def _fallback_to_default(self, parameters: Mapping[str, Any]) -> None:
        logger.info("mitigation_fallback_to_default", default=parameters.get("default_value"))

    async def _conservative_execution(self, parameters: Mapping[str, Any]) -> None:
        logger.info("mitigation_conservative_execution", parameters=dict(parameters))
