"""Graph state definition using TypedDict.

EvaluationState: state of the evaluation graph
(four dimension judges in parallel → suggestion synthesis).
"""

from __future__ import annotations

import operator
from typing import Annotated, TypedDict

from metacog.schemas.context import EvaluationContext
from metacog.schemas.evaluation import EvaluationDimension


class EvaluationState(TypedDict, total=False):
    """State for the evaluation graph.

    Each dimension node contributes one entry to ``dimensions``; the
    dict-union reducer merges the parallel writes.
    """

    # ----- Input -----
    query: str
    response: str
    context: EvaluationContext
    started_at: float  # time.perf_counter() at orchestrator entry

    # ----- Dimension judges (fan-out) -----
    dimensions: Annotated[dict[str, EvaluationDimension], operator.or_]

    # ----- Suggestion synthesis (fan-in) -----
    improvement_suggestions: list[str]
