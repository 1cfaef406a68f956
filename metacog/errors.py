"""Exception hierarchy for the oversight layer.

Oracle failures are fatal to the call that raised them and propagate up to
the caller of the orchestrator. Unparseable judge text is NOT an error (the
score extractor and suggestion parser absorb it), so nothing here covers it.
"""

from __future__ import annotations


class OversightError(Exception):
    """Base class for every error raised by metacog."""


class OracleError(OversightError):
    """The reasoning oracle failed (transport, auth, rate limit, bad payload)."""


class OracleTimeoutError(OracleError):
    """The oracle did not answer within the per-call timeout."""


class DimensionEvaluationError(OracleError):
    """A dimension judge call failed; no score exists for this dimension."""

    def __init__(self, dimension: str, message: str | None = None) -> None:
        self.dimension = dimension
        super().__init__(message or f"Evaluation of dimension '{dimension}' failed")


class EscalationError(OversightError):
    """Opening a human-collaboration session failed."""


class EscalationUnavailableError(EscalationError):
    """No collaboration port is wired, so a human cannot be reached."""

