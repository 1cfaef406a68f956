"""Escalation request and decision schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EscalationRequest(BaseModel):
    """What the oversight layer asks a human-collaboration service to open."""

    model_config = ConfigDict(frozen=True)

    session_name: str = Field(..., min_length=1)
    description: str | None = None
    participant_ids: frozenset[str] = Field(..., min_length=1)


class EscalationDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    escalate: bool
    reasons: tuple[str, ...] = ()
    request: EscalationRequest | None = None
