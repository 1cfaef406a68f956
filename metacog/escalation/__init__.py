"""Escalation to human reviewers.

The port is an interface only: this package may request a collaboration
session but never depends on a concrete collaboration implementation.
"""

from metacog.escalation.policy import EscalationPolicy
from metacog.escalation.port import CollaborationPort

__all__ = ["CollaborationPort", "EscalationPolicy"]
