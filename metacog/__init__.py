"""metacog: judge-based metacognitive oversight for generated answers.

Grades a candidate answer on four dimensions with an LLM judge, synthesizes
improvement suggestions, optionally regenerates the answer, quantifies
confidence and escalates to a human reviewer when confidence is too low.
"""

from metacog.orchestrator import EvaluationOrchestrator, OversightResult

__all__ = ["EvaluationOrchestrator", "OversightResult"]
