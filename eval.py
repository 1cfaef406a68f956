#!/usr/bin/env python3
"""Oversight CLI: judge a candidate answer and decide whether to escalate.

Usage:
    # Evaluate a case file (query, response, optional evidence)
    python eval.py --input case.json

    # Also ask the oracle for an improved answer
    python eval.py --input case.json --regenerate

    # Escalate below a stricter confidence threshold
    python eval.py --input case.json --threshold 0.7

    # Dump the Prometheus samples recorded for the run
    python eval.py --input case.json --metrics

Case file format:
    {
      "query": "...",
      "response": "...",
      "query_id": "optional-id",
      "knowledge_results": [{"title": "...", "content": "...", "source": "..."}],
      "perspective_analysis": {
        "perspective_results": [{"perspective": "...", "analysis": "..."}],
        "synthesis": "..."
      }
    }

Exit status: 0 accepted, 1 evaluation failed, 2 human review needed but
no collaboration service is wired in.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from rich.console import Console

console = Console()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ESCALATION_UNDELIVERED = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Metacognitive oversight: LLM-as-a-judge evaluation with human escalation"
    )
    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Path to a JSON case file with query, response and optional evidence",
    )
    parser.add_argument(
        "--regenerate",
        action="store_true",
        help="Generate an improved response from the evaluation",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Minimum confidence before escalating (default: oversight.toml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level override (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines instead of console-formatted logs",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print Prometheus metrics collected during the run",
    )
    args = parser.parse_args(argv)
    if args.threshold is not None and not 0.0 <= args.threshold <= 1.0:
        parser.error("--threshold must be between 0.0 and 1.0")
    return args


def load_case(path: str | Path):
    """Read a case file into (query, response, EvaluationContext)."""
    from metacog.schemas.context import EvaluationContext

    data = json.loads(Path(path).read_text(encoding="utf-8"))
    context_fields = {
        key: data[key]
        for key in ("query_id", "knowledge_results", "perspective_analysis")
        if key in data
    }
    return data["query"], data["response"], EvaluationContext.model_validate(context_fields)


async def run_case(args: argparse.Namespace) -> int:
    from metacog.metrics import PrometheusMetricsSink
    from metacog.oracle import LangChainOracle
    from metacog.orchestrator import EvaluationOrchestrator

    metrics = PrometheusMetricsSink()
    orchestrator = EvaluationOrchestrator(LangChainOracle(), metrics=metrics)
    try:
        return await run_oversight(orchestrator, args)
    finally:
        if args.metrics:
            console.print(metrics.render(), markup=False, highlight=False)


async def run_oversight(orchestrator, args: argparse.Namespace) -> int:
    """Drive one case through the orchestrator, printing as results arrive.

    Steps run individually so the report is printed even when the
    escalation cannot be delivered.
    """
    from metacog.errors import EscalationError, OversightError
    from metacog.utils.console import (
        print_confidence,
        print_escalation,
        print_evaluation,
        print_improved_response,
    )

    query, response, context = load_case(args.input)

    try:
        evaluation = await orchestrator.evaluate_response(query, response, context)
    except OversightError as exc:
        console.print(f"[red]Evaluation failed: {exc}[/red]")
        return EXIT_FAILED

    print_evaluation(evaluation)

    if args.regenerate:
        try:
            improved = await orchestrator.regenerate(query, response, evaluation, context)
        except OversightError as exc:
            console.print(f"[red]Regeneration failed: {exc}[/red]")
            return EXIT_FAILED
        print_improved_response(improved)

    report = await orchestrator.quantifier.quantify(evaluation)
    print_confidence(report)

    decision = orchestrator.policy.assess(evaluation, report.confidence, args.threshold)
    if not decision.escalate:
        console.print("  [green]No escalation required.[/green]")
        return EXIT_OK

    for reason in decision.reasons:
        orchestrator.metrics.record_escalation(reason)

    try:
        await orchestrator.policy.escalate(decision.request)
    except EscalationError as exc:
        print_escalation(decision.request, delivered=False)
        console.print(f"[red]{exc}[/red]")
        return EXIT_ESCALATION_UNDELIVERED

    print_escalation(decision.request, delivered=True)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    from metacog.config import get_settings
    from metacog.logging_config import setup_logging

    settings = get_settings()
    setup_logging(
        args.log_level or settings.log_level,
        json_logs=args.json_logs or settings.json_logs,
    )

    return asyncio.run(run_case(args))


if __name__ == "__main__":
    sys.exit(main())
