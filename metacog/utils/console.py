"""Rich console output for oversight results."""

from __future__ import annotations

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from metacog.orchestrator import OversightResult
from metacog.schemas.escalation import EscalationRequest
from metacog.schemas.evaluation import MetacognitiveEvaluation
from metacog.schemas.uncertainty import UncertaintyReport

console = Console()


def _fmt(score: float) -> str:
    color = "green" if score >= 0.8 else "yellow" if score >= 0.5 else "red"
    return f"[{color}]{score:.2f}[/{color}]"


def _first_line(text: str, width: int = 80) -> str:
    line = text.strip().splitlines()[0] if text.strip() else ""
    return line[:width] + ("..." if len(line) > width else "")


def print_evaluation(evaluation: MetacognitiveEvaluation) -> None:
    table = Table(title=f"Evaluation {evaluation.query_id}", show_lines=True)
    table.add_column("Dimension", style="cyan")
    table.add_column("Score", justify="center")
    table.add_column("Judge rationale", max_width=80)

    for dim in evaluation.dimensions:
        table.add_row(dim.name.label, _fmt(dim.score), _first_line(dim.rationale))

    console.print(table)
    console.print(
        f"  Overall: {_fmt(evaluation.overall_score)} | "
        f"Duration: {evaluation.evaluation_duration.total_seconds():.2f}s"
    )

    if evaluation.improvement_suggestions:
        console.print("\n[bold]Improvement Suggestions:[/bold]")
        for suggestion in evaluation.improvement_suggestions:
            console.print(f"  {suggestion}")
    console.print()


def print_confidence(report: UncertaintyReport) -> None:
    console.print(
        f"[bold]Confidence:[/bold] {_fmt(report.confidence)} "
        f"({report.uncertainty_type.value} uncertainty, {report.source})"
    )


def print_escalation(request: EscalationRequest, delivered: bool) -> None:
    status = "[green]requested[/green]" if delivered else "[red]NOT delivered[/red]"
    console.print(
        Panel(
            f"Session: [cyan]{request.session_name}[/cyan]\n"
            f"Participants: [cyan]{', '.join(sorted(request.participant_ids))}[/cyan]\n\n"
            f"{request.description or ''}",
            title=f"[bold red]Human review {status}[/bold red]",
            border_style="red",
            padding=(1, 2),
        )
    )


def print_improved_response(text: str) -> None:
    console.print(
        Panel(
            Markdown(text),
            title="[bold green]Improved Response[/bold green]",
            border_style="green",
            padding=(1, 2),
        )
    )


def print_oversight_result(result: OversightResult) -> None:
    print_evaluation(result.evaluation)
    print_confidence(result.confidence)
    if result.decision.escalate and result.decision.request is not None:
        print_escalation(result.decision.request, delivered=result.escalated)
    else:
        console.print("  [green]No escalation required.[/green]")
    if result.improved_response:
        print_improved_response(result.improved_response)
