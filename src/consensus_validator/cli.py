"""
consensus-validator CLI - score a content file from the terminal.

Commands:
    consensus-validator validate PATH [--topic T | --infer-topic] [--prerequisite P ...]   Run a batch validation
    consensus-validator providers                                                          Show active providers

Exit codes:
    0  scored (possibly degraded to the stub)
    1  malformed input (empty, too long, unreadable file)
    2  content rejected by the injection gate
"""

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import EngineConfig
from .errors import InputRejected
from .llm.client import DEFAULT_MODELS, PROVIDER_ALIASES
from .models import CRITERIA, AssignmentContext, ConsensusResult, ContentType, ValidationRequest
from .orchestration import ConsensusOrchestrator
from .preprocessing import extract_topic
from .security import ValidationError

app = typer.Typer(help="Multi-provider consensus scoring for educational content")
console = Console()

EXIT_INVALID_INPUT = 1
EXIT_REJECTED = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# VALIDATE
# =============================================================================


@app.command()
def validate(
    path: Path = typer.Argument(..., help="File containing the content to score"),
    topic: str = typer.Option(None, help="Assignment topic (omit for standalone scoring)"),
    prerequisite: list[str] = typer.Option(None, help="Prerequisite topic (repeatable)"),
    guidelines: str = typer.Option(None, help="Assignment guidelines"),
    content_type: ContentType = typer.Option(ContentType.LECTURE_NOTE, help="Rubric to apply"),
    brief: str = typer.Option(None, help="Optional brief the content should satisfy"),
    infer_topic: bool = typer.Option(
        False, "--infer-topic", help="Without --topic, guess one from the file name or content"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline progress"),
):
    """Score a content file against every configured provider."""
    _configure_logging(verbose)

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[bold red]Error:[/bold red] cannot read {path}: {e}")
        raise typer.Exit(EXIT_INVALID_INPUT)

    if not topic and infer_topic:
        topic = extract_topic(path.stem, content)
        if not as_json:
            console.print(f"Inferred topic: [bold]{topic}[/bold]")

    context = None
    if topic:
        context = AssignmentContext(
            topic=topic,
            prerequisite_topics=tuple(prerequisite or ()),
            guidelines=guidelines,
            content_type=content_type,
        )
    request = ValidationRequest(content=content, context=context, brief=brief)

    try:
        orchestrator = ConsensusOrchestrator.from_env()
        result = asyncio.run(orchestrator.run_batch_validation(request))
    except InputRejected as e:
        console.print(f"[bold red]Rejected:[/bold red] {e}")
        raise typer.Exit(EXIT_REJECTED)
    except ValidationError as e:
        console.print(f"[bold red]Invalid input:[/bold red] {e}")
        raise typer.Exit(EXIT_INVALID_INPUT)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, default=str))
        return
    _render(result)


def _render(result: ConsensusResult) -> None:
    table = Table(title="Consensus Report")
    table.add_column("Criterion", style="bold")
    table.add_column("Consensus", justify="right")
    table.add_column("Confidence", justify="right")
    for output in result.successes:
        table.add_column(output.provider_id, justify="right")

    for criterion in CRITERIA:
        table.add_row(
            criterion,
            str(getattr(result.consensus, criterion)),
            f"{getattr(result.confidence, criterion):.2f}",
            *[str(getattr(o.scores, criterion)) for o in result.successes],
        )
    table.add_row(
        "[bold]overall[/bold]",
        f"[bold]{result.overall}[/bold]",
        f"{result.overall_confidence:.2f}",
        *["" for _ in result.successes],
    )
    console.print(table)

    for provider_id, reason in result.rejections.items():
        console.print(f"[yellow]Excluded {provider_id}:[/yellow] {reason}")
    for warning in result.preprocessing.get("warnings", []):
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    if result.degraded:
        console.print(
            "\n[bold yellow]Degraded: no remote provider corroborated these scores "
            "(stub fallback).[/bold yellow]"
        )
    else:
        console.print(
            f"\n[bold green]{result.providers_succeeded} provider(s) contributed.[/bold green]"
        )


# =============================================================================
# PROVIDERS
# =============================================================================


@app.command()
def providers():
    """List the providers the current environment activates."""
    config = EngineConfig.from_env()

    table = Table(title="Active Providers")
    table.add_column("Provider", style="bold")
    table.add_column("Kind")
    table.add_column("Model")

    for settings in config.providers:
        default_model = DEFAULT_MODELS.get(PROVIDER_ALIASES.get(settings.kind, settings.kind), "default")
        table.add_row(settings.provider_id, settings.kind, settings.model or default_model)
    if not config.providers:
        table.add_row("stub", "fallback", "deterministic")

    console.print(table)
    console.print(
        f"\nTimeout {config.timeout_seconds:g}s, max content {config.max_content_length} chars"
    )


if __name__ == "__main__":
    app()
