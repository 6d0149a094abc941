"""
Nexus Match Command Line Interface

Provides CLI commands for inspecting configuration, the sector catalog
and job lifecycle, and for running matches from JSON files.
"""

import json
import time
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="nexus-match",
    help="L&D Nexus trainer matching CLI",
    add_completion=False,
)
console = Console()

STRENGTH_COLORS = {
    "exceptional": "bold green",
    "excellent": "green",
    "strong": "blue",
    "good": "cyan",
    "moderate": "yellow",
    "basic": "red",
}


def _load_json(path: Path) -> Any:
    if not path.exists():
        console.print(f"[red]Error: File does not exist: {path}[/red]")
        raise typer.Exit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: {path} is not valid JSON: {e}[/red]")
        raise typer.Exit(1)


def _load_candidates(path: Path) -> list:
    from nexus_match.core.exceptions import ValidationError
    from nexus_match.data.models import Candidate
    from pydantic import ValidationError as PydanticValidationError

    data = _load_json(path)
    if not isinstance(data, list):
        console.print("[red]Error: Candidates file must contain a JSON list[/red]")
        raise typer.Exit(1)
    try:
        return [Candidate.model_validate(item) for item in data]
    except PydanticValidationError as e:
        error = ValidationError.from_pydantic(e)
        console.print(f"[red]Error: Invalid candidate data: {error}[/red]")
        raise typer.Exit(1)


def _results_table(title: str, results) -> Table:
    table = Table(title=title)
    table.add_column("Rank", style="dim", width=4)
    table.add_column("Professional", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Strength", justify="center")
    table.add_column("Reasons")

    for result in results:
        color = STRENGTH_COLORS.get(result.strength.value, "white")
        table.add_row(
            str(result.rank),
            result.name or result.professional_id,
            f"{result.score:.1%}",
            f"[{color}]{result.strength.label}[/{color}]",
            "\n".join(result.reasons) or "[dim]-[/dim]",
        )
    return table


@app.callback()
def main():
    """L&D Nexus trainer matching CLI."""
    from nexus_match.utils.logger import setup_logging

    setup_logging()


@app.command()
def version():
    """Show application version."""
    from nexus_match import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show system information and configuration."""
    from nexus_match.utils.config import get_settings

    settings = get_settings()

    table = Table(title="Nexus Match Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Storage Backend", settings.database.backend)
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Preview / Listing K", f"{settings.matching.preview_k} / {settings.matching.listing_k}")
    table.add_row("Pass Timeout", f"{settings.matching.pass_timeout_ms} ms")
    table.add_row("Worker Threads", str(settings.matching.max_workers))
    table.add_row("Poll Interval", f"{settings.session.poll_interval_seconds} s")
    table.add_row("Max Idle Polls", str(settings.session.max_idle_polls))
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Create MongoDB indexes for jobs, applications and professionals."""
    from nexus_match.data.database import get_database_manager

    console.print("[yellow]Initializing database...[/yellow]")

    db_manager = get_database_manager()
    console.print("  Checking database connection...")
    if not db_manager.check_connection():
        console.print("[red]Error: Could not connect to MongoDB.[/red]")
        console.print("[dim]Make sure MongoDB is running and connection settings are correct.[/dim]")
        raise typer.Exit(1)

    console.print("  [green]✓[/green] Connected to MongoDB")
    console.print("  Creating indexes...")
    db_manager.ensure_indexes()
    console.print("  [green]✓[/green] Indexes created")
    console.print("\n[green]Database initialized successfully![/green]")


@app.command()
def sectors():
    """List the sector catalog with its keywords."""
    from nexus_match.utils.constants import list_sectors

    table = Table(title="Sectors")
    table.add_column("Sector", style="cyan")
    table.add_column("Name")
    table.add_column("Keywords", style="dim")

    for sector in list_sectors():
        table.add_row(sector["value"], sector["name"], ", ".join(sector["keywords"]))

    console.print(table)


@app.command()
def transitions():
    """Show the job status transition table."""
    from nexus_match.core.jobs import TRANSITIONS

    table = Table(title="Job Lifecycle")
    table.add_column("From", style="cyan")
    table.add_column("To", style="green")

    for source, targets in TRANSITIONS.items():
        allowed = ", ".join(sorted(t.value for t in targets)) or "[dim]none (terminal)[/dim]"
        table.add_row(source.value, allowed)

    console.print(table)


@app.command()
def match(
    requirement_file: Path = typer.Argument(..., help="JSON file with the training requirement"),
    candidates_file: Path = typer.Argument(..., help="JSON file with a list of candidates"),
    top_n: Optional[int] = typer.Option(None, "--top", "-n", help="Number of results (default: preview size)"),
    listing: bool = typer.Option(False, "--listing", "-l", help="Use the full listing size"),
):
    """Match candidates from a file against a requirement."""
    from nexus_match.core.exceptions import NexusMatchError
    from nexus_match.core.matching import CandidateSnapshotProvider, MatchingEngine
    from nexus_match.utils.constants import MatchStatus

    requirement = _load_json(requirement_file)
    candidates = _load_candidates(candidates_file)

    engine = MatchingEngine(snapshot_provider=CandidateSnapshotProvider.from_candidates(candidates))
    k = top_n if top_n is not None else (engine.ranker.listing_k if listing else None)

    try:
        response = engine.match(requirement, k)
    except NexusMatchError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        engine.close()

    if response.status != MatchStatus.OK:
        console.print(f"[yellow]Match {response.status.value}[/yellow]")
        if response.retry_after_seconds:
            console.print(f"[dim]Retry in {response.retry_after_seconds:.1f}s[/dim]")
        raise typer.Exit(1)

    if not response.results:
        console.print("[yellow]No candidates matched.[/yellow]")
        raise typer.Exit(0)

    console.print(_results_table(f"Top {len(response.results)} of {len(candidates)} candidates", response.results))

    insights = response.insights
    if insights is not None:
        console.print(
            f"\n[bold]Average score:[/bold] {insights.average_score:.1%}"
            f"   [bold]Strongest factor:[/bold] {insights.strongest_factor or '-'}"
        )


@app.command()
def watch(
    requirement_file: Path = typer.Argument(..., help="JSON file with the training requirement"),
    candidates_file: Path = typer.Argument(..., help="JSON file with a list of candidates"),
    polls: int = typer.Option(3, "--polls", "-p", help="Number of polls to run"),
    interval: float = typer.Option(2.0, "--interval", "-i", help="Seconds between polls"),
):
    """Run a match session, re-reading the candidates file on every poll."""
    from nexus_match.core.exceptions import NexusMatchError
    from nexus_match.core.matching import CandidateSnapshotProvider, MatchingEngine, MatchSession
    from nexus_match.data.repositories import InMemoryCandidateDirectory

    directory = InMemoryCandidateDirectory(_load_candidates(candidates_file))
    provider = CandidateSnapshotProvider(directory)
    engine = MatchingEngine(snapshot_provider=provider)
    session = MatchSession(engine, auto_poll=False)

    def show(response) -> None:
        console.print(
            f"\n[bold]Revision {response.revision}[/bold] "
            f"status={response.status.value} snapshot=v{response.snapshot_version}"
        )
        if response.results:
            console.print(_results_table("Matches", response.results))
        elif response.missing_fields:
            console.print(f"[yellow]Incomplete: missing {', '.join(response.missing_fields)}[/yellow]")

    try:
        response = session.update(_load_json(requirement_file))
        show(response)
        last_revision = response.revision

        for _ in range(polls):
            time.sleep(interval)
            directory.replace_all(_load_candidates(candidates_file))
            provider.refresh()
            response = session.poll()
            if response is not None and response.revision != last_revision:
                show(response)
                last_revision = response.revision
            else:
                console.print("[dim]  no change[/dim]")
    except NexusMatchError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        session.close()
        engine.close()


if __name__ == "__main__":
    app()
