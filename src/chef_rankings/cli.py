"""CLI for chef rankings."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, TypeVar

import structlog
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from chef_rankings import __version__
from chef_rankings.core.config import RankingsConfig, load_config
from chef_rankings.core.errors import ConfigurationError, NotFoundError, StoreError
from chef_rankings.core.progress import RecalculationProgress
from chef_rankings.pipeline import RankingPipeline, open_pipeline
from chef_rankings.services.importer import load_import_file

T = TypeVar("T")

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="chef-rankings",
    help="Chef Rankings - weighted chef scoring, ranking and monthly snapshots",
    add_completion=False,
)
weights_app = typer.Typer(help="Show or change scoring weights")
app.add_typer(weights_app, name="weights")
console = Console()

ConfigOption = Annotated[
    Path | None, typer.Option("--config", "-c", help="Path to config YAML file")
]
DatabaseOption = Annotated[
    str | None, typer.Option("--database-url", help="Override the database URL")
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"chef-rankings v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Chef Rankings CLI."""
    load_dotenv()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load(config_path: Path | None) -> RankingsConfig:
    return load_config(config_path) if config_path else RankingsConfig()


def _run(
    config_path: Path | None,
    database_url: str | None,
    verbose: bool,
    action: Callable[[RankingPipeline], Awaitable[T]],
) -> T:
    """Open a pipeline, run ``action`` on it and map errors to exit code 1."""
    _configure_logging(verbose)
    try:
        config = _load(config_path)
        pipeline = open_pipeline(config, database_url)

        async def _go() -> T:
            try:
                return await action(pipeline)
            finally:
                await pipeline.store.close()

        return asyncio.run(_go())

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except ConfigurationError as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e
    except NotFoundError as e:
        console.print(f"[red]Not found:[/red] {e}")
        raise typer.Exit(1) from e
    except StoreError as e:
        console.print(f"[red]Database error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1) from e


@app.command("init-db")
def init_db(
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create the database tables."""

    async def _action(pipeline: RankingPipeline) -> str:
        return pipeline.store.database_url

    url = _run(config_path, database_url, verbose, _action)
    console.print(f"[green]Database ready:[/green] {url}")


@app.command()
def recalculate(
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Rescore every active chef and reassign ranks."""

    async def _action(pipeline: RankingPipeline):
        if not pipeline.config.ranking.progress:
            return await pipeline.recalculate()
        with RecalculationProgress(console, "Recalculating") as progress:
            return await pipeline.recalculate(on_progress=progress.update)

    ranked = _run(config_path, database_url, verbose, _action)
    console.print(f"[bold green]Scored {len(ranked)} chefs[/bold green]")
    for result in ranked[:3]:
        console.print(f"  {result.rank}. {result.name} ({result.total_score:.1f})")


@app.command()
def publish(
    month: Annotated[str, typer.Argument(help="Snapshot month (YYYY-MM)")],
    notes: Annotated[str | None, typer.Option("--notes", help="Snapshot notes")] = None,
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Recalculate and publish the monthly snapshot."""

    async def _action(pipeline: RankingPipeline):
        if not pipeline.config.ranking.progress:
            return await pipeline.publish_snapshot(month, notes)
        with RecalculationProgress(console, f"Publishing {month}") as progress:
            return await pipeline.publish_snapshot(month, notes, on_progress=progress.update)

    result = _run(config_path, database_url, verbose, _action)
    console.print(f"[bold green]{result.summary}[/bold green]")
    for chef in result.top_chefs:
        console.print(f"  {chef.rank}. {chef.name} ({chef.total_score:.1f})")


@weights_app.command("show")
def weights_show(
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show the effective scoring weights."""

    async def _action(pipeline: RankingPipeline):
        return await pipeline.scoring.get_weights()

    weights = _run(config_path, database_url, verbose, _action)
    table = Table("Category", "Weight")
    for category, value in weights.as_dict().items():
        table.add_row(category, f"{value:.2f}")
    table.add_row("[bold]total[/bold]", f"{weights.total:.2f}")
    console.print(table)


@weights_app.command("set")
def weights_set(
    formal_accolades: Annotated[float | None, typer.Option("--formal-accolades")] = None,
    career_track: Annotated[float | None, typer.Option("--career-track")] = None,
    public_signals: Annotated[float | None, typer.Option("--public-signals")] = None,
    peer_standing: Annotated[float | None, typer.Option("--peer-standing")] = None,
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Update weights for the given categories and recalculate all scores."""
    updates = {
        "formalAccolades": formal_accolades,
        "careerTrack": career_track,
        "publicSignals": public_signals,
        "peerStanding": peer_standing,
    }
    updates = {k: v for k, v in updates.items() if v is not None}
    if not updates:
        console.print("[yellow]No weights given; nothing to do.[/yellow]")
        raise typer.Exit(0)

    async def _action(pipeline: RankingPipeline):
        return await pipeline.update_weights(updates)

    weights = _run(config_path, database_url, verbose, _action)
    console.print("[green]Weights updated and scores recalculated.[/green]")
    console.print(json.dumps(weights.as_dict(), indent=2))


@app.command("import")
def import_chefs(
    file: Annotated[Path, typer.Argument(help="JSON file with chef records")],
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Import chefs from a JSON file and recalculate scores."""

    async def _action(pipeline: RankingPipeline):
        chefs = load_import_file(file)
        return await pipeline.import_chefs(chefs)

    result = _run(config_path, database_url, verbose, _action)
    console.print(
        f"[green]Imported {result.imported}[/green], skipped {result.skipped} "
        f"of {result.total} chefs"
    )


@app.command()
def export(
    fmt: Annotated[str, typer.Option("--format", "-f", help="csv, json or md")] = "csv",
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Export the current ranking."""

    async def _action(pipeline: RankingPipeline):
        return await pipeline.export(fmt)

    path = _run(config_path, database_url, verbose, _action)
    console.print(f"Exported to: {path}")


@app.command()
def rankings(
    limit: Annotated[int, typer.Option("--limit", "-n", help="Rows to show")] = 20,
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show the live ranking with movement since the previous snapshot."""

    async def _action(pipeline: RankingPipeline):
        return await pipeline.scoring.current_rankings(limit=limit)

    rows, total = _run(config_path, database_url, verbose, _action)
    table = Table("Rank", "Chef", "Score", "Δ", title=f"Rankings ({total} chefs)")
    for row in rows:
        delta = "new" if row.delta is None else f"{row.delta:+d}"
        table.add_row(str(row.rank or "-"), row.chef.name, f"{row.total_score:.1f}", delta)
    console.print(table)


@app.command()
def snapshots(
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List published snapshots."""

    async def _action(pipeline: RankingPipeline):
        return await pipeline.snapshots.list_snapshots()

    listed = _run(config_path, database_url, verbose, _action)
    table = Table("Month", "Published", "Chefs", "Notes")
    for snapshot, count in listed:
        published = snapshot.published_at.isoformat() if snapshot.published_at else "-"
        table.add_row(snapshot.month, published, str(count), snapshot.notes or "")
    console.print(table)


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to config YAML file")],
) -> None:
    """Validate a configuration file without running."""
    try:
        config = load_config(config_path)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Database: {config.get_database_url()}")
        console.print(f"  Window: {config.scoring.window_years} years")
        console.print(f"  Default weights: {config.scoring.default_weights.model_dump()}")
        console.print(f"  Transactional writes: {config.ranking.transactional_writes}")

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]Validation error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]Chef Rankings[/bold]")
    console.print(f"Version: {__version__}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Import chefs and score them")
    console.print("  uv run chef-rankings import data/chefs.json\n")

    console.print("  # Recalculate all scores")
    console.print("  uv run chef-rankings recalculate\n")

    console.print("  # Publish this month's snapshot")
    console.print("  uv run chef-rankings publish 2026-10 --notes 'October update'\n")

    console.print("  # Change weights (triggers recalculation)")
    console.print("  uv run chef-rankings weights set --formal-accolades 0.4\n")

    console.print("  # Export rankings")
    console.print("  uv run chef-rankings export --format md")


if __name__ == "__main__":
    app()
