"""Command-line interface for philorag.

This module provides a thin Typer wrapper around the commands layer.
Each command:
1. Parses args (via Typer)
2. Creates progress callbacks (for Rich display)
3. Calls commands module functions
4. Renders results with Rich
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from philorag import __version__
from philorag.commands import (
    CommandStage,
    ProgressUpdate,
    clear,
    index,
    query,
    sources,
    stats,
)
from philorag.commands.base import IndexCommandResult, QueryCommandResult, SourceIndexInfo
from philorag.config import load_env_file
from philorag.models import TextSource
from philorag.retriever import NO_RESULTS

app = typer.Typer(
    name="philorag",
    help="philorag - question-enriched retrieval over classic philosophical texts.",
    no_args_is_help=True,
)
console = Console()

PREVIEW_LENGTH = 200


def version_callback(value: bool) -> None:
    if value:
        console.print(f"philorag {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    if not verbose:
        # LiteLLM logs every request at INFO
        logging.getLogger("LiteLLM").setLevel(logging.WARNING)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging.",
    ),
) -> None:
    """philorag - question-enriched retrieval over classic philosophical texts."""
    load_env_file()
    configure_logging(verbose)


DATA_DIR_OPTION = typer.Option(
    None,
    "--data-dir",
    "-d",
    help="Data directory (default: from config)",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config file",
)
PLAIN_OPTION = typer.Option(
    False,
    "--plain",
    help="Plain output (no colors/formatting)",
)


@app.command(name="index")
def index_cmd(
    philosopher: str = typer.Option(
        None,
        "--philosopher",
        "-p",
        help="Only index this philosopher's sources",
    ),
    source: str = typer.Option(
        None,
        "--source",
        "-s",
        help="Only index this source id",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Regenerate every passage instead of resuming",
    ),
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Clear the whole store before indexing",
    ),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Fetch, enrich and index catalog sources."""
    options = {
        "data_dir": data_dir,
        "config_path": config_file,
        "philosopher": philosopher,
        "source_id": source,
        "force": force,
        "reset": reset,
    }

    if not plain and console.is_terminal:
        result = _index_with_progress(options)
    else:
        result = _index_simple(options)

    _render_index_result(result, plain)


def _index_with_progress(options: dict) -> IndexCommandResult:
    """Index with Rich progress bars."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.fields[stage]:>12}", justify="right"),
        BarColumn(bar_width=20),
        TextColumn("{task.fields[progress_text]}", style="cyan"),
        TextColumn("{task.description}", style="dim"),
        console=console,
    ) as progress:
        sources_task = progress.add_task("", total=None, stage="Sources", progress_text="")
        stage_task = progress.add_task("", total=100, stage="", visible=False, progress_text="")

        def on_source_start(text_source: TextSource, position: int, total: int) -> None:
            progress.update(
                sources_task,
                description=text_source.title,
                completed=position,
                total=total,
                progress_text=f"{position + 1}/{total}",
            )

        def on_progress(update: ProgressUpdate) -> None:
            if update.total > 1 and update.stage is CommandStage.ENRICHING:
                progress.update(
                    stage_task,
                    visible=True,
                    stage=update.stage.value,
                    progress_text=f"{update.percentage}%",
                    description=f"({update.current}/{update.total})",
                    total=update.total,
                    completed=update.current,
                )
            else:
                progress.update(
                    stage_task,
                    visible=True,
                    stage=update.stage.value,
                    progress_text="",
                    description=update.message or "",
                )

        def on_source_complete(info: SourceIndexInfo) -> None:
            progress.update(stage_task, visible=False)
            if not info.success:
                error = escape(info.error or "")
                progress.console.print(f"[red]Failed {info.source_id}: {error}[/red]")

        result = index.index(
            **options,
            on_progress=on_progress,
            on_source_start=on_source_start,
            on_source_complete=on_source_complete,
        )

        progress.update(sources_task, progress_text="Done", description="")

    return result


def _index_simple(options: dict) -> IndexCommandResult:
    """Index with simple console output."""

    def on_source_complete(info: SourceIndexInfo) -> None:
        if not info.success:
            console.print(f"Failed {info.source_id}: {info.error}", markup=False)
        elif info.indexed == 0:
            console.print(f"Up to date {info.source_id} ({info.total_chunks} chunks)")
        else:
            console.print(f"Indexed {info.source_id} ({info.indexed}/{info.total_chunks} chunks)")

    return index.index(**options, on_source_complete=on_source_complete)


def _render_index_result(result: IndexCommandResult, plain: bool) -> None:
    """Render index result to console."""
    if not result.success and not result.source_results:
        console.print(f"[red]Error: {escape(result.error or '')}[/red]")
        raise typer.Exit(1)

    summary = (
        f"Indexed {result.sources_indexed} sources "
        f"({result.total_chunks} new chunks, {result.total_skipped} already indexed)"
    )
    if plain:
        console.print(summary)
        console.print(f"Generated {result.total_questions} questions")
        for source_id, error in result.errors:
            console.print(f"Failed {source_id}: {error}")
    else:
        console.print()
        console.print(f"[green]{summary}[/green]")
        console.print(f"[green]Generated {result.total_questions} questions[/green]")
        if result.sources_failed:
            console.print(f"[red]{result.sources_failed} sources failed[/red]")

    for info in result.source_results:
        if info.stale:
            console.print(
                f"[yellow]{info.source_id}: {info.stale} stale chunks, "
                "run with --force to prune[/yellow]"
            )

    if not result.success:
        raise typer.Exit(1)


@app.command(name="query")
def query_cmd(
    text: str = typer.Argument(..., help="Question to search for"),
    philosopher: list[str] = typer.Option(
        None,
        "--philosopher",
        "-p",
        help="Restrict to a philosopher (repeat for several)",
    ),
    source: str = typer.Option(
        None,
        "--source",
        "-s",
        help="Restrict to one source id",
    ),
    limit: int = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Maximum number of results",
    ),
    min_score: float = typer.Option(
        None,
        "--min-score",
        min=0.0,
        max=1.0,
        help="Minimum relevance score between 0 and 1",
    ),
    context: bool = typer.Option(
        False,
        "--context",
        help="Show adjacent passages for strong matches",
    ),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Search the indexed passages."""
    result = query.query(
        text,
        data_dir=data_dir,
        config_path=config_file,
        philosophers=philosopher or None,
        source_id=source,
        limit=limit,
        min_score=min_score,
        context=context,
    )

    if not result.success:
        console.print(f"[red]Error: {escape(result.error or '')}[/red]")
        raise typer.Exit(1)

    if not result.results:
        if plain:
            console.print(NO_RESULTS)
        else:
            console.print(f"[yellow]{NO_RESULTS}[/yellow]")
        raise typer.Exit(0)

    if plain:
        _render_query_plain(result)
    else:
        _render_query_rich(result)


def _render_query_plain(result: QueryCommandResult) -> None:
    for i, r in enumerate(result.results, 1):
        console.print(
            f"[{i}] {r.title} ({r.philosopher}) score: {r.relevance_score:.3f}", markup=False
        )
        console.print(f"    {r.content[:PREVIEW_LENGTH]}...", markup=False)
        for neighbour in result.context.get(r.id, []):
            console.print(
                f"    context #{neighbour.chunk_index}: {neighbour.content[:80]}...", markup=False
            )
    console.print(f"{len(result.results)} results in {result.elapsed_ms:.0f}ms")


def _render_query_rich(result: QueryCommandResult) -> None:
    for i, r in enumerate(result.results, 1):
        body = Text(r.content)
        for neighbour in result.context.get(r.id, []):
            body.append(f"\n\n#{neighbour.chunk_index}: ", style="bold dim")
            body.append(f"{neighbour.content[:PREVIEW_LENGTH]}...", style="dim")
        console.print(
            Panel(
                body,
                title=f"[{i}] [cyan]{escape(r.title)}[/cyan] ({r.philosopher})",
                subtitle=f"score {r.relevance_score:.3f} | {r.id}",
                border_style="green" if r.relevance_score >= 0.6 else "blue",
            )
        )
    console.print(f"[dim]{len(result.results)} results in {result.elapsed_ms:.0f}ms[/dim]")


@app.command(name="stats")
def stats_cmd(
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """Show how many passages are indexed."""
    result = stats.stats(data_dir=data_dir, config_path=config_file)

    if not result.success:
        console.print(f"[red]Error: {escape(result.error or '')}[/red]")
        raise typer.Exit(1)

    if result.total_chunks == 0:
        if plain:
            console.print("No passages indexed.")
        else:
            console.print("[dim]No passages indexed. Run 'philorag index' first.[/dim]")
        raise typer.Exit(0)

    if plain:
        console.print(f"Total chunks: {result.total_chunks}")
        for philosopher, count in sorted(result.by_philosopher.items()):
            console.print(f"  {philosopher}: {count}")
        return

    table = Table(title=f"Indexed Passages ({result.total_chunks})")
    table.add_column("Philosopher", style="cyan")
    table.add_column("Chunks", style="green", justify="right")
    for philosopher, count in sorted(result.by_philosopher.items()):
        table.add_row(philosopher, str(count))
    console.print(table)

    source_table = Table(title="By Source")
    source_table.add_column("Source", style="cyan")
    source_table.add_column("Chunks", justify="right")
    for source_id, count in sorted(result.by_source.items()):
        source_table.add_row(source_id, str(count))
    console.print(source_table)


@app.command(name="sources")
def sources_cmd(
    philosopher: str = typer.Option(
        None,
        "--philosopher",
        "-p",
        help="Only list this philosopher's sources",
    ),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
    plain: bool = PLAIN_OPTION,
) -> None:
    """List catalog sources and their indexing progress."""
    result = sources.sources(data_dir=data_dir, config_path=config_file, philosopher=philosopher)

    if not result.success:
        console.print(f"[red]Error: {escape(result.error or '')}[/red]")
        raise typer.Exit(1)

    if plain:
        for info in result.sources:
            console.print(
                f"{info.source_id}\t{info.philosopher}\t{info.title}\t{info.indexed_chunks}",
                markup=False,
            )
        return

    table = Table(title=f"Sources ({len(result.sources)})")
    table.add_column("Id", style="cyan")
    table.add_column("Philosopher")
    table.add_column("Title")
    table.add_column("Author", style="dim")
    table.add_column("Chunks", justify="right", style="green")
    for info in result.sources:
        table.add_row(
            info.source_id,
            info.philosopher,
            info.title,
            info.author,
            str(info.indexed_chunks) if info.indexed_chunks else "-",
        )
    console.print(table)


@app.command(name="clear")
def clear_cmd(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Confirm deletion of every indexed passage",
    ),
    data_dir: str = DATA_DIR_OPTION,
    config_file: str = CONFIG_OPTION,
) -> None:
    """Delete every indexed passage. Cached texts are kept."""
    if not yes:
        console.print("[yellow]Refusing to clear without --yes.[/yellow]")
        raise typer.Exit(1)

    result = clear.clear(data_dir=data_dir, config_path=config_file)

    if not result.success:
        console.print(f"[red]Error: {escape(result.error or '')}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Deleted {result.chunks_deleted} chunks[/green]")
