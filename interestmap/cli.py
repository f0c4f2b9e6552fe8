"""Command-line interface for Interestmap."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from interestmap import __version__
from interestmap.config import InterestmapSettings, load_settings
from interestmap.dataset import Dataset, build_dataset, decode_upload

app = typer.Typer(
    name="interestmap",
    help="Reader-interest dashboard: rankings, categories, connections and AI narratives.",
    no_args_is_help=True,
)
console = Console(width=min(100, Console().width))


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"interestmap {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Reader-interest dashboard: rankings, categories, connections and AI narratives."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

DataFileArg = Annotated[
    Path,
    typer.Argument(
        exists=True,
        dir_okay=False,
        readable=True,
        help="Text file with one respondent per line, interests separated by commas.",
    ),
]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")]
LLMOpt = Annotated[
    str | None,
    typer.Option("--llm", "-l", help="LLM provider: gemini, claude, chatgpt, local."),
]


def _settings(verbose: bool, **overrides: object) -> InterestmapSettings:
    """Load settings and logging, turning config errors into a clean exit."""
    from interestmap.logging import setup_logging

    try:
        settings = load_settings(**overrides)
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)
    setup_logging(output_dir=settings.output_dir, verbose=verbose, file_level=settings.log_level)
    return settings


def _load(data_file: Path) -> Dataset:
    dataset = build_dataset(decode_upload(data_file.read_bytes()), data_file.name)
    if not dataset.has_data:
        console.print(f"[yellow]No interests found in {escape(str(data_file))}.[/yellow]")
        raise typer.Exit(1)
    return dataset


def _label(interest: str) -> str:
    return interest[:1].upper() + interest[1:]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def serve(
    data_file: Annotated[
        Path | None,
        typer.Argument(exists=True, dir_okay=False, help="Interest file to load on startup."),
    ] = None,
    port: Annotated[int, typer.Option("--port", "-p", help="Port to serve on.")] = 8160,
    host: Annotated[str, typer.Option("--host", help="Interface to bind.")] = "127.0.0.1",
    reload: Annotated[
        bool, typer.Option("--reload", help="Auto-reload on Python changes.")
    ] = False,
    verbose: VerboseOpt = False,
) -> None:
    """Launch the dashboard API server."""
    import uvicorn

    settings = _settings(verbose)
    console.print(f"\n  API docs: [bold cyan]http://{host}:{port}/api/docs[/bold cyan]\n")

    if reload:
        # uvicorn needs an import string to reload; the factory reads these back
        import os

        if data_file is not None:
            os.environ["_INTERESTMAP_DATA_FILE"] = str(data_file.resolve())
        if verbose:
            os.environ["_INTERESTMAP_VERBOSE"] = "1"

        uvicorn.run(
            "interestmap.server.app:create_app",
            host=host,
            port=port,
            reload=True,
            factory=True,
            log_level="info" if verbose else "warning",
        )
    else:
        from interestmap.server.app import create_app

        app_instance = create_app(settings=settings, data_file=data_file, verbose=verbose)
        uvicorn.run(app_instance, host=host, port=port, log_level="info" if verbose else "warning")


@app.command()
def overview(
    data_file: DataFileArg,
    top: Annotated[
        int | None, typer.Option("--top", "-n", help="How many interests to list.")
    ] = None,
    filter_text: Annotated[
        str, typer.Option("--filter", "-f", help="Only interests containing this text.")
    ] = "",
    verbose: VerboseOpt = False,
) -> None:
    """Print the most mentioned interests."""
    from interestmap.analysis.frequency import filter_interests, top_interests

    settings = _settings(verbose)
    dataset = _load(data_file)

    n = top or settings.overview_top_n
    ranked = top_interests(filter_interests(dataset.ranked_list(), filter_text), n)
    console.print(
        f"[bold]{dataset.respondent_count}[/bold] respondents, "
        f"[bold]{dataset.distinct_interests}[/bold] distinct interests\n"
    )
    if not ranked:
        console.print(f'[dim]No interests match "{escape(filter_text)}".[/dim]')
        return
    for i, (interest, count) in enumerate(ranked, start=1):
        console.print(f"  {i:>3}. {escape(_label(interest))} [dim]({count})[/dim]")


@app.command()
def categories(
    data_file: DataFileArg,
    top: Annotated[int | None, typer.Option("--top", "-n", help="Top terms per category.")] = None,
    categories_file: Annotated[
        Path | None, typer.Option("--categories", "-c", help="Alternative category YAML file.")
    ] = None,
    verbose: VerboseOpt = False,
) -> None:
    """Print interest totals and top terms per category."""
    from interestmap.analysis.categorize import categorize
    from interestmap.categories import load_categories

    settings = _settings(verbose, categories_file=categories_file)
    try:
        spec = load_categories(settings.categories_file)
    except (OSError, ValueError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)

    dataset = _load(data_file)
    breakdown = categorize(dataset.ranked_list(), spec)
    grand_total = sum(breakdown.totals.values())
    n = top or settings.category_top_n

    for name in spec.names:
        total = breakdown.totals[name]
        share = total / grand_total * 100 if grand_total else 0.0
        console.print(f"[bold]{escape(name)}[/bold]  {total} [dim]({share:.1f}%)[/dim]")
        terms = ", ".join(f"{t} ({c})" for t, c in breakdown.top_terms(name, n))
        console.print(f"  [dim]{escape(terms) or '(none)'}[/dim]")


@app.command()
def connections(
    data_file: DataFileArg,
    query: Annotated[str, typer.Argument(help="Interest to find connections for.")],
    verbose: VerboseOpt = False,
) -> None:
    """Print the interests most often listed together with QUERY."""
    from interestmap.analysis.connections import find_connections
    from interestmap.analysis.models import ConnectionOutcome

    settings = _settings(verbose)
    dataset = _load(data_file)

    result = find_connections(query, dataset.lines, limit=settings.connections_limit)
    if result.outcome == ConnectionOutcome.NO_QUERY:
        console.print("[dim]Nothing to search for.[/dim]")
        return
    if result.outcome != ConnectionOutcome.OK:
        console.print(f"[yellow]{escape(result.message or '')}[/yellow]")
        return

    console.print(f"[bold]{escape(result.title or '')}[/bold]")
    for c in result.connections:
        label = escape(_label(c.interest))
        console.print(f"  {label} [dim]({c.percentage:.1f}% av fallen)[/dim]")


@app.command()
def persona(
    data_file: DataFileArg,
    llm: LLMOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Ask the LLM for a persona of the typical reader."""
    from interestmap.narrative import NarrativeService

    settings = _settings(verbose, llm_provider=llm)
    dataset = _load(data_file)

    with console.status("Genererar..."):
        text = asyncio.run(NarrativeService(settings).persona(dataset.ranked_list()))
    console.print(text, markup=False, highlight=False)


@app.command()
def explain(
    term: Annotated[str, typer.Argument(help="Term to explain.")],
    llm: LLMOpt = None,
    verbose: VerboseOpt = False,
) -> None:
    """Ask the LLM for a plain-language explanation of TERM."""
    from interestmap.narrative import NarrativeService

    settings = _settings(verbose, llm_provider=llm)
    try:
        with console.status("Förklarar..."):
            text = asyncio.run(NarrativeService(settings).explain(term))
    except ValueError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)
    console.print(text, markup=False, highlight=False)
