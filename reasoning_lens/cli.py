"""Reasoning Lens CLI."""

import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from reasoning_lens import __version__
from reasoning_lens.config import get_settings
from reasoning_lens.logging_config import setup_logging

app = typer.Typer(
    name="reasoning-lens",
    help="Reasoning Lens - Separate model reasoning from final answers",
    no_args_is_help=True,
)
console = Console()

SOURCE_HELP = "File holding the model response, or - for stdin"


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Cannot read {source}: {e}[/red]")
        raise typer.Exit(1) from e


def _print_result(result, title: str) -> None:
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("method", f"[cyan]{result.extraction_method}[/cyan]")
    table.add_row("confidence", f"[green]{result.confidence}[/green]")
    table.add_row("length", f"{len(result.content)} / {result.original_length}")
    table.add_row("patterns", str(len(result.patterns)))
    if result.streaming_chunks is not None:
        table.add_row("chunks", str(len(result.streaming_chunks)))
    console.print(table)
    console.print(Panel(Text(result.content), title=title, border_style="blue"))


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log extraction decisions"),
) -> None:
    """Route library logs to stderr only."""
    setup_logging(log_file=False, level="DEBUG" if verbose else None)


@app.command()
def extract(
    source: str = typer.Argument("-", help=SOURCE_HELP),
    max_length: int | None = typer.Option(None, "--max-length", "-m", help="Truncation limit"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the result cache"),
    json_output: bool = typer.Option(False, "--json", help="Machine-readable JSON output"),
):
    """Extract the reasoning part of a model response."""
    from reasoning_lens.services.extractor import get_reasoning_extractor

    content = _read_source(source)
    result = get_reasoning_extractor().extract(
        content, max_length=max_length, use_cache=not no_cache
    )

    if json_output:
        typer.echo(json.dumps(result.to_dict() if result else None, ensure_ascii=False, indent=2))
        return

    if result is None:
        console.print("[yellow]No reasoning found[/yellow]")
        return
    _print_result(result, "Reasoning")


@app.command()
def strip(
    source: str = typer.Argument("-", help=SOURCE_HELP),
    no_extract: bool = typer.Option(
        False,
        "--no-extract",
        help="Only remove markers and sections; skip removing extracted lines",
    ),
):
    """Print a model response with its reasoning removed."""
    from reasoning_lens.services.extractor import get_reasoning_extractor
    from reasoning_lens.services.removal import remove_reasoning_from_content

    content = _read_source(source)
    reasoning = None
    if not no_extract:
        result = get_reasoning_extractor().extract(content)
        reasoning = result.content if result else None
    typer.echo(remove_reasoning_from_content(content, reasoning))


@app.command()
def analyze(
    source: str = typer.Argument("-", help=SOURCE_HELP),
    json_output: bool = typer.Option(False, "--json", help="Machine-readable JSON output"),
):
    """Score the reasoning patterns of a text and suggest improvements."""
    from reasoning_lens.services.analytics import get_reasoning_analytics

    analytics = get_reasoning_analytics(_read_source(source))

    if json_output:
        typer.echo(json.dumps(analytics.to_dict(), ensure_ascii=False, indent=2))
        return

    metrics = analytics.metrics
    table = Table(title="Reasoning Analytics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Patterns", str(metrics.total_patterns))
    table.add_row("Average confidence", f"{metrics.average_confidence:.2f}")
    table.add_row("Dominant type", metrics.dominant_type)
    table.add_row("Complexity", f"{metrics.complexity_score:.2f}")
    table.add_row("Readability", f"{metrics.readability_score:.2f}")
    console.print(table)

    for suggestion in analytics.suggestions:
        console.print(f"[yellow]•[/yellow] {suggestion}")


@app.command()
def stream(
    source: str = typer.Argument("-", help=SOURCE_HELP),
    chunk_size: int = typer.Option(16, "--chunk-size", "-c", min=1, help="Characters per chunk"),
):
    """Replay a response through the streaming extractor in fixed-size chunks."""
    from reasoning_lens.services.streaming import create_streaming_extractor

    content = _read_source(source)
    session = create_streaming_extractor()

    partials = 0
    for start in range(0, len(content), chunk_size):
        if session.process_chunk(content[start : start + chunk_size]) is not None:
            partials += 1

    state = session.get_state()
    console.print(
        f"[dim]{partials} partial result(s), phase {state.phase}, "
        f"marker {escape(state.current_pattern or '-')}[/dim]"
    )

    result = session.finalize()
    if result is None:
        console.print("[yellow]No reasoning found[/yellow]")
        return
    _print_result(result, "Streamed reasoning")


@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(None, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload (dev)"),
):
    """Start the Reasoning Lens API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port

    console.print(f"[green]Starting Reasoning Lens on http://{host}:{port}[/green]")
    uvicorn.run(
        "reasoning_lens.api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def version():
    """Show version information."""
    console.print(f"Reasoning Lens v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
