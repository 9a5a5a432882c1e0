"""Command-line interface for memsearch using Click."""

import json
import sys
import time
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .. import __version__
from ..config import ConfigManager, MemSearchConfig
from ..search import SearchResult
from ..service import MemorySearch
from ..utils.logging import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


def load_config(ctx) -> MemSearchConfig:
    """Load configuration for a command, applying the --workspace override."""
    config_manager = ConfigManager(ctx.obj.get("config_path"))
    config = config_manager.load(workspace=ctx.obj.get("workspace"), create_if_missing=True)
    ctx.obj["loaded_from"] = config_manager.loaded_from

    setup_logging(
        level=config.logging.level,
        log_dir=config.logging.log_dir,
        max_bytes=config.logging.max_bytes,
        backup_count=config.logging.backup_count,
        console_enabled=config.logging.console_enabled,
        file_enabled=config.logging.file_enabled,
    )
    return config


def without_watching(config: MemSearchConfig) -> MemSearchConfig:
    """Copy a config with file watching turned off, for one-shot commands."""
    return config.model_copy(
        update={"index": config.index.model_copy(update={"watch_enabled": False})}
    )


def format_result_rich(result: SearchResult, index: int) -> Panel:
    """Format a single search result as a Rich panel."""
    header = Text()
    header.append(f"{index}. ", style="dim")
    header.append(result.path, style="bold")
    header.append(f"  {result.score:.4f}", style="green")

    lines = []
    for line_number, snippet in zip(result.line_numbers, result.snippets):
        line = Text()
        line.append(f"{line_number:>5}  ", style="dim")
        line.append(snippet)
        lines.append(line)

    return Panel(
        Text("\n").join(lines),
        title=header,
        title_align="left",
        border_style="cyan",
        padding=(0, 1),
    )


def format_status_table(status: dict) -> Table:
    """Format index status as a Rich table."""
    table = Table(title="Memory Index", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Ready", "yes" if status["ready"] else "no")
    table.add_row("Documents", str(status["docCount"]))
    table.add_row("Unique terms", str(status["indexSize"]))
    table.add_row("Watching", "yes" if status["watching"] else "no")
    return table


@click.group()
@click.version_option(version=__version__, prog_name="memsearch")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--workspace", "-w",
    type=click.Path(file_okay=False, path_type=Path),
    help="Workspace root holding MEMORY.md and memory/ (overrides config)",
)
@click.pass_context
def cli(ctx, config: Optional[Path], workspace: Optional[Path]):
    """
    memsearch - local TF-IDF search over memory notes.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["workspace"] = workspace


@cli.command(name="search")
@click.argument("query", nargs=-1, required=True)
@click.option("--limit", "-n", type=int, default=None, help="Maximum number of results")
@click.option(
    "--threshold", "score_threshold", type=float, default=None, help="Minimum relevance score"
)
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def search_command(
    ctx,
    query: tuple,
    limit: Optional[int],
    score_threshold: Optional[float],
    output_json: bool,
):
    """
    Search memory files.

    QUERY is the search query (can be multiple words).
    """
    query_str = " ".join(query)

    try:
        config = load_config(ctx)
    except Exception as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    memory = MemorySearch(without_watching(config))
    try:
        results = memory.search(query_str, limit=limit, score_threshold=score_threshold)
    finally:
        memory.close()

    if output_json:
        click.echo(json.dumps([result.to_dict() for result in results], indent=2))
    elif not results:
        console.print("[yellow]No matching memory found.[/yellow]")
    else:
        for i, result in enumerate(results, 1):
            console.print(format_result_rich(result, i))
        console.print(f"\n[dim]Found {len(results)} result(s)[/dim]")


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output status as JSON")
@click.pass_context
def status(ctx, output_json: bool):
    """Show index readiness and counts."""
    try:
        config = load_config(ctx)
    except Exception as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    memory = MemorySearch(without_watching(config))
    try:
        index_status = memory.get_status().to_dict()
    finally:
        memory.close()

    if output_json:
        click.echo(json.dumps(index_status, indent=2))
        return

    console.print(format_status_table(index_status))
    console.print(f"\n[cyan]Workspace:[/cyan] {config.workspace_root}")
    console.print(f"[cyan]Snapshot:[/cyan] {config.get_index_path()}")


@cli.command()
@click.pass_context
def rebuild(ctx):
    """Rebuild the index from the memory files now."""
    try:
        config = load_config(ctx)
    except Exception as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    memory = MemorySearch(without_watching(config))
    try:
        result = memory.rebuild()
    finally:
        memory.close()

    if not result.success:
        console.print(f"[bold red]✗ Rebuild failed:[/bold red] {result.error}")
        sys.exit(1)

    console.print(
        f"[bold green]✓ Index rebuilt:[/bold green] {result.status.doc_count} documents, "
        f"{result.status.index_size} unique terms"
    )


@cli.command()
@click.pass_context
def watch(ctx):
    """Keep the index up to date until interrupted."""
    try:
        config = load_config(ctx)
    except Exception as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    memory = MemorySearch(config)
    try:
        memory.ensure_initialized()
        if not memory.index_manager.watching and not memory.index_manager.start_watching():
            console.print("[yellow]⚠ Nothing to watch: no MEMORY.md or memory/ folder.[/yellow]")
            sys.exit(1)

        console.print("[cyan]Watching memory files. Press Ctrl+C to stop.[/cyan]")
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopping...[/dim]")
    finally:
        memory.close()


@cli.group(name="config")
def config_group():
    """Manage memsearch configuration."""
    pass


@config_group.command(name="show")
@click.pass_context
def config_show(ctx):
    """Display current configuration."""
    try:
        config = load_config(ctx)
    except Exception as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    config_path = ctx.obj.get("loaded_from")

    console.print(f"[bold]Workspace:[/bold] {config.workspace_root}")
    console.print(f"[bold]Snapshot:[/bold] {config.get_index_path()}")

    console.print("\n[bold]Index:[/bold]")
    console.print(f"  Debounce: {config.index.debounce_seconds}s")
    console.print(f"  Watch: {'enabled' if config.index.watch_enabled else 'disabled'}")

    console.print("\n[bold]Search:[/bold]")
    console.print(f"  Limit: {config.search.limit}")
    console.print(f"  Score threshold: {config.search.score_threshold}")

    console.print("\n[bold]Logging:[/bold]")
    console.print(f"  Level: {config.logging.level}")
    console.print(f"  File logging: {'enabled' if config.logging.file_enabled else 'disabled'}")

    console.print(f"\n[dim]Config file: {config_path or '(defaults)'}[/dim]")


if __name__ == "__main__":
    cli()
