"""CLI entry point for checkhub."""

import importlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from checkhub import __version__
from checkhub.config import ConfigError, Settings, load_settings
from checkhub.format import Format
from checkhub.hub import AggregateCheckFailure, LoadError, RunCancelled, RunOutcome, Status, get_hub

console = Console()
app = typer.Typer(
    name="checkhub",
    help="checkhub - load datasets and run their registered checkers.",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

EXIT_CHECK_FAILED = 1
EXIT_LOAD_FAILED = 2


def setup_logging(level: str) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


def import_modules(modules: list[str]) -> None:
    """Import checker modules so their checkers register with the hub."""
    for module in modules:
        try:
            importlib.import_module(module)
        except ImportError as e:
            console.print(f"[red]Error: could not import checker module '{module}': {e}[/red]")
            raise typer.Exit(EXIT_LOAD_FAILED)


def parse_rewrites(values: list[str]) -> dict[str, str]:
    """Parse ``OLD=NEW`` pairs."""
    rewrites = {}
    for value in values:
        old, sep, new = value.partition("=")
        if not sep or not old:
            raise typer.BadParameter(f"Expected OLD=NEW, got '{value}'", param_hint="--rewrite")
        rewrites[old] = new
    return rewrites


def print_outcome(outcome: RunOutcome) -> None:
    """Render a summary table of a run."""
    table = Table(title=f"checkhub: {outcome.directory} ({outcome.format.value})")
    table.add_column("Checker")
    table.add_column("Phase")
    table.add_column("Status")
    table.add_column("Detail", overflow="fold")
    for result in outcome.results:
        status = "[green]PASS[/green]" if result.status == Status.PASS else "[red]FAIL[/red]"
        table.add_row(result.name, result.phase.value, status, escape(result.error or ""))
    for name in outcome.skipped:
        table.add_row(name, "check", "[dim]SKIP[/dim]", "")
    console.print(table)


@app.command()
def run(
    directory: Annotated[Optional[Path], typer.Argument(help="Directory holding the data files")] = None,
    fmt: Annotated[Optional[Format], typer.Option("--format", "-f", help="Format of the data files")] = None,
    module: Annotated[Optional[list[str]], typer.Option("--module", "-m", help="Module registering checkers (repeatable)")] = None,
    include: Annotated[Optional[list[str]], typer.Option("--include", "-i", help="Glob of checker names to run (repeatable)")] = None,
    exclude: Annotated[Optional[list[str]], typer.Option("--exclude", "-e", help="Glob of checker names to skip (repeatable)")] = None,
    break_failed: Annotated[Optional[int], typer.Option("--break-failed-count", "-b", help="Stop after this many failed checks")] = None,
    rewrite: Annotated[Optional[list[str]], typer.Option("--rewrite", help="Subdir rewrite OLD=NEW (repeatable)")] = None,
    config: Annotated[Optional[Path], typer.Option("--config", "-c", help="YAML or JSON config file")] = None,
    report: Annotated[Optional[Path], typer.Option("--report", help="Write the run outcome as JSON")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    """Load every selected checker's data, then run its checks.

    Exits with 0 when all checks pass, 1 when checks failed and 2 when
    data could not be loaded or the configuration is invalid.
    """
    overrides = {
        "directory": str(directory) if directory else None,
        "format": fmt,
        "modules": module or None,
        "include": include or None,
        "exclude": exclude or None,
        "break_failed_count": break_failed,
        "subdir_rewrites": parse_rewrites(rewrite) if rewrite else None,
        "report_path": str(report) if report else None,
        "log_level": "DEBUG" if verbose else None,
    }
    try:
        settings = load_settings(config, overrides)
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(EXIT_LOAD_FAILED)

    if not settings.directory:
        console.print("[red]Error: no data directory given[/red]")
        raise typer.Exit(EXIT_LOAD_FAILED)

    setup_logging(settings.log_level)
    import_modules(settings.modules)
    exit_code = run_hub(settings)
    raise typer.Exit(exit_code)


def run_hub(settings: Settings) -> int:
    """Run the hub with *settings* and return the process exit code."""
    hub = get_hub()
    if not len(hub):
        console.print("[yellow]No checkers registered. Use --module to import some.[/yellow]")

    outcome: RunOutcome | None = None
    exit_code = 0
    try:
        outcome = hub.run(
            settings.directory,
            settings.to_filter(),
            settings.format,
            *settings.to_options(),
        )
    except LoadError as e:
        outcome = e.outcome
        console.print(Panel(escape(str(e)), title="[red]Load failed[/red]", border_style="red"))
        exit_code = EXIT_LOAD_FAILED
    except AggregateCheckFailure as e:
        outcome = e.outcome
        exit_code = EXIT_CHECK_FAILED
    except RunCancelled as e:
        outcome = e.outcome
        exit_code = EXIT_CHECK_FAILED

    if outcome is not None:
        print_outcome(outcome)
        if settings.report_path:
            path = outcome.save(settings.report_path)
            console.print(f"[dim]Report written to {path}[/dim]")

    console.print()
    if exit_code == 0:
        console.print("[green]✓[/green] All checks passed")
    elif exit_code == EXIT_CHECK_FAILED and outcome is not None:
        console.print(f"[red]✗[/red] Check failed count: {outcome.failed_count}")
    return exit_code


@app.command("list")
def list_checkers(
    module: Annotated[Optional[list[str]], typer.Option("--module", "-m", help="Module registering checkers (repeatable)")] = None,
    config: Annotated[Optional[Path], typer.Option("--config", "-c", help="YAML or JSON config file")] = None,
):
    """List registered checkers."""
    try:
        settings = load_settings(config, {"modules": module or None})
    except ConfigError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(EXIT_LOAD_FAILED)
    import_modules(settings.modules)

    rows = get_hub().info()
    if not rows:
        console.print("[yellow]No checkers registered.[/yellow]")
        return

    table = Table(title="Registered checkers")
    table.add_column("Name")
    table.add_column("Description")
    table.add_column("Class", style="dim")
    for row in rows:
        table.add_row(row["name"], row["description"], row["class"])
    console.print(table)


@app.command()
def version():
    """Show version information."""
    console.print(f"checkhub v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
