"""parsediff CLI commands.

- run: Run the file-backed fixture corpus of a suite
- snippets: Run the curated inline snippets
- tools: List registered parser adapters

Example:
    $ parsediff run parsediff.yaml --concurrency 16
    $ parsediff run parsediff.yaml --focus seattlerb/bug169.txt
    $ parsediff snippets parsediff.yaml --group alias --group begin_rescue
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .core.env_vars import load_env_file
from .core.errors import ParseDiffError
from .core.logging import configure_logging, level_for_verbosity
from .display import format_report_markdown, print_report, save_report_markdown
from .execution import run_snippets, run_suite
from .parsers import list_tools
from .snippets import SNIPPETS
from .version import __version__

app = typer.Typer(
    name="parsediff",
    help="parsediff - structural equivalence testing of a candidate parser against a reference parser",
    no_args_is_help=True,
)

console = Console()


def _setup(verbose: int) -> None:
    configure_logging(level=level_for_verbosity(verbose))
    load_env_file()


def _with_progress(description: str, quiet: bool, call):
    """Invoke ``call(progress_callback)`` under a progress bar unless quiet."""
    if quiet:
        return call(None)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(description, total=None)

        def progress_callback(current, total, ok, failed):
            progress.update(
                task,
                completed=current,
                total=total,
                description=f"Fixture {current}/{total} ({ok} ok, {failed} failed)",
            )

        return call(progress_callback)


@app.command()
def run(
    suite: Path = typer.Argument(..., help="Suite definition (YAML)"),
    focus: Optional[str] = typer.Option(
        None, "--focus", help="Run only this corpus-relative fixture (default: $FOCUS)"
    ),
    concurrency: Optional[int] = typer.Option(
        None, min=1, help="Fixtures evaluated in parallel (default: from suite)"
    ),
    format: str = typer.Option(
        "table", "--format", "-f", help="Output format: table, json, markdown"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the json/markdown report to this file"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress progress output"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity"),
):
    """Run every fixture of the corpus and classify it against the allowlist.

    Exits with status 1 when a fixture regresses or the reference parser
    rejects a fixture. Known gaps and fixtures ready for promotion do not
    fail the run.
    """
    _setup(verbose)

    try:
        report = _with_progress(
            f"Running {suite}",
            quiet,
            lambda callback: run_suite(
                suite,
                focus=focus,
                concurrency=concurrency,
                progress_callback=callback,
            ),
        )
    except ParseDiffError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=2) from e

    if format == "json":
        json_str = report.model_dump_json(indent=2)
        if output:
            output.write_text(json_str, encoding="utf-8")
            console.print(f"[green]✓[/green] Report exported to {output}")
        else:
            print(json_str)
    elif format == "markdown":
        if output:
            save_report_markdown(report, output)
            console.print(f"[green]✓[/green] Report exported to {output}")
        else:
            print(format_report_markdown(report))
    else:
        console.print()
        print_report(report, console)

    if not report.succeeded:
        raise typer.Exit(code=1)


@app.command()
def snippets(
    suite: Path = typer.Argument(..., help="Suite definition (YAML)"),
    group: Optional[list[str]] = typer.Option(
        None, "--group", "-g", help="Snippet group to run (repeatable, default: all)"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress progress output"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity"),
):
    """Assert exact equivalence on the curated inline snippets."""
    _setup(verbose)

    groups = tuple(group or ())
    unknown = [g for g in groups if g not in SNIPPETS]
    if unknown:
        console.print(
            f"[bold red]Error:[/bold red] Unknown snippet group(s): {', '.join(unknown)}. "
            f"Available: {', '.join(SNIPPETS)}"
        )
        raise typer.Exit(code=2)

    try:
        result = _with_progress(
            "Running snippets",
            quiet,
            lambda callback: run_snippets(suite, groups, progress_callback=callback),
        )
    except ParseDiffError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=2) from e

    console.print()
    print_report(result.report, console, title="Snippet Summary")
    if result.skipped:
        console.print(f"[dim]{len(result.skipped)} snippet(s) skipped on this engine[/dim]")

    if not result.succeeded:
        raise typer.Exit(code=1)


@app.command()
def tools():
    """List the registered parser adapters."""
    for name in list_tools():
        console.print(name)


@app.command()
def version():
    """Show the parsediff version."""
    console.print(f"parsediff {__version__}")


if __name__ == "__main__":
    app()
