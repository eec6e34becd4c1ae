"""Formatting utilities for run reports."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from ..core.models import RunReport, Verdict

# Display order and style of each verdict
VERDICT_STYLES = {
    Verdict.PASS: "green",
    Verdict.PROMOTE: "cyan",
    Verdict.KNOWN_GAP: "yellow",
    Verdict.REGRESSION: "red",
    Verdict.INCONCLUSIVE: "magenta",
}


def summary_table(report: RunReport, title: str = "Run Summary") -> Table:
    """Build a rich table with one row per verdict."""
    table = Table(title=title, show_header=False)
    table.add_column("Verdict", style="cyan")
    table.add_column("Count", style="white", justify="right")

    table.add_row("Fixtures", str(len(report.results)))
    for verdict, style in VERDICT_STYLES.items():
        table.add_row(verdict.value, f"[{style}]{report.count(verdict)}[/{style}]")
    table.add_row("Duration", f"{report.duration_seconds:.2f}s")
    return table


def print_report(
    report: RunReport,
    console: Console,
    title: str = "Run Summary",
    max_failures: Optional[int] = 20,
) -> None:
    """Print the summary table, the failing fixtures and the promotion candidates."""
    console.print(summary_table(report, title))

    failures = report.failures
    if failures:
        console.print()
        console.print(f"[bold red]{len(failures)} failing fixture(s):[/bold red]")
        shown = failures if max_failures is None else failures[:max_failures]
        for result in shown:
            style = VERDICT_STYLES[result.verdict]
            console.print(
                f"  [{style}]{result.verdict.value}[/{style}] {result.path} "
                f"[dim]({result.outcome.value})[/dim]",
                highlight=False,
            )
            if result.detail:
                console.print(f"[dim]{_indent(result.detail)}[/dim]", markup=False, highlight=False)
        if len(shown) < len(failures):
            console.print(f"  [dim]... and {len(failures) - len(shown)} more[/dim]")

    promoted = report.with_verdict(Verdict.PROMOTE)
    if promoted:
        console.print()
        console.print(
            f"[bold cyan]{len(promoted)} allowlisted fixture(s) now match "
            f"and can be removed from the allowlist:[/bold cyan]"
        )
        for result in promoted:
            console.print(f"  {result.path}", highlight=False)


def _indent(text: str, prefix: str = "      ") -> str:
    return "\n".join(prefix + line for line in text.splitlines())


def format_report_markdown(report: RunReport, title: str = "Equivalence Run") -> str:
    """Format a RunReport as Markdown."""
    lines = [
        f"# {title}",
        "",
        f"**Started:** {report.started_at.isoformat()}",
        f"**Duration:** {report.duration_seconds:.2f}s",
        f"**Result:** {'success' if report.succeeded else 'failure'}",
        "",
        "## Summary",
        "",
        "| Verdict | Count |",
        "|---------|-------|",
    ]
    for verdict in VERDICT_STYLES:
        lines.append(f"| {verdict.value} | {report.count(verdict)} |")
    lines.append("")

    failures = report.failures
    if failures:
        lines.extend(["## Failures", ""])
        for result in failures:
            lines.append(f"### {result.path}")
            lines.append("")
            lines.append(f"- Verdict: {result.verdict.value}")
            lines.append(f"- Outcome: {result.outcome.value}")
            if result.detail:
                lines.extend(["", "```", result.detail, "```"])
            lines.append("")

    promoted = report.with_verdict(Verdict.PROMOTE)
    if promoted:
        lines.extend(["## Ready for promotion", ""])
        lines.extend(f"- {r.path}" for r in promoted)
        lines.append("")

    return "\n".join(lines)


def save_report_markdown(report: RunReport, output_path: Path, title: str = "Equivalence Run") -> Path:
    """Write the Markdown report to ``output_path``."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(format_report_markdown(report, title), encoding="utf-8")
    return output_path
