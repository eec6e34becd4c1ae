"""Display module for formatting run reports."""

from .formatting import (
    format_report_markdown,
    print_report,
    save_report_markdown,
    summary_table,
)

__all__ = [
    "format_report_markdown",
    "print_report",
    "save_report_markdown",
    "summary_table",
]
