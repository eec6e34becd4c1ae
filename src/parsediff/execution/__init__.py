"""parsediff fixture execution.

Public API:
    - FixtureRunner: Evaluate fixtures and classify them against the allowlist
    - classify: Outcome x allowlist membership -> Verdict
    - Ledger: Failing / unexpectedly passing audit trail
    - build_fixture_table: Corpus -> (name, path, allowed_failure) rows
    - run_suite / run_snippets: Run a suite definition end to end
"""

from .corpus import build_fixture_table, discover, load_fixture, read_source
from .ledger import FileSink, Ledger, LedgerSink, MemorySink
from .runner import FixtureRunner, ProgressCallback, classify
from .suite import SnippetReport, build_comparator, run_snippets, run_suite

__all__ = [
    "run_suite",
    "run_snippets",
    "build_comparator",
    "SnippetReport",
    "FixtureRunner",
    "ProgressCallback",
    "classify",
    "Ledger",
    "LedgerSink",
    "FileSink",
    "MemorySink",
    "build_fixture_table",
    "discover",
    "load_fixture",
    "read_source",
]
