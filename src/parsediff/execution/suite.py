"""Suite execution for parsediff.

Wires a SuiteConfig into parsers, a comparator, a ledger and a fixture
runner, then evaluates either the file-backed corpus or the curated inline
snippets.

Example:
    >>> report = run_suite("parsediff.yaml", concurrency=16)
    >>> print(f"{len(report.results)} fixtures, succeeded={report.succeeded}")
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from ..comparison.comparator import EquivalenceComparator
from ..core.errors import RunError
from ..core.loaders import load_suite
from ..core.logging import get_logger
from ..core.models import RunReport, SuiteConfig
from ..parsers import create_parser
from ..snippets import iter_snippets
from .corpus import build_fixture_table
from .ledger import Ledger
from .runner import FixtureRunner, ProgressCallback

logger = get_logger(__name__)


@dataclass
class SnippetReport:
    """Result of running the curated snippets."""

    report: RunReport
    skipped: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.report.succeeded


def _resolve(suite: Union[str, Path, SuiteConfig], focus: Optional[str]) -> SuiteConfig:
    if isinstance(suite, SuiteConfig):
        if focus:
            return suite.model_copy(update={"focus": focus})
        return suite
    return load_suite(Path(suite), focus=focus)


def build_comparator(suite: SuiteConfig) -> EquivalenceComparator:
    """Create both parsers of a suite and the comparator over them."""
    reference = create_parser(suite.reference)
    candidate = create_parser(suite.candidate)
    return EquivalenceComparator(reference, candidate)


def run_suite(
    suite: Union[str, Path, SuiteConfig],
    focus: Optional[str] = None,
    concurrency: Optional[int] = None,
    ledger: Optional[Ledger] = None,
    progress_callback: ProgressCallback | None = None,
) -> RunReport:
    """Run the file-backed corpus of a suite.

    Args:
        suite: Suite file path, or a SuiteConfig object
        focus: Optional single fixture (corpus-relative path) to run
        concurrency: Override of the suite's concurrency
        ledger: Ledger to write to (default: failing.txt/passing.txt in the suite's ledger_dir)
        progress_callback: Optional callback for progress updates

    Returns:
        RunReport with one result per fixture

    Raises:
        ConfigError: If the suite definition is invalid
        RunError: If the corpus, the focused fixture or a parser cannot be set up
    """
    config = _resolve(suite, focus)
    cases = build_fixture_table(
        config.corpus_dir, config.allowlist, focus=config.focus, pattern=config.pattern
    )
    if not cases:
        raise RunError(f"No fixtures matching '{config.pattern}' in {config.corpus_dir}")

    logger.info(f"Running suite '{config.name}' on {len(cases)} fixtures")

    runner = FixtureRunner(
        build_comparator(config),
        ledger or Ledger.in_directory(config.ledger_dir),
        concurrency=concurrency or config.concurrency,
        progress_callback=progress_callback,
    )
    return runner.run_cases(config.corpus_dir, cases)


def run_snippets(
    suite: Union[str, Path, SuiteConfig],
    groups: tuple[str, ...] = (),
    progress_callback: ProgressCallback | None = None,
) -> SnippetReport:
    """Run the curated inline snippets of the given groups (default: all).

    Snippets are not allowlisted and do not touch the ledger.
    """
    config = _resolve(suite, None)
    comparator = build_comparator(config)
    engines = (comparator.reference.engine, comparator.candidate.engine)

    fixtures = []
    skipped = []
    for group, snippet in iter_snippets(groups):
        if snippet.skipped_on(*engines):
            skipped.append(snippet.source)
            continue
        fixtures.append(snippet.as_fixture())

    runner = FixtureRunner(
        comparator,
        Ledger.in_memory(),
        concurrency=config.concurrency,
        progress_callback=progress_callback,
    )
    report = runner.run(fixtures)
    # Inline fixtures share one path; report them by source instead
    for fixture, result in zip(fixtures, report.results):
        result.path = f"{result.path}: {fixture.source!r}"
    return SnippetReport(report=report, skipped=skipped)
