"""Fixture runner for parsediff.

Evaluates fixtures through the comparator, classifies each outcome against
the allowlist and records the ledger entries.

Classification table:

    outcome                              allowed_failure=False   allowed_failure=True
    match                                pass                    promote  (passing ledger)
    mismatch / candidate_parse_error     regression (failing)    known_gap (failing)
    reference_parse_error                inconclusive (failing)  inconclusive (failing)

Regressions and inconclusive fixtures fail the run; known gaps and
promotions do not.

Key features:
- Parallel fixture evaluation with configurable concurrency
- Per-fixture isolation (one broken fixture never aborts the run)
- Progress reporting callbacks

Example:
    >>> runner = FixtureRunner(EquivalenceComparator(ripper, prism), Ledger.in_directory(Path(".")))
    >>> report = runner.run_cases(Path("fixtures"), build_fixture_table(Path("fixtures"), ALLOWLIST))
    >>> report.succeeded
    True
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from ..comparison.comparator import EquivalenceComparator
from ..core.logging import get_logger
from ..core.models import (
    Fixture,
    FixtureCase,
    FixtureResult,
    Outcome,
    RunReport,
    Verdict,
)
from .corpus import load_fixture
from .ledger import Ledger

logger = get_logger(__name__)

# Type alias for progress callback
ProgressCallback = Callable[[int, int, int, int], None]
# Parameters: (completed, total, ok, failed)


def classify(outcome: Outcome, allowed_failure: bool) -> Verdict:
    """Classify a comparison outcome against allowlist membership."""
    if outcome is Outcome.REFERENCE_PARSE_ERROR:
        return Verdict.INCONCLUSIVE
    if outcome is Outcome.MATCH:
        return Verdict.PROMOTE if allowed_failure else Verdict.PASS
    return Verdict.KNOWN_GAP if allowed_failure else Verdict.REGRESSION


class FixtureRunner:
    """Runs fixtures through a comparator and records them in a ledger.

    Args:
        comparator: Reference/candidate comparator
        ledger: Ledger receiving failing and unexpectedly passing paths
        concurrency: Maximum number of fixtures evaluated at once
        progress_callback: Optional callback for progress updates
    """

    def __init__(
        self,
        comparator: EquivalenceComparator,
        ledger: Ledger,
        concurrency: int = 8,
        progress_callback: ProgressCallback | None = None,
    ):
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1 (got {concurrency})")
        self.comparator = comparator
        self.ledger = ledger
        self.concurrency = concurrency
        self.progress_callback = progress_callback

    def evaluate(self, fixture: Fixture) -> FixtureResult:
        """Compare one fixture, classify it and record it in the ledger."""
        start_time = time.time()
        comparison = self.comparator.compare(fixture.source)
        verdict = classify(comparison.outcome, fixture.allowed_failure)
        duration_ms = (time.time() - start_time) * 1000

        self._record(fixture.path, verdict)

        if verdict.is_failure:
            logger.warning(f"{verdict.value}: {fixture.path} ({comparison.outcome.value})")
        else:
            logger.debug(f"{verdict.value}: {fixture.path} ({comparison.outcome.value})")

        return FixtureResult(
            path=fixture.path,
            outcome=comparison.outcome,
            verdict=verdict,
            allowed_failure=fixture.allowed_failure,
            detail=comparison.detail,
            duration_ms=duration_ms,
        )

    def _record(self, path: str, verdict: Verdict) -> None:
        if verdict is Verdict.PROMOTE:
            self.ledger.record_passing(path)
        elif verdict is not Verdict.PASS:
            self.ledger.record_failing(path)

    def run(self, fixtures: Sequence[Fixture], reset_ledger: bool = True) -> RunReport:
        """Evaluate already-loaded fixtures.

        Args:
            fixtures: Fixtures to evaluate
            reset_ledger: Clear the ledger before the first fixture (default: True)

        Returns:
            RunReport with one result per fixture, in input order
        """
        loaders = [(f.path, f.allowed_failure, lambda f=f: f) for f in fixtures]
        return self._run(loaders, reset_ledger)

    def run_cases(
        self,
        corpus_dir: Path,
        cases: Sequence[FixtureCase],
        reset_ledger: bool = True,
    ) -> RunReport:
        """Read and evaluate the fixtures of a fixture table.

        Sources are read inside the worker, so an unreadable file only
        affects its own result.
        """
        loaders = [
            (c.path, c.allowed_failure, lambda c=c: load_fixture(corpus_dir, c))
            for c in cases
        ]
        return self._run(loaders, reset_ledger)

    def _run(self, loaders, reset_ledger: bool) -> RunReport:
        if reset_ledger:
            self.ledger.reset()

        started_at = datetime.now(timezone.utc)
        total = len(loaders)
        results: list[FixtureResult | None] = [None] * total
        ok = 0
        failed = 0

        logger.info(f"Evaluating {total} fixtures with concurrency={self.concurrency}")

        with ThreadPoolExecutor(max_workers=self.concurrency) as executor:
            future_to_index = {
                executor.submit(self._evaluate_isolated, path, allowed, load): i
                for i, (path, allowed, load) in enumerate(loaders)
            }

            for completed, future in enumerate(as_completed(future_to_index), 1):
                index = future_to_index[future]
                # _evaluate_isolated never raises
                result = future.result()
                results[index] = result

                if result.verdict.is_failure:
                    failed += 1
                else:
                    ok += 1

                if self.progress_callback:
                    self.progress_callback(completed, total, ok, failed)

        report = RunReport(
            results=results,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )
        logger.info(
            f"Run complete: {report.count(Verdict.PASS)} passed, "
            f"{report.count(Verdict.KNOWN_GAP)} known gaps, "
            f"{report.count(Verdict.PROMOTE)} to promote, "
            f"{len(report.failures)} failures"
        )
        return report

    def _evaluate_isolated(
        self, path: str, allowed_failure: bool, load: Callable[[], Fixture]
    ) -> FixtureResult:
        try:
            return self.evaluate(load())
        except Exception as e:
            logger.error(f"Fixture {path} could not be evaluated: {e}")
            self.ledger.record_failing(path)
            return FixtureResult(
                path=path,
                outcome=Outcome.REFERENCE_PARSE_ERROR,
                verdict=Verdict.INCONCLUSIVE,
                allowed_failure=allowed_failure,
                detail=f"{type(e).__name__}: {e}",
            )
