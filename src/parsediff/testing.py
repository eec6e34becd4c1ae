"""pytest integration for parsediff.

Turns the fixture table and the curated snippets into parametrized test
units, and raises the equivalence failure matching an outcome.

Example test module:

    from pathlib import Path

    import pytest
    from parsediff.core.loaders import focus_from_env
    from parsediff.execution import build_fixture_table
    from parsediff.testing import assert_equivalent, check_fixture, fixture_params, snippet_params

    CORPUS = Path(__file__).parent / "fixtures"
    CASES = build_fixture_table(CORPUS, ALLOWLIST, focus=focus_from_env())
    ENGINE = "truffleruby"

    @pytest.mark.parametrize("snippet", snippet_params(engines=(ENGINE,)))
    def test_snippet(comparator, snippet):
        assert_equivalent(comparator, snippet.source)

    @pytest.mark.parametrize("case", fixture_params(CASES))
    def test_fixture(runner, case):
        check_fixture(runner, CORPUS, case)
"""

from pathlib import Path
from typing import Iterable

import pytest

from .comparison.comparator import EquivalenceComparator
from .core.errors import (
    CandidateParseFailure,
    EquivalenceFailure,
    ReferenceParseFailure,
    StructuralMismatch,
)
from .core.models import INLINE_PATH, FixtureCase, FixtureResult, Outcome
from .execution.corpus import load_fixture
from .execution.runner import FixtureRunner
from .snippets import iter_snippets


def failure_for(
    outcome: Outcome,
    path: str,
    source: str,
    detail: str | None,
    reference_name: str = "the reference parser",
    candidate_name: str = "the candidate parser",
) -> EquivalenceFailure | None:
    """Build the failure raised for a non-matching outcome (None for a match)."""
    if outcome is Outcome.MATCH:
        return None
    if outcome is Outcome.REFERENCE_PARSE_ERROR:
        return ReferenceParseFailure(
            f"Could not parse {path} with {reference_name}!", path, source, detail
        )
    if outcome is Outcome.CANDIDATE_PARSE_ERROR:
        return CandidateParseFailure(
            f"Could not parse {path} with {candidate_name}!", path, source, detail
        )
    return StructuralMismatch(
        f"Expected {reference_name} and {candidate_name} to give equivalent output for {path}!",
        path,
        source,
        detail,
    )


def assert_equivalent(
    comparator: EquivalenceComparator, source: str, path: str = INLINE_PATH
) -> None:
    """Assert that both parsers agree on ``source``, with no allowlist.

    Raises:
        ReferenceParseFailure, CandidateParseFailure or StructuralMismatch
    """
    result = comparator.compare(source)
    failure = failure_for(
        result.outcome,
        path,
        source,
        result.detail,
        comparator.reference.name,
        comparator.candidate.name,
    )
    if failure is not None:
        raise failure


def check_result(result: FixtureResult, source: str = "") -> None:
    """Raise if a runner result fails the run; known gaps and promotions pass."""
    if result.verdict.is_failure:
        failure = failure_for(result.outcome, result.path, source, result.detail)
        if failure is not None:
            raise failure


def check_fixture(runner: FixtureRunner, corpus_dir: Path, case: FixtureCase) -> FixtureResult:
    """Evaluate one fixture table row through ``runner`` and apply the allowlist policy."""
    fixture = load_fixture(corpus_dir, case)
    result = runner.evaluate(fixture)
    check_result(result, fixture.source)
    return result


def fixture_params(cases: Iterable[FixtureCase]) -> list:
    """One pytest param per fixture table row, identified by the row name."""
    return [pytest.param(case, id=case.name) for case in cases]


def snippet_params(groups: tuple[str, ...] = (), engines: tuple[str, ...] = ()) -> list:
    """One pytest param per curated snippet, identified by group and source.

    Snippets known to misbehave on any of ``engines`` carry a skip mark, so
    they are reported as skipped rather than as passes or failures.
    """
    params = []
    for group, snippet in iter_snippets(groups):
        marks = ()
        if snippet.skipped_on(*engines):
            skipped = ", ".join(sorted(snippet.skip_engines.intersection(engines)))
            marks = (pytest.mark.skip(reason=f"not supported on {skipped}"),)
        params.append(pytest.param(snippet, id=f"{group}:{snippet.source!r}", marks=marks))
    return params
