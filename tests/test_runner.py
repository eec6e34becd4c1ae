"""Tests for the fixture runner.

Tests cover:
- Outcome x allowlist classification
- Ledger entries per verdict
- Parallel evaluation (result order, progress callbacks)
- Per-fixture isolation
- Allowlist policy helpers (check_result, check_fixture)
"""

import threading

import pytest
from canned import CannedParser

from parsediff.comparison import EquivalenceComparator
from parsediff.core.errors import CandidateParseFailure, StructuralMismatch
from parsediff.core.models import Fixture, Outcome, Verdict
from parsediff.execution import FixtureRunner, Ledger, build_fixture_table, classify
from parsediff.testing import check_fixture, check_result, fixture_params

# ============================================================================
# Classification
# ============================================================================


@pytest.mark.parametrize(
    "outcome,allowed,verdict",
    [
        (Outcome.MATCH, False, Verdict.PASS),
        (Outcome.MATCH, True, Verdict.PROMOTE),
        (Outcome.MISMATCH, False, Verdict.REGRESSION),
        (Outcome.MISMATCH, True, Verdict.KNOWN_GAP),
        (Outcome.CANDIDATE_PARSE_ERROR, False, Verdict.REGRESSION),
        (Outcome.CANDIDATE_PARSE_ERROR, True, Verdict.KNOWN_GAP),
        (Outcome.REFERENCE_PARSE_ERROR, False, Verdict.INCONCLUSIVE),
        (Outcome.REFERENCE_PARSE_ERROR, True, Verdict.INCONCLUSIVE),
    ],
)
def test_classify(outcome, allowed, verdict):
    assert classify(outcome, allowed) is verdict


def test_failing_verdicts():
    assert {v for v in Verdict if v.is_failure} == {Verdict.REGRESSION, Verdict.INCONCLUSIVE}


# ============================================================================
# Single fixture evaluation
# ============================================================================


class TestEvaluate:
    def test_pass_writes_nothing(self, runner, memory_ledger):
        result = runner.evaluate(Fixture(source="1 + 2", path="arrays.txt"))
        assert result.verdict is Verdict.PASS
        assert memory_ledger.failing.lines == []
        assert memory_ledger.passing.lines == []

    def test_regression_recorded_as_failing(self, runner, memory_ledger):
        result = runner.evaluate(Fixture(source="bar 1", path="calls/bar.txt"))
        assert result.verdict is Verdict.REGRESSION
        assert result.outcome is Outcome.MISMATCH
        assert memory_ledger.failing.lines == ["calls/bar.txt"]

    def test_known_gap_recorded_as_failing(self, runner, memory_ledger):
        fixture = Fixture(source="bar 1", path="calls/bar.txt", allowed_failure=True)
        assert runner.evaluate(fixture).verdict is Verdict.KNOWN_GAP
        assert memory_ledger.failing.lines == ["calls/bar.txt"]
        assert memory_ledger.passing.lines == []

    def test_promotion_recorded_as_passing(self, runner, memory_ledger):
        fixture = Fixture(source="foo 1", path="calls/foo.txt", allowed_failure=True)
        assert runner.evaluate(fixture).verdict is Verdict.PROMOTE
        assert memory_ledger.passing.lines == ["calls/foo.txt"]
        assert memory_ledger.failing.lines == []

    def test_reference_error_recorded_as_failing(self, runner, memory_ledger):
        result = runner.evaluate(Fixture(source="???", path="weird.txt", allowed_failure=True))
        assert result.verdict is Verdict.INCONCLUSIVE
        assert memory_ledger.failing.lines == ["weird.txt"]

    def test_allowlisting_never_makes_a_fixture_fail(self, runner):
        for source in ("1 + 2", "foo 1", "bar 1", "crash"):
            plain = runner.evaluate(Fixture(source=source, path="a.txt"))
            allowed = runner.evaluate(Fixture(source=source, path="a.txt", allowed_failure=True))
            if not plain.verdict.is_failure:
                assert not allowed.verdict.is_failure


# ============================================================================
# Runs
# ============================================================================


class TestRun:
    def test_results_keep_input_order(self, runner):
        fixtures = [
            Fixture(source=source, path=f"{i}.txt")
            for i, source in enumerate(["1 + 2", "bar 1", "foo 1", "???", "self"] * 4)
        ]
        report = runner.run(fixtures)
        assert [r.path for r in report.results] == [f.path for f in fixtures]

    def test_report_counts(self, runner):
        fixtures = [
            Fixture(source="1 + 2", path="a.txt"),
            Fixture(source="foo 1", path="b.txt", allowed_failure=True),
            Fixture(source="bar 1", path="c.txt", allowed_failure=True),
            Fixture(source="self", path="d.txt"),
        ]
        report = runner.run(fixtures)
        assert report.count(Verdict.PASS) == 1
        assert report.count(Verdict.PROMOTE) == 1
        assert report.count(Verdict.KNOWN_GAP) == 1
        assert report.count(Verdict.REGRESSION) == 1
        assert [r.path for r in report.failures] == ["d.txt"]
        assert not report.succeeded
        assert report.completed_at is not None

    def test_succeeds_with_only_known_gaps(self, runner):
        report = runner.run([Fixture(source="bar 1", path="c.txt", allowed_failure=True)])
        assert report.succeeded

    def test_run_resets_ledger(self, runner, memory_ledger):
        memory_ledger.record_failing("stale.txt")
        runner.run([Fixture(source="bar 1", path="c.txt")])
        assert memory_ledger.failing.lines == ["c.txt"]

    def test_run_without_reset_appends(self, runner, memory_ledger):
        memory_ledger.record_failing("earlier.txt")
        runner.run([Fixture(source="bar 1", path="c.txt")], reset_ledger=False)
        assert memory_ledger.failing.lines == ["earlier.txt", "c.txt"]

    def test_ledger_matches_verdicts(self, runner, memory_ledger):
        fixtures = [
            Fixture(source=source, path=f"{i}.txt", allowed_failure=i % 2 == 0)
            for i, source in enumerate(["1 + 2", "bar 1", "foo 1", "???", "self", "crash"])
        ]
        report = runner.run(fixtures)
        failing = sorted(r.path for r in report.results if r.verdict not in (Verdict.PASS, Verdict.PROMOTE))
        passing = sorted(r.path for r in report.with_verdict(Verdict.PROMOTE))
        assert sorted(memory_ledger.failing.lines) == failing
        assert sorted(memory_ledger.passing.lines) == passing

    def test_progress_callback(self, comparator, memory_ledger):
        calls = []
        runner = FixtureRunner(
            comparator,
            memory_ledger,
            concurrency=2,
            progress_callback=lambda *args: calls.append(args),
        )
        runner.run(
            [
                Fixture(source="1 + 2", path="a.txt"),
                Fixture(source="bar 1", path="b.txt"),
                Fixture(source="foo 1", path="c.txt"),
            ]
        )
        assert [c[0] for c in calls] == [1, 2, 3]
        assert all(c[1] == 3 for c in calls)
        assert calls[-1][2:] == (2, 1)

    def test_rejects_zero_concurrency(self, comparator, memory_ledger):
        with pytest.raises(ValueError):
            FixtureRunner(comparator, memory_ledger, concurrency=0)

    def test_parallel_evaluation(self, memory_ledger):
        """Fixtures run concurrently up to the configured limit."""
        barrier = threading.Barrier(3, timeout=5)

        class WaitingParser(CannedParser):
            def parse(self, source):
                barrier.wait()
                return super().parse(source)

        reference = WaitingParser({"table": {"1 + 2": "[:program]"}}, name="ripper")
        candidate = CannedParser({"table": {"1 + 2": "[:program]"}}, name="prism")
        runner = FixtureRunner(
            EquivalenceComparator(reference, candidate), memory_ledger, concurrency=3
        )
        report = runner.run([Fixture(source="1 + 2", path=f"{i}.txt") for i in range(3)])
        assert report.count(Verdict.PASS) == 3


class TestIsolation:
    def test_unreadable_fixture_does_not_abort_run(self, runner, corpus, memory_ledger):
        cases = build_fixture_table(corpus)
        (corpus / "arrays.txt").unlink()
        report = runner.run_cases(corpus, cases)

        assert len(report.results) == len(cases)
        broken = report.results[0]
        assert broken.path == "arrays.txt"
        assert broken.verdict is Verdict.INCONCLUSIVE
        assert "FileNotFoundError" in broken.detail
        assert "arrays.txt" in memory_ledger.failing.lines

    def test_crashing_comparator_is_isolated(self, memory_ledger):
        class BrokenComparator:
            def compare(self, source):
                raise RuntimeError("boom")

        runner = FixtureRunner(BrokenComparator(), memory_ledger)
        report = runner.run([Fixture(source="x", path="a.txt"), Fixture(source="y", path="b.txt")])
        assert [r.verdict for r in report.results] == [Verdict.INCONCLUSIVE] * 2
        assert sorted(memory_ledger.failing.lines) == ["a.txt", "b.txt"]


# ============================================================================
# Corpus runs and the allowlist policy
# ============================================================================


class TestCorpusRun:
    def test_run_cases(self, runner, corpus, memory_ledger):
        cases = build_fixture_table(corpus, allowlist={"calls/wrong_column.txt"})
        report = runner.run_cases(corpus, cases)

        verdicts = {r.path: r.verdict for r in report.results}
        assert verdicts == {
            "arrays.txt": Verdict.PASS,
            "calls/command.txt": Verdict.PASS,
            "calls/wrong_column.txt": Verdict.KNOWN_GAP,
            "unknown.txt": Verdict.INCONCLUSIVE,
        }
        assert sorted(memory_ledger.failing.lines) == ["calls/wrong_column.txt", "unknown.txt"]

    def test_check_fixture_known_gap_passes(self, runner, corpus):
        cases = build_fixture_table(corpus, allowlist={"calls/wrong_column.txt"})
        case = next(c for c in cases if c.path == "calls/wrong_column.txt")
        assert check_fixture(runner, corpus, case).verdict is Verdict.KNOWN_GAP

    def test_check_fixture_promotion_passes(self, runner, corpus, memory_ledger):
        params = fixture_params(build_fixture_table(corpus, allowlist={"arrays.txt"}))
        (case,) = [p.values[0] for p in params if p.id == "ripper_arrays"]
        assert check_fixture(runner, corpus, case).verdict is Verdict.PROMOTE
        assert memory_ledger.passing.lines == ["arrays.txt"]

    def test_check_fixture_regression_raises(self, runner, corpus):
        case = next(c for c in build_fixture_table(corpus) if c.path == "calls/wrong_column.txt")
        with pytest.raises(StructuralMismatch) as exc_info:
            check_fixture(runner, corpus, case)
        assert exc_info.value.path == "calls/wrong_column.txt"
        assert exc_info.value.source == "bar 1"

    def test_check_result_candidate_error(self, runner):
        result = runner.evaluate(Fixture(source="crash", path="crash.txt"))
        with pytest.raises(CandidateParseFailure):
            check_result(result)

    def test_promotion_does_not_fail(self, runner):
        result = runner.evaluate(Fixture(source="1 + 2", path="a.txt", allowed_failure=True))
        check_result(result)
        assert result.verdict is Verdict.PROMOTE


def test_file_ledger_run(comparator, corpus, tmp_path):
    ledger = Ledger.in_directory(tmp_path)
    (tmp_path / "failing.txt").write_text("from a previous run\n")
    runner = FixtureRunner(comparator, ledger, concurrency=2)
    runner.run_cases(corpus, build_fixture_table(corpus, allowlist={"arrays.txt"}))

    failing = (tmp_path / "failing.txt").read_text().splitlines()
    passing = (tmp_path / "passing.txt").read_text().splitlines()
    assert sorted(failing) == ["calls/wrong_column.txt", "unknown.txt"]
    assert passing == ["arrays.txt"]


def test_repeated_runs_give_identical_ledgers(comparator, corpus, tmp_path):
    cases = build_fixture_table(corpus, allowlist={"arrays.txt", "calls/wrong_column.txt"})
    ledgers = []
    for _ in range(2):
        runner = FixtureRunner(comparator, Ledger.in_directory(tmp_path), concurrency=4)
        runner.run_cases(corpus, cases)
        ledgers.append(
            (
                sorted((tmp_path / "failing.txt").read_text().splitlines()),
                sorted((tmp_path / "passing.txt").read_text().splitlines()),
            )
        )
    assert ledgers[0] == ledgers[1]
