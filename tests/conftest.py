"""Shared fixtures for parsediff tests."""

import pytest
from canned import CANDIDATE_TABLE, REFERENCE_TABLE, CannedParser

from parsediff.comparison import EquivalenceComparator
from parsediff.core.errors import ParseError
from parsediff.execution import FixtureRunner, Ledger

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def reference():
    return CannedParser({"table": REFERENCE_TABLE}, name="ripper")


@pytest.fixture
def candidate():
    table = dict(CANDIDATE_TABLE)
    table["crash"] = ParseError("candidate crashed")
    return CannedParser({"table": table}, name="prism")


@pytest.fixture
def comparator(reference, candidate):
    return EquivalenceComparator(reference, candidate)


@pytest.fixture
def memory_ledger():
    return Ledger.in_memory()


@pytest.fixture
def runner(comparator, memory_ledger):
    return FixtureRunner(comparator, memory_ledger, concurrency=4)


@pytest.fixture
def corpus(tmp_path):
    """A small fixture corpus on disk.

    - arrays.txt: matches
    - calls/command.txt: matches after normalization
    - calls/wrong_column.txt: mismatches
    - unknown.txt: rejected by the reference parser
    """
    corpus_dir = tmp_path / "fixtures"
    (corpus_dir / "calls").mkdir(parents=True)
    (corpus_dir / "arrays.txt").write_text("1 + 2", encoding="utf-8")
    (corpus_dir / "calls" / "command.txt").write_text("foo 1", encoding="utf-8")
    (corpus_dir / "calls" / "wrong_column.txt").write_text("bar 1", encoding="utf-8")
    (corpus_dir / "unknown.txt").write_text("???", encoding="utf-8")
    (corpus_dir / "README.md").write_text("not a fixture", encoding="utf-8")
    return corpus_dir
