"""Tests for equivalence comparison.

Tests cover:
- find_divergence (tags, child counts, scalar kinds, paths)
- EquivalenceComparator outcomes (match, mismatch, parse errors)
- Normalization applied before comparison
- Assertion helpers in parsediff.testing
"""

import pytest
from canned import BLOCK_CALL, ONE_PLUS_TWO, CannedParser, ExplodingParser

from parsediff.comparison import EquivalenceComparator, find_divergence
from parsediff.comparison.comparator import Divergence, trees_equal
from parsediff.core.errors import (
    CandidateParseFailure,
    ReferenceParseFailure,
    StructuralMismatch,
)
from parsediff.core.models import Outcome
from parsediff.core.sexp import read_sexp
from parsediff.core.tree import ParseTree, Symbol
from parsediff.testing import assert_equivalent, failure_for

# ============================================================================
# Divergence detection
# ============================================================================


class TestFindDivergence:
    def test_equal_trees(self):
        assert find_divergence(read_sexp(ONE_PLUS_TWO), read_sexp(ONE_PLUS_TWO)) is None

    def test_reflexive(self):
        for text in (ONE_PLUS_TWO, BLOCK_CALL):
            tree = read_sexp(text)
            assert trees_equal(tree, tree)

    def test_tag_difference(self):
        found = find_divergence(ParseTree("a"), ParseTree("b"))
        assert found.reason == "tag a vs b"

    def test_child_count_difference(self):
        found = find_divergence(ParseTree("a", (1, 2)), ParseTree("a", (1,)))
        assert found.path == "a"
        assert "2 children vs 1" in found.reason

    def test_path_points_at_first_difference(self):
        expected = read_sexp(ONE_PLUS_TWO)
        actual = read_sexp(ONE_PLUS_TWO.replace("[1, 4]", "[1, 5]"))
        found = find_divergence(expected, actual)
        assert found.path == "program/0/stmts_add/1/binary/2/@int/1/1"
        assert found.expected == 4
        assert found.actual == 5

    def test_symbol_differs_from_string(self):
        found = find_divergence(
            ParseTree("x", (Symbol("self"),)), ParseTree("x", ("self",))
        )
        assert found is not None
        assert found.reason == "Symbol vs str"

    def test_bool_differs_from_int(self):
        assert not trees_equal(ParseTree("x", (True,)), ParseTree("x", (1,)))
        assert not trees_equal(ParseTree("x", (False,)), ParseTree("x", (None,)))

    def test_node_differs_from_list(self):
        found = find_divergence(ParseTree("x", (ParseTree("y"),)), ParseTree("x", ((),)))
        assert found.reason == "node vs list"

    def test_describe_truncates(self):
        long_value = "x" * 1000
        divergence = Divergence("p", "value differs", long_value, "y")
        text = divergence.describe(limit=50)
        assert "First difference at p: value differs" in text
        assert "..." in text
        assert len(text.splitlines()[1]) < 80


# ============================================================================
# Comparator
# ============================================================================


class TestEquivalenceComparator:
    def test_match(self, comparator):
        result = comparator.compare("1 + 2")
        assert result.outcome is Outcome.MATCH
        assert result.matched
        assert result.detail is None

    def test_match_after_normalization(self, comparator):
        assert comparator.compare("foo 1").outcome is Outcome.MATCH

    def test_mismatch(self, comparator):
        result = comparator.compare("bar 1")
        assert result.outcome is Outcome.MISMATCH
        assert "First difference at" in result.detail

    def test_symbol_vs_string_mismatch(self, comparator):
        assert comparator.compare("self").outcome is Outcome.MISMATCH

    def test_reference_rejects(self, comparator, candidate):
        result = comparator.compare("???")
        assert result.outcome is Outcome.REFERENCE_PARSE_ERROR
        assert "ripper" in result.detail
        # The candidate is never consulted when the reference fails
        assert "???" not in candidate.calls

    def test_candidate_rejects(self, reference):
        candidate = CannedParser({"table": {}}, name="prism")
        result = EquivalenceComparator(reference, candidate).compare("1 + 2")
        assert result.outcome is Outcome.CANDIDATE_PARSE_ERROR
        assert "prism" in result.detail

    def test_candidate_crash(self, comparator):
        result = comparator.compare("crash")
        assert result.outcome is Outcome.CANDIDATE_PARSE_ERROR
        assert "candidate crashed" in result.detail

    def test_reference_crash(self, candidate):
        comparator = EquivalenceComparator(ExplodingParser({}, name="ripper"), candidate)
        result = comparator.compare("1 + 2")
        assert result.outcome is Outcome.REFERENCE_PARSE_ERROR
        assert "segmentation fault" in result.detail

    def test_identical_parsers_always_match(self, reference):
        comparator = EquivalenceComparator(reference, reference)
        for source in ("1 + 2", "foo 1", "foo { |a| a }", "self"):
            assert comparator.compare(source).outcome is Outcome.MATCH

    def test_custom_normalizer(self, reference, candidate):
        comparator = EquivalenceComparator(reference, candidate, normalizer=lambda tree: tree)
        assert comparator.compare("foo 1").outcome is Outcome.MISMATCH

    def test_deeply_nested_trees(self):
        depth = 3000
        nested = "[:program, " + "[:paren, " * depth + '[:@int, "{}", [1, 0]]' + "]" * (depth + 1)
        table = {"deep": nested.format("1"), "off by one": nested.format("2")}
        reference = CannedParser({"table": table}, name="ripper")
        candidate = CannedParser({"table": {"deep": table["off by one"]}}, name="prism")

        assert EquivalenceComparator(reference, reference).compare("deep").outcome is Outcome.MATCH

        result = EquivalenceComparator(reference, candidate).compare("deep")
        assert result.outcome is Outcome.MISMATCH
        path = "program/0" + "/paren/0" * depth + "/@int/0"
        assert f"First difference at {path}: value differs" in result.detail


# ============================================================================
# Assertion helpers
# ============================================================================


class TestAssertEquivalent:
    def test_passes_on_match(self, comparator):
        assert_equivalent(comparator, "foo { |a| a }")

    def test_mismatch_raises(self, comparator):
        with pytest.raises(StructuralMismatch) as exc_info:
            assert_equivalent(comparator, "bar 1")
        message = str(exc_info.value)
        assert message.startswith(
            "Expected ripper and prism to give equivalent output for inline source code!"
        )
        assert exc_info.value.source == "bar 1"

    def test_reference_failure_raises(self, comparator):
        with pytest.raises(ReferenceParseFailure, match="Could not parse inline source code with ripper!"):
            assert_equivalent(comparator, "???")

    def test_candidate_failure_raises(self, comparator):
        with pytest.raises(CandidateParseFailure, match="with prism!"):
            assert_equivalent(comparator, "crash", path="calls/crash.txt")

    def test_failures_are_assertion_errors(self, comparator):
        with pytest.raises(AssertionError):
            assert_equivalent(comparator, "self")

    def test_failure_for_match_is_none(self):
        assert failure_for(Outcome.MATCH, "a.txt", "1") is None
