"""Equivalence comparison between a reference and a candidate parser.

The comparator is a pure decision function: it runs both parsers on the same
source text, normalizes their trees and reports an Outcome. It never writes
to the ledger and never decides whether a failure is acceptable; that is the
fixture runner's job.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from ..core.logging import get_logger
from ..core.models import ComparisonResult, Outcome
from ..core.tree import Child, ParseTree, render
from ..parsers.abc import Parser
from .normalizer import normalize

logger = get_logger(__name__)

# Longest rendering of a diverging subtree included in a mismatch detail
MAX_EXCERPT = 400


@dataclass(frozen=True)
class Divergence:
    """The first position at which two trees differ.

    Attributes:
        path: Slash-separated location, e.g. "program/0/stmts_add/1"
        reason: Short description of the difference
        expected: Reference subtree at that position
        actual: Candidate subtree at that position
    """

    path: str
    reason: str
    expected: Child
    actual: Child

    def describe(self, limit: int = MAX_EXCERPT) -> str:
        return (
            f"First difference at {self.path}: {self.reason}\n"
            f"  reference: {_excerpt(self.expected, limit)}\n"
            f"  candidate: {_excerpt(self.actual, limit)}"
        )


def _excerpt(value: Child, limit: int) -> str:
    text = render(value)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def _kind(value: Child) -> str:
    if isinstance(value, ParseTree):
        return "node"
    if isinstance(value, tuple):
        return "list"
    return type(value).__name__


def find_divergence(expected: Child, actual: Child, path: str = "") -> Optional[Divergence]:
    """Locate the first structural difference between two tree values.

    Node tags must match, child counts must match and children are compared
    positionally. Scalars are equal only if they have the same kind and value
    (a symbol never equals a string, ``true`` never equals ``1``).

    Returns:
        None when the values are structurally equal, otherwise a Divergence
    """
    # Depth-first, left to right; children are pushed in reverse.
    stack: list[tuple[Child, Child, str]] = [(expected, actual, path)]
    while stack:
        left, right, where = stack.pop()
        here = where or "."
        if _kind(left) != _kind(right):
            return Divergence(here, f"{_kind(left)} vs {_kind(right)}", left, right)

        if isinstance(left, ParseTree):
            if left.tag != right.tag:
                return Divergence(here, f"tag {left.tag} vs {right.tag}", left, right)
            prefix = f"{where}/{left.tag}" if where else left.tag
            left_children, right_children = left.children, right.children
        elif isinstance(left, tuple):
            prefix = where
            left_children, right_children = left, right
        else:
            if left != right:
                return Divergence(here, "value differs", left, right)
            continue

        if len(left_children) != len(right_children):
            return Divergence(
                prefix or ".",
                f"{len(left_children)} children vs {len(right_children)}",
                left,
                right,
            )
        for index in reversed(range(len(left_children))):
            stack.append(
                (
                    left_children[index],
                    right_children[index],
                    f"{prefix}/{index}" if prefix else str(index),
                )
            )
    return None


def trees_equal(expected: Child, actual: Child) -> bool:
    """Deep structural equality (see find_divergence)."""
    return find_divergence(expected, actual) is None


class EquivalenceComparator:
    """Compares a candidate parser against a reference parser.

    Args:
        reference: Trusted parser whose output defines correctness
        candidate: Parser under test
        normalizer: Tree canonicalization applied to both sides before comparing

    Example:
        >>> comparator = EquivalenceComparator(ripper, prism)
        >>> comparator.compare("1 + 2").outcome
        <Outcome.MATCH: 'match'>
    """

    def __init__(
        self,
        reference: Parser,
        candidate: Parser,
        normalizer: Callable[[Child], Child] = normalize,
    ):
        self.reference = reference
        self.candidate = candidate
        self.normalizer = normalizer

    def compare(self, source: str) -> ComparisonResult:
        """Run both parsers on ``source`` and classify the result."""
        expected, error = _invoke(self.reference, source)
        if expected is None:
            return ComparisonResult(
                outcome=Outcome.REFERENCE_PARSE_ERROR,
                detail=f"Could not parse with {self.reference.name}: {error}",
            )

        actual, error = _invoke(self.candidate, source)
        if actual is None:
            return ComparisonResult(
                outcome=Outcome.CANDIDATE_PARSE_ERROR,
                detail=f"Could not parse with {self.candidate.name}: {error}",
            )

        divergence = find_divergence(self.normalizer(expected), self.normalizer(actual))
        if divergence is None:
            return ComparisonResult(outcome=Outcome.MATCH)
        return ComparisonResult(outcome=Outcome.MISMATCH, detail=divergence.describe())


def _invoke(parser: Parser, source: str) -> tuple[Optional[ParseTree], str]:
    """Run one parser, turning a nil result or any exception into a failure."""
    try:
        tree = parser.parse(source)
    except Exception as e:
        logger.debug(f"Parser {parser.name} raised: {e}")
        return None, f"{type(e).__name__}: {e}"
    if tree is None:
        return None, "parser returned no tree"
    return tree, ""
