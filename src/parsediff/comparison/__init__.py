"""Tree normalization and equivalence comparison."""

from .comparator import Divergence, EquivalenceComparator, find_divergence, trees_equal
from .normalizer import ARGS_ADD_BLOCK, Normalizer, normalize

__all__ = [
    "ARGS_ADD_BLOCK",
    "Divergence",
    "EquivalenceComparator",
    "Normalizer",
    "find_divergence",
    "normalize",
    "trees_equal",
]
