"""parsediff - structural equivalence testing for parser implementations.

parsediff checks that a candidate parser produces the same parse trees as a
trusted reference parser over a large fixture corpus. A static allowlist
records fixtures the candidate is known not to handle yet, so new breakage
(regressions) is told apart from expected gaps, and fixtures that start
matching are flagged for promotion out of the allowlist.

Basic Usage:
    >>> from parsediff import run_suite
    >>>
    >>> report = run_suite("parsediff.yaml")
    >>> report.succeeded
    True

Public API:
    Execution:
        - run_suite: Run the file-backed corpus of a suite
        - run_snippets: Run the curated inline snippets
        - FixtureRunner: Evaluate fixtures against the allowlist
        - Ledger: failing.txt / passing.txt audit trail

    Comparison:
        - EquivalenceComparator: Compare reference and candidate parsers
        - normalize: Canonicalize a parse tree

    Models:
        - ParseTree, Symbol: Parse tree values
        - Outcome, Verdict: Comparison and classification results
        - Fixture, FixtureCase, FixtureResult, RunReport

    Parsers:
        - Parser: Base adapter class
        - create_parser, register_tool

    Errors:
        - ConfigError, RunError, ParseError
        - ReferenceParseFailure, CandidateParseFailure, StructuralMismatch
"""

from .comparison import EquivalenceComparator, find_divergence, normalize
from .core.errors import (
    CandidateParseFailure,
    ConfigError,
    EquivalenceFailure,
    ParseDiffError,
    ParseError,
    ReferenceParseFailure,
    RunError,
    StructuralMismatch,
)
from .core.loaders import load_suite
from .core.models import (
    Fixture,
    FixtureCase,
    FixtureResult,
    Outcome,
    ParserConfig,
    RunReport,
    SuiteConfig,
    Verdict,
)
from .core.sexp import read_sexp, read_tree
from .core.tree import ParseTree, Symbol, from_nested
from .execution import (
    FixtureRunner,
    Ledger,
    build_fixture_table,
    classify,
    run_snippets,
    run_suite,
)
from .parsers import Parser, create_parser, register_tool
from .version import __version__

__all__ = [
    # Version
    "__version__",
    # Execution
    "run_suite",
    "run_snippets",
    "FixtureRunner",
    "Ledger",
    "build_fixture_table",
    "classify",
    "load_suite",
    # Comparison
    "EquivalenceComparator",
    "find_divergence",
    "normalize",
    # Models
    "ParseTree",
    "Symbol",
    "from_nested",
    "read_sexp",
    "read_tree",
    "Outcome",
    "Verdict",
    "Fixture",
    "FixtureCase",
    "FixtureResult",
    "RunReport",
    "ParserConfig",
    "SuiteConfig",
    # Parsers
    "Parser",
    "create_parser",
    "register_tool",
    # Errors
    "ParseDiffError",
    "ConfigError",
    "RunError",
    "ParseError",
    "EquivalenceFailure",
    "ReferenceParseFailure",
    "CandidateParseFailure",
    "StructuralMismatch",
]
