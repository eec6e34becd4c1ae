"""Exception hierarchy for parsediff.

This module defines two families of errors:

1. Operational errors (ParseDiffError and subclasses) raised when the suite
   cannot be set up or executed: bad configuration, missing corpus, parser
   adapters that cannot be created.

2. Equivalence failures (EquivalenceFailure and subclasses) raised by the
   assertion helpers once a fixture's Outcome has been decided. They subclass
   AssertionError so pytest reports them as test failures, not errors.

Per-fixture parse problems are never raised through the runner; they are
captured as an Outcome on the fixture's result.
"""


class ParseDiffError(Exception):
    """Base exception for all parsediff operational errors.

    Example:
        try:
            run_suite(config)
        except ParseDiffError as e:
            print(f"parsediff error: {e}")
    """

    pass


class ConfigError(ParseDiffError):
    """Configuration-related errors.

    Raised when:
    - The suite file is missing or cannot be read
    - YAML syntax is invalid
    - Required fields are missing or invalid
    - Environment variables referenced as ${VAR} are not set
    - A parser tool name is not registered

    Examples:
        - "Suite file not found: parsediff.yaml"
        - "Unknown parser tool 'ripper'. Available tools: command, python"
        - "Environment variable 'RUBY' not set"
    """

    pass


class RunError(ParseDiffError):
    """Run execution errors.

    Raised when:
    - The corpus directory does not exist
    - The focused fixture is not part of the corpus
    - A parser adapter fails to initialize

    Note: Per-fixture failures are captured in FixtureResult, not raised as RunError.
    """

    pass


class ParseError(ParseDiffError):
    """A parser rejected its input or crashed while parsing it.

    Raised by parser adapters. The comparator converts it into a
    reference_parse_error or candidate_parse_error outcome.
    """

    pass


# ============================================================================
# Equivalence failures
# ============================================================================


class EquivalenceFailure(AssertionError):
    """Base class for a fixture that did not compare equal.

    Attributes:
        path: Fixture path or "inline source code"
        source: The source text that was compared
        detail: Human-readable detail (parse error or divergence excerpt)
    """

    def __init__(self, message: str, path: str, source: str, detail: str | None = None):
        self.path = path
        self.source = source
        self.detail = detail
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class ReferenceParseFailure(EquivalenceFailure):
    """The reference parser rejected the input; the comparison is inconclusive."""

    pass


class CandidateParseFailure(EquivalenceFailure):
    """The candidate parser rejected input the reference parser accepted."""

    pass


class StructuralMismatch(EquivalenceFailure):
    """Both parsers produced trees but they differ after normalization."""

    pass
