"""Data models for parsediff.

Configuration and result records are Pydantic models; parse trees themselves
live in ``parsediff.core.tree`` as frozen dataclasses.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

INLINE_PATH = "inline source code"

# ============================================================================
# Outcomes and verdicts
# ============================================================================


class Outcome(str, Enum):
    """Result of comparing one source text with both parsers."""

    MATCH = "match"
    MISMATCH = "mismatch"
    REFERENCE_PARSE_ERROR = "reference_parse_error"
    CANDIDATE_PARSE_ERROR = "candidate_parse_error"


class Verdict(str, Enum):
    """Classification of an Outcome against the allowlist."""

    PASS = "pass"
    PROMOTE = "promote"  # allowlisted, but matched
    REGRESSION = "regression"  # not allowlisted, did not match
    KNOWN_GAP = "known_gap"  # allowlisted, did not match
    INCONCLUSIVE = "inconclusive"  # reference parser rejected the fixture

    @property
    def is_failure(self) -> bool:
        """Whether this verdict fails the overall run."""
        return self in (Verdict.REGRESSION, Verdict.INCONCLUSIVE)


class ComparisonResult(BaseModel):
    """Outcome of comparing both parsers on one source text."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    detail: str | None = None  # parse error message or divergence excerpt

    @property
    def matched(self) -> bool:
        return self.outcome is Outcome.MATCH


# ============================================================================
# Fixtures
# ============================================================================


@dataclass(frozen=True)
class Fixture:
    """One unit of source text to compare.

    ``source`` may carry undecodable bytes as surrogate escapes.
    """

    source: str
    path: str = INLINE_PATH
    allowed_failure: bool = False


class FixtureCase(BaseModel):
    """A row of the fixture table: one independently reported test unit."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str  # corpus-relative POSIX path
    allowed_failure: bool = False

    @field_validator("path")
    @classmethod
    def validate_relative(cls, v: str) -> str:
        """Fixture identities are corpus-relative."""
        if not v or v.startswith("/") or ".." in v.split("/"):
            raise ValueError(f"Fixture path '{v}' must be relative to the corpus")
        return v


class FixtureResult(BaseModel):
    """Result for a single fixture within a run."""

    path: str
    outcome: Outcome
    verdict: Verdict
    allowed_failure: bool = False
    detail: str | None = None
    duration_ms: float = 0.0


class RunReport(BaseModel):
    """Aggregate result of running a set of fixtures."""

    results: list[FixtureResult] = Field(default_factory=list)
    started_at: datetime
    completed_at: datetime | None = None

    def count(self, verdict: Verdict) -> int:
        return sum(1 for r in self.results if r.verdict is verdict)

    def with_verdict(self, *verdicts: Verdict) -> list[FixtureResult]:
        return [r for r in self.results if r.verdict in verdicts]

    @property
    def failures(self) -> list[FixtureResult]:
        """Results that fail the run (regressions and inconclusive fixtures)."""
        return [r for r in self.results if r.verdict.is_failure]

    @property
    def succeeded(self) -> bool:
        return not self.failures

    @property
    def duration_seconds(self) -> float:
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()


# ============================================================================
# Configuration Models
# ============================================================================


class ParserConfig(BaseModel):
    """Parser adapter configuration (the reference or candidate entry of a suite file)."""

    name: str
    tool: str  # "command", "python", ...
    config: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate parser name format."""
        if not v:
            raise ValueError("Parser name cannot be empty")
        if not all(c.isalnum() or c in "-_." for c in v):
            raise ValueError(
                f"Parser name '{v}' must be alphanumeric with hyphens/underscores/dots only"
            )
        return v


class SuiteConfig(BaseModel):
    """Equivalence suite definition (loaded from a suite YAML file)."""

    name: str
    reference: ParserConfig
    candidate: ParserConfig
    corpus_dir: Path
    pattern: str = "**/*.txt"
    ledger_dir: Path = Path(".")
    concurrency: int = Field(default=8, ge=1)
    allowlist: frozenset[str] = Field(default_factory=frozenset)
    focus: Optional[str] = None

    @field_validator("allowlist", mode="before")
    @classmethod
    def normalize_allowlist(cls, v: Any) -> Any:
        """Accept any iterable of paths; strip whitespace and drop blanks."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            raise ValueError("allowlist must be a list of corpus-relative paths")
        return frozenset(p.strip() for p in v if p and p.strip())
