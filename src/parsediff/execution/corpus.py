"""Fixture corpus discovery.

The corpus is a directory tree of plain-text files; each file is one fixture
and its corpus-relative POSIX path is its identity. Discovery produces an
explicit fixture table of (name, path, allowed_failure) rows that test
runners iterate over.
"""

from pathlib import Path
from typing import Iterable, Optional

from ..core.errors import RunError
from ..core.logging import get_logger
from ..core.models import Fixture, FixtureCase

logger = get_logger(__name__)

DEFAULT_PATTERN = "**/*.txt"


def read_source(path: Path) -> str:
    """Read a fixture as raw bytes and decode it as UTF-8.

    Fixtures may hold multibyte characters at arbitrary offsets and, in
    adversarial cases, byte sequences that are not valid UTF-8. Undecodable
    bytes are kept as surrogate escapes so the text round-trips to the
    original bytes.
    """
    return Path(path).read_bytes().decode("utf-8", "surrogateescape")


def discover(corpus_dir: Path, pattern: str = DEFAULT_PATTERN) -> list[str]:
    """List corpus-relative fixture paths, sorted.

    Raises:
        RunError: If the corpus directory does not exist
    """
    corpus_dir = Path(corpus_dir)
    if not corpus_dir.is_dir():
        raise RunError(f"Corpus directory not found: {corpus_dir}")

    return sorted(
        p.relative_to(corpus_dir).as_posix()
        for p in corpus_dir.glob(pattern)
        if p.is_file()
    )


def case_name(relative: str) -> str:
    """Stable test identifier for a fixture path."""
    stem = relative[:-4] if relative.endswith(".txt") else relative
    return "ripper_" + stem.replace("/", ".")


def build_fixture_table(
    corpus_dir: Path,
    allowlist: Iterable[str] = (),
    focus: Optional[str] = None,
    pattern: str = DEFAULT_PATTERN,
) -> list[FixtureCase]:
    """Build the fixture table for a corpus.

    Args:
        corpus_dir: Root of the fixture corpus
        allowlist: Corpus-relative paths known not to match yet
        focus: Optional single relative path; when given only that fixture is listed
        pattern: Glob pattern selecting fixture files

    Returns:
        One FixtureCase per fixture, sorted by path

    Raises:
        RunError: If the corpus or the focused fixture does not exist
    """
    allowed = frozenset(allowlist)

    if focus:
        focus = Path(focus).as_posix()
        if Path(focus).is_absolute() or ".." in focus.split("/"):
            raise RunError(f"Focused fixture must be relative to the corpus: {focus}")
        if not (Path(corpus_dir) / focus).is_file():
            raise RunError(f"Focused fixture not found in corpus: {focus}")
        relatives = [focus]
        logger.info(f"Focusing on a single fixture: {focus}")
    else:
        relatives = discover(corpus_dir, pattern)
        missing = sorted(allowed.difference(relatives))
        if missing:
            logger.warning(
                f"{len(missing)} allowlisted fixture(s) are not in the corpus: "
                f"{', '.join(missing[:5])}{' ...' if len(missing) > 5 else ''}"
            )

    return [
        FixtureCase(name=case_name(rel), path=rel, allowed_failure=rel in allowed)
        for rel in relatives
    ]


def load_fixture(corpus_dir: Path, case: FixtureCase) -> Fixture:
    """Read the source of a fixture table row."""
    source = read_source(Path(corpus_dir) / case.path)
    return Fixture(path=case.path, source=source, allowed_failure=case.allowed_failure)
