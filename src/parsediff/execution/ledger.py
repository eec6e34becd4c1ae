"""Pass/fail ledger for parsediff runs.

The ledger is the durable audit trail of a run: two append-only sequences of
fixture paths.

- ``failing``: fixtures whose outcome was not a match (allowlisted or not)
- ``passing``: allowlisted fixtures that matched anyway, i.e. candidates for
  removal from the allowlist

Both sequences are cleared at the start of a run. Entries are paths only; no
tree content is persisted. Writes from parallel fixture evaluations are
serialized by a lock; ordering between fixtures is not significant.

Example:
    >>> ledger = Ledger.in_directory(Path("."))
    >>> ledger.reset()
    >>> ledger.record_failing("seattlerb/bug169.txt")
"""

import threading
from abc import ABC, abstractmethod
from pathlib import Path

from ..core.logging import get_logger

logger = get_logger(__name__)

FAILING_FILE = "failing.txt"
PASSING_FILE = "passing.txt"


class LedgerSink(ABC):
    """Storage for one ledger sequence."""

    @abstractmethod
    def reset(self) -> None:
        """Discard every previously recorded entry."""

    @abstractmethod
    def append(self, entry: str) -> None:
        """Durably append one entry."""


class FileSink(LedgerSink):
    """Plain-text file, one entry per line."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def reset(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.debug(f"Deleted previous ledger file {self.path}")

    def append(self, entry: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(entry + "\n")

    def __repr__(self) -> str:
        return f"FileSink({str(self.path)!r})"


class MemorySink(LedgerSink):
    """In-memory sink, for tests and dry runs."""

    def __init__(self):
        self.lines: list[str] = []

    def reset(self) -> None:
        self.lines.clear()

    def append(self, entry: str) -> None:
        self.lines.append(entry)


class Ledger:
    """Write-only record of failing and unexpectedly passing fixtures.

    Args:
        failing: Sink for fixtures that did not match
        passing: Sink for allowlisted fixtures that matched
    """

    def __init__(self, failing: LedgerSink, passing: LedgerSink):
        self.failing = failing
        self.passing = passing
        self._lock = threading.Lock()

    @classmethod
    def in_directory(cls, directory: Path) -> "Ledger":
        """Ledger backed by failing.txt and passing.txt in ``directory``."""
        directory = Path(directory)
        return cls(
            failing=FileSink(directory / FAILING_FILE),
            passing=FileSink(directory / PASSING_FILE),
        )

    @classmethod
    def in_memory(cls) -> "Ledger":
        return cls(failing=MemorySink(), passing=MemorySink())

    def reset(self) -> None:
        """Clear both sequences at the start of a run."""
        with self._lock:
            self.failing.reset()
            self.passing.reset()
        logger.info("Ledger reset")

    def record_failing(self, path: str) -> None:
        with self._lock:
            self.failing.append(path)

    def record_passing(self, path: str) -> None:
        with self._lock:
            self.passing.append(path)
