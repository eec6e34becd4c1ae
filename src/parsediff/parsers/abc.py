"""Parser abstract base class for parsediff.

A Parser wraps one parser implementation (the trusted reference or the
candidate under test) behind a single method: parse(source). parsediff never
parses anything itself; it only compares what two Parser instances return.

Example:
    >>> parser = CommandParser(
    ...     config={"command": ["ruby", "-rripper", "-e", "p Ripper.sexp_raw($stdin.read)"]},
    ...     name="ripper",
    ... )
    >>> tree = parser.parse("1 + 2")
    >>> tree.tag
    'program'
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..core.tree import ParseTree


class Parser(ABC):
    """Abstract base class for all parser adapters.

    Parsers are instantiated from ParserConfig objects and registered in the
    TOOL_REGISTRY for discovery.

    Thread Safety:
        Fixtures are evaluated in parallel, so parse() may be called from
        several threads at once. Adapters holding non thread-safe state must
        guard it themselves.

    Attributes:
        config: Adapter-specific configuration
        name: Display name used in reports and failure messages
        engine: Engine identifier; curated snippets can be skipped per engine
    """

    def __init__(self, config: dict, name: Optional[str] = None):
        """Initialize the parser with configuration.

        Args:
            config: Adapter-specific configuration dictionary
            name: Display name (defaults to the class name)

        Raises:
            ConfigError: If required configuration is missing or invalid
        """
        self.config = config
        self.name = name or self.__class__.__name__
        self.engine = str(config.get("engine", self.name))

    @abstractmethod
    def parse(self, source: str) -> Optional[ParseTree]:
        """Parse source text into a tree.

        Args:
            source: Source text (may carry undecodable bytes as surrogate escapes)

        Returns:
            The parse tree, or None if the parser rejects the input

        Raises:
            ParseError: If the parser crashes or produces unreadable output
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
