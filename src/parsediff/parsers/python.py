"""In-process parser adapter.

Imports a callable by dotted path and calls it with the source text. The
callable may return:

- a ParseTree
- nested lists whose tagged nodes start with a Symbol
- s-expression text (read with parsediff.core.sexp)
- None, when it rejects the input

Configuration:
    callable: "package.module:function"
    engine: Engine identifier used to skip engine-specific snippets
"""

import importlib
from typing import Any, Callable, Optional

from ..core.errors import ConfigError, ParseError
from ..core.sexp import read_tree
from ..core.tree import ParseTree, from_nested
from .abc import Parser
from .registry import register_tool


def load_callable(target: str) -> Callable[[str], Any]:
    """Import ``module:attribute`` and return the attribute.

    Raises:
        ConfigError: If the target is malformed, missing or not callable
    """
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigError(f"Callable '{target}' must look like 'package.module:function'")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import module '{module_name}': {e}") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError:
            raise ConfigError(f"'{module_name}' has no attribute '{attr_path}'") from None

    if not callable(obj):
        raise ConfigError(f"'{target}' is not callable")
    return obj


class PythonParser(Parser):
    """Parser backed by an importable Python callable."""

    def __init__(self, config: dict, name: Optional[str] = None):
        super().__init__(config, name)
        target = config.get("callable")
        if not target:
            raise ConfigError(f"Parser '{self.name}': missing required field 'callable'")
        self.function = target if callable(target) else load_callable(str(target))

    def parse(self, source: str) -> Optional[ParseTree]:
        result = self.function(source)
        if result is None or isinstance(result, ParseTree):
            return result
        if isinstance(result, str):
            return read_tree(result)
        tree = from_nested(result)
        if not isinstance(tree, ParseTree):
            raise ParseError(
                f"{self.name} returned an untagged {type(result).__name__}, expected a tree"
            )
        return tree


register_tool("python", PythonParser)
