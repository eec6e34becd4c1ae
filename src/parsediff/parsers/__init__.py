"""parsediff parser adapters.

Parsers are the two black boxes under comparison. All adapters implement the
Parser ABC with a parse() method.

Public API:
    - Parser: Abstract base class
    - create_parser: Factory function to create parsers from config
    - register_tool: Register an adapter in the registry
    - get_tool: Get an adapter class from the registry
    - list_tools: List all registered adapters
"""

# These imports have side effects (register_tool calls)
from . import command, python  # noqa: F401
from .abc import Parser
from .command import CommandParser
from .factory import create_parser
from .python import PythonParser
from .registry import get_tool, is_tool_registered, list_tools, register_tool

__all__ = [
    "Parser",
    "CommandParser",
    "PythonParser",
    "create_parser",
    "register_tool",
    "get_tool",
    "list_tools",
    "is_tool_registered",
]
