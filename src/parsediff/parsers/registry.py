"""Tool registry for parsediff parser adapters.

Adapters register under a tool name ("command", "python") and are looked up
by that name when a suite file is turned into Parser instances.

Example:
    register_tool("command", CommandParser)
    parser_class = get_tool("command")
    list_tools()  # ["command", "python"]
"""

from ..core.errors import ConfigError
from ..core.logging import get_logger
from .abc import Parser

logger = get_logger(__name__)

# Global registry: tool name -> Parser class
TOOL_REGISTRY: dict[str, type[Parser]] = {}


def register_tool(name: str, tool_class: type[Parser]) -> None:
    """Register a parser adapter in the global registry.

    Args:
        name: Tool name (e.g., "command")
        tool_class: Parser subclass to register

    Raises:
        ConfigError: If the name is invalid or the class is not a Parser
    """
    if not name:
        raise ConfigError("Tool name cannot be empty")

    if not name.replace("-", "").replace("_", "").isalnum():
        raise ConfigError(
            f"Tool name '{name}' must be alphanumeric with hyphens/underscores only"
        )

    if not isinstance(tool_class, type) or not issubclass(tool_class, Parser):
        raise ConfigError(f"Tool class {tool_class!r} must inherit from Parser")

    if name in TOOL_REGISTRY:
        logger.warning(
            f"Tool '{name}' already registered. Overwriting with {tool_class.__name__}"
        )

    TOOL_REGISTRY[name] = tool_class
    logger.debug(f"Registered tool '{name}' -> {tool_class.__name__}")


def get_tool(name: str) -> type[Parser]:
    """Get a parser adapter class from the registry.

    Raises:
        ConfigError: If tool not found in registry
    """
    if name not in TOOL_REGISTRY:
        available = ", ".join(sorted(TOOL_REGISTRY.keys()))
        raise ConfigError(
            f"Unknown parser tool '{name}'. Available tools: {available or '(none)'}"
        )

    return TOOL_REGISTRY[name]


def list_tools() -> list[str]:
    """List all registered tool names, sorted."""
    return sorted(TOOL_REGISTRY.keys())


def is_tool_registered(name: str) -> bool:
    return name in TOOL_REGISTRY
