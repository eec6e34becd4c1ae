"""Parser factory for parsediff.

Creates Parser instances from ParserConfig objects by looking up the tool in
the registry and instantiating it with the provided configuration.

Example:
    >>> config = ParserConfig(
    ...     name="ripper",
    ...     tool="command",
    ...     config={"command": ["ruby", "ripper_sexp.rb"]},
    ... )
    >>> parser = create_parser(config)
"""

from ..core.errors import ConfigError, RunError
from ..core.logging import get_logger
from ..core.models import ParserConfig
from .abc import Parser
from .registry import get_tool

logger = get_logger(__name__)


def create_parser(config: ParserConfig) -> Parser:
    """Create a Parser instance from a ParserConfig.

    Args:
        config: ParserConfig with tool name and configuration

    Returns:
        Initialized Parser instance

    Raises:
        ConfigError: If tool not found in registry or its configuration is invalid
        RunError: If parser initialization fails for any other reason
    """
    logger.debug(f"Creating parser: {config.name} (tool: {config.tool})")

    try:
        tool_class = get_tool(config.tool)
    except ConfigError as e:
        raise ConfigError(f"Failed to create parser '{config.name}': {e}") from e

    try:
        parser = tool_class(config=config.config, name=config.name)
        logger.info(f"Created parser '{config.name}' using tool '{config.tool}'")
        return parser

    except ConfigError:
        # Re-raise ConfigError as-is (don't wrap)
        raise

    except Exception as e:
        raise RunError(
            f"Failed to initialize parser '{config.name}' (tool: {config.tool}): {e}"
        ) from e
