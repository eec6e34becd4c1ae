"""Environment variable substitution for parsediff suite files.

Suite files may reference ${VAR_NAME} placeholders (for example the path of
the interpreter that hosts a parser). They are resolved from the environment
or from a .env file.
"""

import os
import re
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .errors import ConfigError
from .logging import get_logger

logger = get_logger(__name__)

# Pattern for ${VAR_NAME} placeholders
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


def load_env_file(env_file: Path | None = None) -> None:
    """Load environment variables from a .env file.

    Args:
        env_file: Path to .env file. If None, looks for .env in current directory.

    Note:
        Variables already set in the environment take precedence.
    """
    if env_file is None:
        env_file = Path.cwd() / ".env"

    if env_file.exists():
        logger.debug(f"Loading environment variables from {env_file}")
        load_dotenv(env_file, override=False)
    else:
        logger.debug(f"No .env file found at {env_file}")


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in a value.

    Args:
        value: Value to process (str, dict, list, or primitive)

    Returns:
        Value with placeholders substituted

    Raises:
        ConfigError: If a referenced variable is not set

    Examples:
        >>> os.environ['RUBY'] = '/usr/bin/ruby'
        >>> substitute_env_vars({'command': ['${RUBY}', 'sexp.rb']})
        {'command': ['/usr/bin/ruby', 'sexp.rb']}
    """
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_replace_match, value)
    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    else:
        # Primitives (int, float, bool, None) pass through
        return value


def _replace_match(match: re.Match) -> str:
    var_name = match.group(1)
    value = os.environ.get(var_name)

    if value is None:
        raise ConfigError(
            f"Environment variable '{var_name}' not set. "
            f"Set it in your environment or .env file."
        )

    return value


def find_env_vars(value: Any, *, found: set[str] | None = None) -> set[str]:
    """Extract all ${VAR_NAME} placeholders from a value.

    Example:
        >>> find_env_vars({'command': ['${RUBY}', '${PRISM_DIR}/sexp.rb']})
        {'RUBY', 'PRISM_DIR'}
    """
    if found is None:
        found = set()

    if isinstance(value, str):
        for match in ENV_VAR_PATTERN.finditer(value):
            found.add(match.group(1))
    elif isinstance(value, dict):
        for v in value.values():
            find_env_vars(v, found=found)
    elif isinstance(value, list):
        for item in value:
            find_env_vars(item, found=found)

    return found


def check_required_vars(value: Any) -> None:
    """Check that all ${VAR_NAME} placeholders can be resolved.

    Raises:
        ConfigError: If any referenced variable is not set
    """
    required = find_env_vars(value)
    missing = {var for var in required if var not in os.environ}

    if missing:
        raise ConfigError(
            f"Missing required environment variables: {', '.join(sorted(missing))}. "
            f"Set them in your environment or .env file."
        )
