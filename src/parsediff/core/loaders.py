"""File loaders for parsediff suite definitions.

A suite file is YAML:

    name: prism-vs-ripper
    reference:
      name: ripper
      tool: command
      config:
        command: ["ruby", "-rripper", "-e", "p Ripper.sexp_raw($stdin.read)"]
    candidate:
      name: prism
      tool: command
      config:
        command: ["${RUBY}", "-Ilib", "-rprism", "-e", "p Prism::Translation::Ripper.sexp_raw($stdin.read)"]
    corpus_dir: test/prism/fixtures
    ledger_dir: .
    concurrency: 8
    allowlist_file: allowlist.txt
    allowlist:
      - arrays.txt

Relative paths are resolved against the directory holding the suite file.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .env_vars import check_required_vars, substitute_env_vars
from .errors import ConfigError
from .logging import get_logger
from .models import SuiteConfig

logger = get_logger(__name__)

# Environment variable naming a single fixture to run
FOCUS_ENV_VAR = "FOCUS"


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Raises:
        ConfigError: If file cannot be read or YAML is invalid
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Suite file not found: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid YAML in {path}: expected dictionary, got {type(data).__name__}"
        )
    return data


def load_allowlist_file(path: Path) -> list[str]:
    """Read an allowlist file: one corpus-relative path per line.

    Blank lines and ``#`` comments are ignored.

    Raises:
        ConfigError: If the file cannot be read
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read allowlist {path}: {e}") from e

    entries = []
    for line in text.splitlines():
        entry = line.split("#", 1)[0].strip()
        if entry:
            entries.append(entry)
    return entries


def focus_from_env() -> Optional[str]:
    """The single fixture selected through the FOCUS environment variable, if any."""
    return os.environ.get(FOCUS_ENV_VAR) or None


def load_suite(path: Path, focus: Optional[str] = None) -> SuiteConfig:
    """Load and validate a suite definition.

    Args:
        path: Path to the suite YAML file
        focus: Optional fixture to run on its own; overrides ``focus:`` in
            the file and the FOCUS environment variable

    Returns:
        Validated SuiteConfig with absolute corpus and ledger directories

    Raises:
        ConfigError: If the file is missing, invalid, or references unset variables
    """
    path = Path(path)
    logger.debug(f"Loading suite from {path}")

    raw = load_yaml(path)
    raw.setdefault("name", path.stem)

    check_required_vars(raw)
    data = substitute_env_vars(raw)

    base = path.resolve().parent
    for key in ("corpus_dir", "ledger_dir"):
        if data.get(key) is not None:
            data[key] = base / Path(data[key])

    allowlist = data.get("allowlist") or []
    if not isinstance(allowlist, list):
        raise ConfigError(
            f"Invalid suite configuration in {path}: allowlist must be a list of "
            f"corpus-relative paths, got {type(allowlist).__name__}"
        )
    allowlist = list(allowlist)
    allowlist_file = data.pop("allowlist_file", None)
    if allowlist_file:
        allowlist.extend(load_allowlist_file(base / Path(allowlist_file)))
    data["allowlist"] = allowlist

    data["focus"] = focus or focus_from_env() or data.get("focus")

    try:
        suite = SuiteConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid suite configuration in {path}: {e}") from e

    logger.info(
        f"Loaded suite '{suite.name}': {suite.reference.name} vs {suite.candidate.name}, "
        f"{len(suite.allowlist)} allowlisted fixtures"
    )
    return suite
