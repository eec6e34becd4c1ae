"""External-process parser adapter.

Runs a command once per source text, writes the source to the command's
stdin and reads an s-expression tree from its stdout. A command printing
``nil`` (as Ripper does for a syntax error) is a parser that rejects the
input.

Configuration:
    command: Argument list (or a shell-style string) to execute
    timeout: Seconds before the process is killed (default: 30)
    env: Extra environment variables for the process
    cwd: Working directory for the process
    engine: Engine identifier used to skip engine-specific snippets

Example suite entry:
    reference:
      name: ripper
      tool: command
      config:
        command: ["ruby", "-rripper", "-e", "p Ripper.sexp_raw($stdin.read)"]
        timeout: 30
"""

import os
import shlex
import subprocess
from typing import Optional

from ..core.errors import ConfigError, ParseError
from ..core.logging import get_logger
from ..core.sexp import read_tree
from ..core.tree import ParseTree
from .abc import Parser
from .registry import register_tool

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class CommandParser(Parser):
    """Parser backed by an external process."""

    def __init__(self, config: dict, name: Optional[str] = None):
        super().__init__(config, name)

        command = config.get("command")
        if not command:
            raise ConfigError(f"Parser '{self.name}': missing required field 'command'")
        if isinstance(command, str):
            command = shlex.split(command)
        self.command = [str(part) for part in command]

        try:
            self.timeout = float(config.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError):
            raise ConfigError(
                f"Parser '{self.name}': timeout must be a number, got {config.get('timeout')!r}"
            ) from None

        self.env = None
        if config.get("env"):
            self.env = {**os.environ, **{k: str(v) for k, v in config["env"].items()}}
        self.cwd = config.get("cwd")

    def parse(self, source: str) -> Optional[ParseTree]:
        """Run the command on ``source``.

        Raises:
            ParseError: If the process times out, exits non-zero or prints
                something that is not an s-expression
        """
        try:
            completed = subprocess.run(
                self.command,
                input=source.encode("utf-8", "surrogateescape"),
                capture_output=True,
                timeout=self.timeout,
                env=self.env,
                cwd=self.cwd,
                check=False,
            )
        except subprocess.TimeoutExpired:
            raise ParseError(
                f"{self.name} did not finish within {self.timeout:g}s"
            ) from None
        except OSError as e:
            raise ParseError(f"{self.name} could not be started: {e}") from e

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", "replace").strip()
            raise ParseError(
                f"{self.name} exited with status {completed.returncode}: {stderr[:500]}"
            )

        return read_tree(completed.stdout.decode("utf-8", "surrogateescape"))

    def __repr__(self) -> str:
        return f"CommandParser(name={self.name!r}, command={self.command!r})"


register_tool("command", CommandParser)
