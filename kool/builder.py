"""Building and parsing executable command lines."""

from __future__ import annotations

import os
import re
import shlex

_ENV_REFERENCE = re.compile(r"\$(?:\{([^}]*)\}|([A-Za-z0-9_]+))")


def _expand_env(line: str) -> str:
    """Replace $VAR and ${VAR} with their values; unset variables become empty."""

    def replace(match: re.Match) -> str:
        name = match.group(1) if match.group(1) is not None else match.group(2)
        return os.environ.get(name, "")

    return _ENV_REFERENCE.sub(replace, line)


class Command:
    """An executable name together with its argument list."""

    def __init__(self, command: str, *args: str) -> None:
        self.command = command
        self.args = list(args)

    def append_args(self, *args: str) -> None:
        self.args.extend(args)

    def parse(self, line: str) -> None:
        """Replace this command's content with the parsed command line."""
        parsed = parse_command(line)
        self.command = parsed.command
        self.args = parsed.args

    def copy(self) -> "Command":
        return Command(self.command, *self.args)

    def __str__(self) -> str:
        return f"{self.command} {' '.join(self.args)}".strip(" ")

    def __repr__(self) -> str:
        return f"Command({self.command!r}, {self.args!r})"


def parse_command(line: str) -> Command:
    """Split a command line into a Command, expanding environment variables."""
    parsed = shlex.split(_expand_env(line))
    if not parsed:
        raise ValueError("empty command line")
    return Command(parsed[0], *parsed[1:])