"""Reading scripts from kool.yml files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

import yaml

from kool.builder import Command, parse_command

SIMILAR_THRESHOLD = 2


class MultipleDefinedScriptError(Exception):
    """The script was found in more than one kool.yml; holds the first match."""

    def __init__(self, commands=None) -> None:
        super().__init__("script was found in more than one kool.yml file")
        self.commands = list(commands or [])


class KoolYmlNotFoundError(FileNotFoundError):
    """No kool.yml file was found."""

    def __init__(self, message: str = "could not find any kool.yml file") -> None:
        super().__init__(message)


class PossibleTypoError(Exception):
    """The script was not found but similarly named ones exist."""

    def __init__(self, similars) -> None:
        self.similars = list(similars)
        super().__init__(str(self))

    def __str__(self) -> str:
        if len(self.similars) == 1:
            return f"did you mean '{self.similars[0]}'?"
        return "did you mean one of ['{}']?".format("', '".join(self.similars))


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, 1):
        current = [i]
        for j, char_b in enumerate(b, 1):
            current.append(
                min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + (char_a != char_b))
            )
        previous = current
    return previous[-1]


@dataclass
class KoolYaml:
    """The scripts section of a kool.yml file."""

    scripts: dict | None = field(default=None)

    def parse(self, file_path: str) -> None:
        self.scripts = parse_kool_yaml(file_path).scripts

    def has_script(self, script: str) -> bool:
        return self.scripts is not None and script in self.scripts

    def get_similars(self, script: str) -> list[str]:
        """Script names within editing distance of the given name."""
        return [
            name
            for name in (self.scripts or {})
            if levenshtein(str(name), script) < SIMILAR_THRESHOLD
        ]

    def parse_commands(self, script: str) -> list[Command]:
        value = (self.scripts or {}).get(script)
        if isinstance(value, str):
            return [parse_command(value)]
        if isinstance(value, list) and all(isinstance(line, str) for line in value):
            return [parse_command(line) for line in value]
        raise ValueError(f"failed parsing script '{script}': expected string or array of strings")

    def set_script(self, key: str, commands) -> None:
        commands = list(commands or [])
        if not commands:
            return
        if self.scripts is None:
            self.scripts = {}
        self.scripts[key] = commands[0] if len(commands) == 1 else commands

    def to_yaml(self) -> str:
        return yaml.safe_dump(
            {"scripts": self.scripts if self.scripts is not None else {}},
            sort_keys=True,
            default_flow_style=False,
            allow_unicode=True,
            width=1 << 16,
        )


def parse_kool_yaml(file_path: str) -> KoolYaml:
    """Read and decode a kool.yml file."""
    with open(file_path, encoding="utf-8") as handle:
        raw = handle.read()
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ValueError(f"failed parsing {file_path}: {exc}") from exc
    if data is None:
        return KoolYaml()
    if not isinstance(data, dict):
        raise ValueError(f"failed parsing {file_path}: expected a mapping")
    scripts = data.get("scripts")
    if scripts is not None and not isinstance(scripts, dict):
        raise ValueError(f"failed parsing {file_path}: scripts must be a mapping")
    return KoolYaml(scripts)


class ScriptParser:
    """Looks scripts up across the kool.yml files of several folders."""

    def __init__(self) -> None:
        self.target_files: list[str] = []
        self._looked_up: set[str] = set()

    def add_lookup_path(self, root_path: str) -> None:
        for name in ("kool.yml", "kool.yaml"):
            candidate = os.path.join(root_path, name)
            if os.path.exists(candidate):
                break
        else:
            raise KoolYmlNotFoundError()

        if candidate not in self._looked_up:
            self.target_files.append(candidate)
            self._looked_up.add(candidate)

    def parse(self, script: str) -> list[Command]:
        """Commands of the script; raises if defined twice or possibly mistyped."""
        if not self.target_files:
            raise KoolYmlNotFoundError("kool.yml not found")

        commands: list[Command] = []
        found = False
        multiple = False
        similars: list[str] = []

        for kool_file in self.target_files:
            parsed = parse_kool_yaml(kool_file)
            if parsed.has_script(script):
                if not found:
                    found = True
                    commands = parsed.parse_commands(script)
                else:
                    multiple = True
            else:
                similars.extend(parsed.get_similars(script))

        if multiple:
            raise MultipleDefinedScriptError(commands)
        if not commands and similars:
            raise PossibleTypoError(similars)
        return commands

    def parse_available_scripts(self, filter: str = "") -> list[str]:
        if not self.target_files:
            raise KoolYmlNotFoundError("kool.yml not found")

        found: set[str] = set()
        for kool_file in self.target_files:
            for script in parse_kool_yaml(kool_file).scripts or {}:
                if filter == "" or str(script).startswith(filter):
                    found.add(str(script))
        return sorted(found)