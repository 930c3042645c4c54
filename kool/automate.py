"""Automation actions: copying templates, merging YAML, running scripts and prompts."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from pathlib import Path

import yaml

from kool.builder import parse_command
from kool.prompt import PromptSelect


class AutomateError(Exception):
    """An automation step could not be carried out."""


class ActionType(IntEnum):
    UNKNOWN = 0
    COPY = 1
    SCRIPTS = 2
    PROMPT = 3
    RECIPE = 4
    MERGE = 5


def _text(value) -> str:
    return "" if value is None else str(value)


@dataclass
class Action:
    """One action; which fields are set decides what kind it is."""

    ref: str = ""
    recipe: str = ""
    merge: str = ""
    src: str = ""
    dst: str = ""
    scripts: list | None = None
    prompt: str = ""
    default: str = ""
    options: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> "Action":
        data = data or {}
        scripts = data.get("scripts")
        return cls(
            ref=_text(data.get("ref")),
            recipe=_text(data.get("recipe")),
            merge=_text(data.get("merge")),
            src=_text(data.get("copy")),
            dst=_text(data.get("dst")),
            scripts=[_text(line) for line in scripts] if scripts is not None else None,
            prompt=_text(data.get("prompt")),
            default=_text(data.get("default")),
            options=[ActionSet.from_dict(option) for option in data.get("options") or []],
        )

    def type(self) -> ActionType:
        if self.scripts is not None:
            return ActionType.SCRIPTS
        if self.recipe:
            return ActionType.RECIPE
        if self.src:
            return ActionType.COPY
        if self.prompt:
            return ActionType.PROMPT
        if self.merge:
            return ActionType.MERGE
        return ActionType.UNKNOWN


@dataclass
class ActionSet:
    """A named list of actions."""

    name: str = ""
    actions: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> "ActionSet":
        data = data or {}
        return cls(
            name=_text(data.get("name")),
            actions=[Action.from_dict(action) for action in data.get("actions") or []],
        )


@dataclass
class RecipeMetadata:
    title: str = ""
    slug: str = ""


_recipes_source = None


def set_recipes_source(src) -> None:
    """Set the root holding the recipes/ folder (a path or traversable)."""
    global _recipes_source
    _recipes_source = Path(src) if isinstance(src, str) else src


def _recipes_dir():
    if _recipes_source is None:
        raise FileNotFoundError("recipes source is not set")
    return _recipes_source / "recipes"


def get_recipes() -> list[RecipeMetadata]:
    recipes = []
    for entry in sorted(_recipes_dir().iterdir(), key=lambda e: e.name):
        data = yaml.safe_load(entry.read_bytes()) or {}
        if not isinstance(data, dict):
            raise AutomateError(f"invalid recipe file {entry.name}")
        recipes.append(
            RecipeMetadata(title=_text(data.get("title")), slug=entry.name.replace(".yml", ""))
        )
    return recipes


def _merge_yaml(partial, into):
    """Merge partial into into: mappings recursively, new list items appended."""
    if isinstance(partial, dict) and isinstance(into, dict):
        for key, value in partial.items():
            into[key] = _merge_yaml(value, into[key]) if key in into else value
        return into
    if isinstance(partial, list) and isinstance(into, list):
        return into + [item for item in partial if item not in into]
    return partial if partial is not None else into


class Executor:
    """Runs action sets against the local working directory."""

    def __init__(self, sh, get_from_source, prompter=None, merger=None) -> None:
        self.sh = sh
        self.get_from_source = get_from_source
        self.prompter = prompter if prompter is not None else PromptSelect()
        self.merger = merger if merger is not None else _merge_yaml
        self.prompt_state: dict[str, str] = {}

    def do(self, steps) -> None:
        handlers = {
            ActionType.RECIPE: self._recipe,
            ActionType.COPY: self._copy,
            ActionType.SCRIPTS: self._scripts,
            ActionType.MERGE: self._merge,
            ActionType.PROMPT: self._prompt,
        }
        for step in steps:
            if step.name:
                self.sh.info("⇒ ", step.name)
            for action in step.actions:
                handler = handlers.get(action.type())
                if handler is None:
                    raise AutomateError(
                        f"ops, something is wrong with this preset config ({int(action.type())})"
                    )
                handler(action)

    def _copy(self, action: Action) -> None:
        dst = action.dst or action.src
        if action.dst:
            self.sh.println("→ copying", action.src, "as", dst)
        else:
            self.sh.println("→ copying", action.src)

        data = self.get_from_source(action.src)

        if os.path.lexists(dst):
            backup = f"{dst}.bak.{datetime.now().strftime('%Y%m%d')}"
            self.sh.warning(f"File {dst} already exists, overriding. (backup is {backup})")
            os.replace(dst, backup)

        with open(dst, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())

    def _merge(self, action: Action) -> None:
        dst = action.dst or action.merge
        if action.dst:
            self.sh.println("→ merging", action.merge, "into", dst)
        else:
            self.sh.println("→ merging", action.merge)

        partial = yaml.safe_load(self.get_from_source(action.merge))

        if not os.path.exists(dst):
            raise AutomateError(f"merge destiny file '{dst}' does not exist")
        with open(dst, "rb") as handle:
            into = yaml.safe_load(handle.read())

        merged = self.merger(partial, into)
        with open(dst, "w", encoding="utf-8") as handle:
            yaml.safe_dump(merged, handle, sort_keys=False, default_flow_style=False, allow_unicode=True)

    def _prompt(self, action: Action) -> None:
        options = {option.name: option for option in action.options}

        if self.prompt_state.get(action.ref):
            pick = self.prompt_state[action.ref]
            self.sh.printf("→ Already selected '%s': %s\n", action.prompt, pick)
        else:
            pick = self.prompter.ask(action.prompt, list(options))

        if action.ref:
            self.prompt_state[action.ref] = pick

        if pick not in options:
            raise AutomateError(f"invalid option '{pick}' for prompt '{action.prompt}'")
        self.do([options[pick]])

    def _recipe(self, action: Action) -> None:
        try:
            path = _recipes_dir() / f"{action.recipe}.yml"
            data = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            raise AutomateError(f"recipe '{action.recipe}' does not exist") from None
        self.do([ActionSet.from_dict(yaml.safe_load(data))])

    def _scripts(self, action: Action) -> None:
        commands = [parse_command(line) for line in action.scripts]
        for command in commands:
            self.sh.println("→ exec:", str(command))
            self.sh.interactive(command)