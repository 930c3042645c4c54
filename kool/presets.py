"""Preset configurations and the automation they drive."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from kool.automate import Action, ActionSet, Executor

_PRESET_CONFIG_FILE = "presets/{}/config.yml"

_source = None


class ExecutorNotPreparedError(Exception):
    """The automation executor was used before being prepared."""

    def __init__(
        self, message: str = "automation executor not prepared, call PrepareExecutor first"
    ) -> None:
        super().__init__(message)


def set_source(src) -> None:
    """Set the root holding the presets/ and templates/ folders (a path or traversable)."""
    global _source
    _source = Path(src) if isinstance(src, (str, os.PathLike)) else src


def _node(relative: str):
    if _source is None:
        raise FileNotFoundError("presets source is not set")
    node = _source
    for part in relative.split("/"):
        node = node / part
    return node


def _read_file(relative: str) -> bytes:
    return _node(relative).read_bytes()


def _preset_folders() -> list[str]:
    try:
        root = _node("presets")
        return sorted(entry.name for entry in root.iterdir())
    except (FileNotFoundError, NotADirectoryError):
        return []


@dataclass
class PresetConfig:
    """The config.yml of a preset."""

    name: str = ""
    tags: list = field(default_factory=list)
    create: list = field(default_factory=list)
    preset: list = field(default_factory=list)
    preset_id: str = ""

    @classmethod
    def from_dict(cls, data) -> "PresetConfig":
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("preset config must be a mapping")
        return cls(
            name="" if data.get("name") is None else str(data.get("name")),
            tags=[str(tag) for tag in data.get("tags") or []],
            create=[ActionSet.from_dict(step) for step in data.get("create") or []],
            preset=[ActionSet.from_dict(step) for step in data.get("preset") or []],
        )

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


def _try_config(folder: str) -> PresetConfig | None:
    try:
        data = _read_file(_PRESET_CONFIG_FILE.format(folder))
        return PresetConfig.from_dict(yaml.safe_load(data))
    except (OSError, ValueError, yaml.YAMLError):
        return None


class PresetParser:
    """Finds presets and runs their creation and installation steps."""

    def __init__(self) -> None:
        self.preset_id = ""
        self.exec_runner: Executor | None = None

    def exists(self, preset: str) -> bool:
        if not preset or _source is None:
            return False
        return _node(f"presets/{preset}").is_dir()

    def get_tags(self) -> list[str]:
        tags: set[str] = set()
        for folder in _preset_folders():
            config = _try_config(folder)
            if config is not None:
                tags.update(config.tags)
        return sorted(tags)

    def get_presets(self, tag: str) -> dict[str, str]:
        """Map of preset ID to display name for presets carrying tag."""
        presets = {}
        for folder in _preset_folders():
            config = _try_config(folder)
            if config is not None and config.has_tag(tag):
                presets[folder] = config.name or folder
        return presets

    def _run(self, preset: str, steps_of) -> None:
        config = self._get_config(preset)
        self.preset_id = preset
        if self.exec_runner is None:
            raise ExecutorNotPreparedError()
        self.exec_runner.do(steps_of(config))

    def install(self, preset: str) -> None:
        self._run(preset, lambda config: config.preset)

    def create(self, preset: str) -> None:
        self._run(preset, lambda config: config.create)

    def prepare_executor(self, sh) -> None:
        self.exec_runner = Executor(sh, self._get_source_file)

    def add(self, recipe: str, sh) -> None:
        steps = [ActionSet(name=f"Running recipe {recipe}", actions=[Action(recipe=recipe)])]
        Executor(sh, self._get_source_file).do(steps)

    def _get_source_file(self, path: str) -> bytes:
        if self.preset_id:
            try:
                return _read_file(f"presets/{self.preset_id}/{path}")
            except OSError:
                pass
        try:
            return _read_file(f"templates/{path}")
        except OSError as exc:
            raise FileNotFoundError(
                f"could not find {path} on within preset or global templates (err: {exc})"
            ) from exc

    def _get_config(self, preset: str) -> PresetConfig:
        try:
            data = _read_file(_PRESET_CONFIG_FILE.format(preset))
        except OSError as exc:
            raise FileNotFoundError(
                f"configuration for preset {preset} not found ({exc})"
            ) from exc
        config = PresetConfig.from_dict(yaml.safe_load(data))
        config.preset_id = preset
        return config