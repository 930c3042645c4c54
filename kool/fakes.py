"""Stand-in implementations recording their calls, for use in tests."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from dotenv import dotenv_values


@dataclass
class FakeCommand:
    """A command that records how it was used."""

    args_append: list = field(default_factory=list)
    called_append_args: bool = False
    called_string: bool = False
    called_cmd: bool = False
    called_args: bool = False
    called_parse_command: bool = False

    mock_cmd: str = ""
    mock_exec_out: str = ""
    mock_error: Exception | None = None
    mock_look_path_error: Exception | None = None
    mock_exec_error: Exception | None = None
    mock_interactive_error: Exception | None = None

    @property
    def command(self) -> str:
        self.called_cmd = True
        return self.mock_cmd

    @property
    def args(self) -> list:
        self.called_args = True
        return self.args_append

    def append_args(self, *args) -> None:
        self.args_append.extend(args)
        self.called_append_args = True

    def parse(self, line: str) -> None:
        self.called_parse_command = True
        if self.mock_error is not None:
            raise self.mock_error

    def copy(self) -> "FakeCommand":
        return self

    def __str__(self) -> str:
        self.called_string = True
        return ""


@dataclass
class FakeEnvStorage:
    """Environment variables held in a dict, with a history of assignments."""

    envs: dict = field(default_factory=dict)
    called_load: bool = False
    envs_history: dict = field(default_factory=dict)

    def get(self, key: str) -> str:
        return self.envs.get(key, "")

    def set(self, key: str, value: str) -> None:
        self.envs[key] = value
        self.envs_history.setdefault(key, []).append(value)

    def load(self, filename: str) -> None:
        self.called_load = True
        if not filename or not os.path.isfile(filename):
            return
        for key, value in dotenv_values(filename).items():
            if key not in self.envs:
                self.envs[key] = value if value is not None else ""

    def all(self) -> list[str]:
        return [f"{key}={value}" for key, value in self.envs.items()]

    def is_true(self, key: str) -> bool:
        return self.envs.get(key, "") in ("1", "true")


@dataclass
class FakeNetworkHandler:
    called_handle_global_network: bool = False
    network_name_arg: str = ""
    mock_error: Exception | None = None

    def handle_global_network(self, network_name: str) -> None:
        self.called_handle_global_network = True
        self.network_name_arg = network_name
        if self.mock_error is not None:
            raise self.mock_error


@dataclass
class FakeScriptParser:
    called_add_lookup_path: bool = False
    target_files: list = field(default_factory=list)
    called_parse: bool = False
    called_parse_available_scripts: bool = False
    mock_parsed_commands: dict = field(default_factory=dict)
    mock_parse_error: dict = field(default_factory=dict)
    mock_scripts: list = field(default_factory=list)
    mock_parse_available_scripts_error: Exception | None = None

    def add_lookup_path(self, root_path: str) -> None:
        self.called_add_lookup_path = True
        self.target_files.append("kool.yml")

    def parse(self, script: str) -> list:
        self.called_parse = True
        error = self.mock_parse_error.get(script)
        if error is not None:
            raise error
        return list(self.mock_parsed_commands.get(script, []))

    def parse_available_scripts(self, filter: str = "") -> list[str]:
        self.called_parse_available_scripts = True
        if self.mock_parse_available_scripts_error is not None:
            raise self.mock_parse_available_scripts_error
        return [script for script in self.mock_scripts if script.startswith(filter)]


@dataclass
class FakeKoolYaml:
    called_parse: dict = field(default_factory=dict)
    called_has_script: dict = field(default_factory=dict)
    called_parse_commands: dict = field(default_factory=dict)
    called_set_script: dict = field(default_factory=dict)
    called_string: bool = False
    script_commands: dict = field(default_factory=dict)
    mock_parse_error: dict = field(default_factory=dict)
    mock_has_script: dict = field(default_factory=dict)
    mock_commands: dict = field(default_factory=dict)
    mock_parse_commands_error: dict = field(default_factory=dict)
    mock_string: str = ""
    mock_string_error: Exception | None = None

    def parse(self, file_path: str) -> None:
        self.called_parse[file_path] = True
        error = self.mock_parse_error.get(file_path)
        if error is not None:
            raise error

    def has_script(self, script: str) -> bool:
        self.called_has_script[script] = True
        return self.mock_has_script.get(script, False)

    def parse_commands(self, script: str) -> list:
        self.called_parse_commands[script] = True
        error = self.mock_parse_commands_error.get(script)
        if error is not None:
            raise error
        return list(self.mock_commands.get(script, []))

    def set_script(self, key: str, commands) -> None:
        self.called_set_script[key] = True
        self.script_commands[key] = list(commands)

    def to_yaml(self) -> str:
        self.called_string = True
        if self.mock_string_error is not None:
            raise self.mock_string_error
        return self.mock_string


@dataclass
class FakePresetParser:
    called_exists: bool = False
    called_get_tags: bool = False
    called_get_presets: bool = False
    called_install: bool = False
    called_create: bool = False
    called_add: bool = False

    mock_exists: bool = False
    mock_get_tags: list = field(default_factory=list)
    mock_get_presets: dict = field(default_factory=dict)
    mock_install: Exception | None = None
    mock_create: Exception | None = None
    mock_add: Exception | None = None

    def exists(self, preset: str) -> bool:
        self.called_exists = True
        return self.mock_exists

    def get_tags(self) -> list[str]:
        self.called_get_tags = True
        return self.mock_get_tags

    def get_presets(self, tag: str) -> dict:
        self.called_get_presets = True
        return self.mock_get_presets

    def install(self, preset: str) -> None:
        self.called_install = True
        if self.mock_install is not None:
            raise self.mock_install

    def create(self, preset: str) -> None:
        self.called_create = True
        if self.mock_create is not None:
            raise self.mock_create

    def prepare_executor(self, sh) -> None:
        """Nothing to prepare."""

    def add(self, recipe: str, sh) -> None:
        self.called_add = True
        if self.mock_add is not None:
            raise self.mock_add


@dataclass
class FakePromptSelect:
    called_ask: bool = False
    mock_answer: dict = field(default_factory=dict)
    mock_error: dict = field(default_factory=dict)
    called_confirm: list = field(default_factory=list)
    mock_confirm: dict = field(default_factory=dict)
    mock_confirm_error: dict = field(default_factory=dict)

    def ask(self, question: str, options) -> str:
        self.called_ask = True
        error = self.mock_error.get(question)
        if error is not None:
            raise error
        return self.mock_answer.get(question, "")

    def confirm(self, question: str, *args) -> bool:
        self.called_confirm.append((question, args))
        error = self.mock_confirm_error.get(question)
        if error is not None:
            raise error
        return self.mock_confirm.get(question, False)


@dataclass
class FakeShell:
    """A shell that records calls instead of running anything."""

    called_in_stream: bool = False
    called_set_in_stream: bool = False
    called_out_stream: bool = False
    called_set_out_stream: bool = False
    called_err_stream: bool = False
    called_set_err_stream: bool = False
    called_is_terminal: bool = False
    called_exec: dict = field(default_factory=dict)
    called_interactive: dict = field(default_factory=dict)
    called_look_path: dict = field(default_factory=dict)
    args_interactive: dict = field(default_factory=dict)

    err: Any = None
    out_lines: list = field(default_factory=list)
    warning_output: list = field(default_factory=list)
    success_output: list = field(default_factory=list)
    info_output: list = field(default_factory=list)
    f_output: str = ""

    called_println: bool = False
    called_printf: bool = False
    called_error: bool = False
    called_warning: bool = False
    called_success: bool = False
    called_info: bool = False

    mock_out_stream: Any = None
    mock_err_stream: Any = None
    mock_in_stream: Any = None
    mock_look_path: Exception | None = None
    mock_is_terminal: bool = False

    @property
    def in_stream(self):
        self.called_in_stream = True
        return self.mock_in_stream

    @in_stream.setter
    def in_stream(self, value) -> None:
        self.called_set_in_stream = True

    @property
    def out_stream(self):
        self.called_out_stream = True
        return self.mock_out_stream

    @out_stream.setter
    def out_stream(self, value) -> None:
        self.called_set_out_stream = True

    @property
    def err_stream(self):
        self.called_err_stream = True
        return self.mock_err_stream

    @err_stream.setter
    def err_stream(self, value) -> None:
        self.called_set_err_stream = True

    def is_terminal(self) -> bool:
        self.called_is_terminal = True
        return self.mock_is_terminal

    def exec(self, command, *args) -> str:
        self.called_exec[command.command] = True
        if isinstance(command, FakeCommand):
            if command.mock_exec_error is not None:
                raise command.mock_exec_error
            return command.mock_exec_out
        return ""

    def interactive(self, command, *args) -> None:
        name = command.command
        self.called_interactive[name] = True
        self.args_interactive[name] = list(args)
        if isinstance(command, FakeCommand) and command.mock_interactive_error is not None:
            raise command.mock_interactive_error

    def look_path(self, command) -> None:
        self.called_look_path[command.command] = True
        if isinstance(command, FakeCommand):
            if command.mock_look_path_error is not None:
                raise command.mock_look_path_error
            return
        if self.mock_look_path is not None:
            raise self.mock_look_path

    def println(self, *args) -> None:
        self.called_println = True
        self.out_lines.append(" ".join(str(a) for a in args).strip())

    def printf(self, fmt, *args) -> None:
        self.called_printf = True
        self.f_output = fmt % args if args else fmt

    def error(self, err) -> None:
        self.err = err
        self.called_error = True

    def warning(self, *args) -> None:
        self.called_warning = True
        self.warning_output = list(args)

    def success(self, *args) -> None:
        self.called_success = True
        self.success_output = list(args)

    def info(self, *args) -> None:
        self.called_info = True
        self.info_output = list(args)


@dataclass
class FakeTableWriter:
    """Collects rows and renders them as ' | '-joined lines."""

    writer: Any = None
    called_append_header: bool = False
    called_append_row: bool = False
    called_render: bool = False
    headers: list = field(default_factory=list)
    rows: list = field(default_factory=list)
    table_out: str = ""

    def append_header(self, *args) -> None:
        self.called_append_header = True
        self.headers.append(list(args))

    def append_row(self, *args) -> None:
        self.called_append_row = True
        self.rows.append(list(args))

    def render(self) -> str:
        self.called_render = True
        for columns in [*self.headers, *self.rows]:
            self.table_out += " | ".join(str(c) for c in columns) + "\n"
        return self.table_out

    def sort_by(self, column: int) -> None:
        self.rows.sort(key=lambda row: str(row[column - 1]))


@dataclass
class FakeTerminalChecker:
    called_is_terminal: bool = False
    mock_is_terminal: bool = False

    def is_terminal(self, *args) -> bool:
        self.called_is_terminal = True
        return self.mock_is_terminal