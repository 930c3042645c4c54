# kool

A library of building blocks for a docker compose based development
workflow: starting, stopping and inspecting service containers, running
named scripts from `kool.yml` files, and applying presets and recipes to a
project.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `kool.builder` — `Command` holds an executable name and its argument list
  (`append_args`, `copy`, `parse`, `str()`); `parse_command(line)` splits a
  command line shell-style after expanding `$VAR` and `${VAR}` (unset
  variables become empty).
- `kool.environment` — `EnvStorage` reads and writes the process environment
  (`get`, `set`, `load` a dotenv file without overriding what is set, `all`,
  `is_true` for `"1"` or `"true"`). `init_environment_variables(env_storage,
  env_files=None)` loads `.env.local` and `.env` when present and fills in
  `HOME`, `UID`, `PWD`, `KOOL_NAME` (last part of `PWD`),
  `KOOL_GLOBAL_NETWORK` (`kool_global`) and `KOOL_ASUSER` when they are empty.
- `kool.shell` — `Shell` runs a command silently with `exec` (returning the
  trimmed combined output, raising `ExecError` on a non-zero exit) or attached
  to its streams with `interactive` (raising `LookPathError` when the
  executable is not in `PATH`, `ExitError` on a non-zero exit). Trailing `<`,
  `>` and `>>` redirects are honoured, and interrupt/terminate/hang-up signals
  are forwarded to the child. `println`, `printf`, `warning`, `success`,
  `info` and `error` write to the output stream, the last four in colour.
  When `KOOL_VERBOSE` is true each command is echoed to the error stream.
  `run_exec` and `run_interactive` are shortcuts over a default `Shell`.
- `kool.redirect` — `has_redirect`, `split_redirect`, `parse_redirects` and
  `CommandWithPointers`, which `Shell.interactive` uses.
- `kool.terminal` — `TerminalChecker.is_terminal(*streams)` and
  `get_terminal_width(tty)` (80 when `tty` is not a file).
- `kool.prompt` — `PromptSelect.ask` (pick an option by number or name; an
  empty answer picks the first), `PromptSelect.confirm` (Yes/No) and
  `PromptInput.input`. End of input raises `UserCancelledError`.
- `kool.table` — `TableWriter` renders a boxed text table with upper-cased
  headers, optionally sorted by a 1-based column.
- `kool.network` — `NetworkHandler.handle_global_network(name)` creates the
  named attachable docker network if `docker network ls` does not list it.
- `kool.koolfile` — `KoolYaml` and `parse_kool_yaml` read the `scripts`
  section of a `kool.yml`; `ScriptParser` looks scripts up across the
  `kool.yml`/`kool.yaml` files of several folders. `parse` raises
  `MultipleDefinedScriptError` when a script is defined in more than one file
  and `PossibleTypoError` when only similarly named scripts exist.
- `kool.automate` — `Action`, `ActionSet` and `Executor` run copy, merge,
  prompt, recipe and script steps; `set_recipes_source` and `get_recipes`
  work on a folder holding `recipes/*.yml`.
- `kool.presets` — `set_source` points at a folder holding `presets/` and
  `templates/`; `PresetParser` lists tags and presets, and runs a preset's
  `create` or `preset` steps (after `prepare_executor`) or a single recipe
  with `add`.
- `kool.loading` — `Spinner`, `make_fast_loading` and `make_slow_loading`
  show an animated message while a task runs.
- `kool.commands` — `KoolStart`, `KoolStop` and `KoolStatus` hold the start,
  stop and status logic for compose services; `KoolRebuild` pulls and builds
  images.
- `kool.fakes` — recording stand-ins for the collaborators above, for tests.

## Example

```python
from kool.builder import parse_command
from kool.shell import Shell

sh = Shell()
output = sh.exec(parse_command("echo hello"))
sh.success(output)
```

Reading scripts from a project:

```python
from kool.koolfile import ScriptParser

parser = ScriptParser()
parser.add_lookup_path(".")
for command in parser.parse("setup"):
    print(command)
```

## What the package does not do

- It installs no command-line program; the classes in `kool.commands` are
  called from Python.
- It has no docker availability checker of its own: `KoolStart`, `KoolStop`
  and `KoolStatus` take a `checker` argument, any object with a `check()`
  method that raises when docker is not usable.
- It ships no preset, template or recipe files; point `set_source` and
  `set_recipes_source` at folders of your own.