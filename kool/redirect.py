"""Parsing of trailing input/output redirections on commands."""

from __future__ import annotations

import io
import os
import subprocess
from dataclasses import dataclass, field
from typing import Any

from kool.builder import Command

INPUT_REDIRECT = "<"
OUTPUT_REDIRECT = ">"
OUTPUT_REDIRECT_APPEND = ">>"
OUTPUT_PIPE = "|"


def _fileno(stream):
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _stdin_target(stream):
    """Return (stdin argument, bytes to feed) for a subprocess."""
    if stream is None:
        return None, None
    if _fileno(stream) is not None:
        return stream, None
    try:
        data = stream.read()
    except (AttributeError, OSError):
        return subprocess.DEVNULL, None
    if isinstance(data, str):
        data = data.encode()
    return subprocess.PIPE, data or b""


def _write(stream, data: bytes) -> None:
    if not data:
        return
    if isinstance(stream, io.TextIOBase):
        stream.write(data.decode(errors="replace"))
    else:
        try:
            stream.write(data)
        except TypeError:
            stream.write(data.decode(errors="replace"))
    flush = getattr(stream, "flush", None)
    if flush is not None:
        flush()


@dataclass
class CommandWithPointers:
    """A command bound to the streams it runs with."""

    command: Command
    in_stream: Any = None
    out_stream: Any = None
    err_stream: Any = None
    has_custom_stdin: bool = False
    has_custom_stdout: bool = False
    _input: Any = field(default=None, repr=False)
    _pump_out: bool = field(default=False, repr=False)
    _pump_err: bool = field(default=False, repr=False)

    def close(self) -> None:
        """Close the redirect files this command opened."""
        if self.has_custom_stdin and hasattr(self.in_stream, "close"):
            self.in_stream.close()
        if self.has_custom_stdout and hasattr(self.out_stream, "close"):
            self.out_stream.close()

    def _output_target(self, stream):
        if stream is None:
            return None, False
        if _fileno(stream) is not None:
            flush = getattr(stream, "flush", None)
            if flush is not None:
                flush()
            return stream, False
        return subprocess.PIPE, True

    def start(self) -> subprocess.Popen:
        """Start the command as a child process."""
        stdin, self._input = _stdin_target(self.in_stream)
        stdout, self._pump_out = self._output_target(self.out_stream)
        stderr, self._pump_err = self._output_target(self.err_stream)
        return subprocess.Popen(
            [self.command.command, *self.command.args],
            stdin=stdin,
            stdout=stdout,
            stderr=stderr,
            env=dict(os.environ),
        )

    def _communicate(self, proc: subprocess.Popen) -> int:
        out, err = proc.communicate(input=self._input)
        if self._pump_out:
            _write(self.out_stream, out)
        if self._pump_err:
            _write(self.err_stream, err)
        return proc.returncode


def has_redirect(command) -> bool:
    args = command.args
    if len(args) < 2:
        return False
    return args[-2] in (INPUT_REDIRECT, OUTPUT_REDIRECT, OUTPUT_REDIRECT_APPEND)


def split_redirect(command) -> CommandWithPointers:
    """Strip the final redirect from command, opening its target file."""
    args = list(command.args)
    operator, target = args[-2], args[-1]
    in_file = out_file = None

    if operator == INPUT_REDIRECT:
        in_file = open(target, "rb")
    elif operator in (OUTPUT_REDIRECT, OUTPUT_REDIRECT_APPEND):
        mode = "ab" if operator == OUTPUT_REDIRECT_APPEND else "wb"
        out_file = open(target, mode)

    cmdptr = CommandWithPointers(command=Command(command.command, *args[:-2]))
    if in_file is not None:
        cmdptr.in_stream = in_file
        cmdptr.has_custom_stdin = True
    if out_file is not None:
        cmdptr.out_stream = out_file
        cmdptr.has_custom_stdout = True
    return cmdptr


def parse_redirects(command, sh) -> CommandWithPointers:
    """Resolve chained redirects, defaulting to the shell's streams."""
    if not has_redirect(command):
        return CommandWithPointers(
            command=command,
            in_stream=sh.in_stream,
            out_stream=sh.out_stream,
            err_stream=sh.err_stream,
        )

    cmdptr = split_redirect(command)
    chained = parse_redirects(cmdptr.command, sh)

    if cmdptr.has_custom_stdin:
        chained.in_stream = cmdptr.in_stream
        chained.has_custom_stdin = True
    if cmdptr.has_custom_stdout:
        chained.out_stream = cmdptr.out_stream
        chained.has_custom_stdout = True
    return chained