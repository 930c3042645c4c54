"""Running commands and writing output for the command line."""

from __future__ import annotations

import shutil
import signal
import subprocess
import sys
import threading
import os

from kool.builder import Command
from kool.environment import EnvStorage
from kool.redirect import _stdin_target, parse_redirects
from kool.terminal import TerminalChecker

_RESET = "\x1b[0m"


class UserCancelledError(Exception):
    """The user cancelled the operation."""

    def __init__(self, message: str = "user cancelled the operation") -> None:
        super().__init__(message)


class ExitError(Exception):
    """An error carrying the exit code the program should end with."""

    def __init__(self, err, code: int = 1) -> None:
        super().__init__(str(err))
        self.err = err
        self.code = code


class LookPathError(Exception):
    """The executable could not be found in PATH."""

    def __init__(self, message: str = "command not found") -> None:
        super().__init__(message)


class ExecError(Exception):
    """A silently executed command failed; holds its combined output."""

    def __init__(self, message: str, output: str = "", code: int = 1) -> None:
        super().__init__(message)
        self.output = output
        self.code = code


def is_user_cancelled_error(err) -> bool:
    return isinstance(err, UserCancelledError)


class LookupCache:
    """Thread-safe cache of executable lookups and their errors."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.cache: dict | None = None

    def fetch(self, key):
        """Return (exists, cached error)."""
        with self._lock:
            if self.cache is None or key not in self.cache:
                return False, None
            return True, self.cache[key]

    def set(self, key, err) -> None:
        with self._lock:
            if self.cache is None:
                self.cache = {}
            self.cache[key] = err


def _bool(value: bool) -> str:
    return "true" if value else "false"


class Shell:
    """Runs commands and writes messages to its streams."""

    recursive_call = None

    def __init__(self, in_stream=None, out_stream=None, err_stream=None, env=None) -> None:
        self.in_stream = in_stream if in_stream is not None else sys.stdin
        self.out_stream = out_stream if out_stream is not None else sys.stdout
        self.err_stream = err_stream if err_stream is not None else sys.stderr
        self.env = env if env is not None else EnvStorage()
        self.looked_up = LookupCache()

    def is_terminal(self) -> bool:
        return TerminalChecker().is_terminal(self.in_stream, self.out_stream)

    def exec(self, command, *args) -> str:
        """Run command silently and return its trimmed combined output."""
        exe = command.command
        full_args = [*command.args, *args]
        if self.env.is_true("KOOL_VERBOSE"):
            self.err_stream.write(f"$ (exec) {exe} {' '.join(full_args)}\n")

        stdin, data = _stdin_target(self.in_stream)
        result = subprocess.run(
            [exe, *full_args],
            stdin=stdin,
            input=data,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=dict(os.environ),
        )
        output = result.stdout.decode(errors="replace").strip()
        if result.returncode != 0:
            status = f"exit status {result.returncode}"
            message = f"{output} ({status})" if result.stdout else status
            raise ExecError(message, output, result.returncode)
        return output

    def interactive(self, command, *args) -> None:
        """Run command attached to this shell's streams, honouring redirects."""
        verbose = self.env.is_true("KOOL_VERBOSE")
        command = command.copy()
        command.append_args(*args)

        cmdptr = parse_redirects(command, self)
        try:
            if verbose:
                checker = TerminalChecker()
                self.err_stream.write(
                    f"$ (TTY in: {_bool(checker.is_terminal(cmdptr.in_stream))} "
                    f"out: {_bool(checker.is_terminal(cmdptr.out_stream))}) "
                    f"{cmdptr.command.command} {' '.join(cmdptr.command.args)}\n"
                )

            if cmdptr.command.command == "kool" and self.recursive_call is not None:
                if verbose:
                    self.err_stream.write("[recursive call]\n")
                self.recursive_call(
                    list(cmdptr.command.args),
                    cmdptr.in_stream,
                    cmdptr.out_stream,
                    cmdptr.err_stream,
                )
                return

            try:
                self.look_path(cmdptr.command)
            except LookPathError as exc:
                raise LookPathError() from exc

            self._execute(cmdptr)
        finally:
            cmdptr.close()

    def _execute(self, cmdptr) -> None:
        proc = cmdptr.start()
        previous = {}

        def forward(signum, frame):
            try:
                proc.send_signal(signum)
            except ProcessLookupError:
                pass
            except OSError as exc:
                self.error(f"error sending signal to child process {signum} {exc}")

        if threading.current_thread() is threading.main_thread():
            for name in ("SIGINT", "SIGTERM", "SIGHUP"):
                signum = getattr(signal, name, None)
                if signum is not None:
                    previous[signum] = signal.signal(signum, forward)
        try:
            code = cmdptr._communicate(proc)
        finally:
            for signum, handler in previous.items():
                signal.signal(signum, handler)

        if code != 0:
            raise ExitError(f"exit status {code}", code)

    def look_path(self, command) -> None:
        """Raise LookPathError if the executable is not found in PATH."""
        exe = command.command
        if exe.startswith(("./", "/", "../")):
            return

        exists, err = self.looked_up.fetch(exe)
        if exists:
            if err is not None:
                raise err
            return

        err = None if shutil.which(exe) is not None else LookPathError()
        self.looked_up.set(exe, err)
        if err is not None:
            raise err

    def println(self, *args) -> None:
        self.out_stream.write(" ".join(str(a) for a in args) + "\n")

    def printf(self, fmt, *args) -> None:
        self.out_stream.write(fmt % args if args else fmt)

    def _colored(self, code: str, text: str) -> None:
        self.out_stream.write(f"\x1b[{code}m{text}{_RESET}\n")

    def error(self, err) -> None:
        self._colored("41;37", f"error: {err}")

    def warning(self, *args) -> None:
        self._colored("33", "".join(str(a) for a in args))

    def success(self, *args) -> None:
        self._colored("32", "".join(str(a) for a in args))

    def info(self, *args) -> None:
        self._colored("36", "".join(str(a) for a in args))


def run_exec(exe, *args) -> str:
    return Shell().exec(Command(exe, *args))


def run_interactive(exe, *args) -> None:
    Shell().interactive(Command(exe, *args))