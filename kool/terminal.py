"""Terminal detection helpers."""

from __future__ import annotations

import os

STANDARD_TERM_WIDTH = 80


def _fileno(stream):
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


class TerminalChecker:
    """Tells whether streams are attached to a TTY."""

    def is_terminal(self, *args) -> bool:
        for stream in args:
            fd = stream if isinstance(stream, int) else _fileno(stream)
            if fd is None or not os.isatty(fd):
                return False
        return True


def get_terminal_width(tty) -> int:
    """Width of the terminal behind tty; the standard width if it is not a file."""
    fd = tty if isinstance(tty, int) else _fileno(tty)
    if fd is None:
        return STANDARD_TERM_WIDTH
    return os.get_terminal_size(fd).columns