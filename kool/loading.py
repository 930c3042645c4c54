"""A small text spinner shown while long tasks run."""

from __future__ import annotations

import itertools
import sys
import threading

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_LINE = "\r\x1b[K"

FAST_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
SLOW_FRAMES = (
    "⠁", "⠁", "⠉", "⠙", "⠚", "⠒", "⠂", "⠂", "⠒", "⠲", "⠴", "⠤", "⠄", "⠄", "⠤",
    "⠠", "⠠", "⠤", "⠦", "⠖", "⠒", "⠐", "⠐", "⠒", "⠓", "⠋", "⠉", "⠈", "⠈",
)
DEFAULT_INTERVAL = 0.1


class Spinner:
    """Animates frames next to a message until stopped, then prints a final message."""

    def __init__(self, frames, interval, loading_msg, loaded_msg, writer=None) -> None:
        self.frames = list(frames)
        if not self.frames:
            raise ValueError("spinner needs at least one frame")
        self.interval = interval
        self.prefix = " "
        self.suffix = " " + loading_msg
        self.final_msg = loaded_msg + "\n"
        self.writer = writer if writer is not None else sys.stdout
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def active(self) -> bool:
        return self._thread is not None

    def _write(self, text: str) -> None:
        self.writer.write(text)
        flush = getattr(self.writer, "flush", None)
        if flush is not None:
            flush()

    def _spin(self) -> None:
        for frame in itertools.cycle(self.frames):
            self._write(f"{CLEAR_LINE}{self.prefix}{frame}{self.suffix}")
            if self._stop_event.wait(self.interval):
                break

    def start(self) -> None:
        if self.active:
            return
        self._stop_event.clear()
        self._write(HIDE_CURSOR)
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if not self.active:
            return
        self._stop_event.set()
        self._thread.join()
        self._thread = None
        self._write(CLEAR_LINE + self.final_msg + SHOW_CURSOR)

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()


def make_fast_loading(loading_msg, loaded_msg, writer=None) -> Spinner:
    spinner = Spinner(FAST_FRAMES, DEFAULT_INTERVAL, loading_msg, loaded_msg, writer)
    spinner.start()
    return spinner


def make_slow_loading(loading_msg, loaded_msg, writer=None) -> Spinner:
    spinner = Spinner(SLOW_FRAMES, DEFAULT_INTERVAL, loading_msg, loaded_msg, writer)
    spinner.start()
    return spinner