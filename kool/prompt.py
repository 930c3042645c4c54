"""Interactive prompts: picking one of several options or typing a value."""

from __future__ import annotations

import sys

from kool.shell import UserCancelledError


class _Prompt:
    def __init__(self, in_stream=None, out_stream=None) -> None:
        self.in_stream = in_stream
        self.out_stream = out_stream

    def _in(self):
        return self.in_stream if self.in_stream is not None else sys.stdin

    def _out(self):
        return self.out_stream if self.out_stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        out = self._out()
        out.write(text)
        flush = getattr(out, "flush", None)
        if flush is not None:
            flush()

    def _read_line(self) -> str:
        try:
            line = self._in().readline()
        except KeyboardInterrupt:
            raise UserCancelledError() from None
        if not line:
            raise UserCancelledError()
        return line.strip()


class PromptSelect(_Prompt):
    """Asks the user to pick one of a list of options."""

    def __init__(self, in_stream=None, out_stream=None) -> None:
        super().__init__(in_stream, out_stream)

    def ask(self, question: str, options) -> str:
        options = list(options)
        if not options:
            raise ValueError("please provide options to select from")

        self._write(f"? {question}\n")
        for number, option in enumerate(options, 1):
            self._write(f"  {number}) {option}\n")

        while True:
            self._write(f"Choose [1-{len(options)}]: ")
            answer = self._read_line()
            if not answer:
                return options[0]
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return options[int(answer) - 1]
            if answer in options:
                return answer
            self._write(f"invalid option: {answer}\n")

    def confirm(self, question: str, *args) -> bool:
        """Ask a Yes/No question; question is %-formatted with args if given."""
        if args:
            question = question % args
        return self.ask(question, ["Yes", "No"]) == "Yes"


class PromptInput(_Prompt):
    """Asks the user to type a value."""

    def __init__(self, in_stream=None, out_stream=None) -> None:
        super().__init__(in_stream, out_stream)

    def input(self, question: str, default: str = "") -> str:
        suffix = f" ({default})" if default else ""
        self._write(f"? {question}{suffix} ")
        answer = self._read_line()
        return answer if answer else default