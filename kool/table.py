"""Rendering rows of values as a boxed text table."""

from __future__ import annotations

import sys


class TableWriter:
    """Collects header and rows, then renders them as a text table."""

    def __init__(self, writer=None) -> None:
        self.writer = writer
        self._headers: list[list] = []
        self._rows: list[list] = []
        self._sort_column: int | None = None

    def append_header(self, *args) -> None:
        self._headers.append(list(args))

    def append_row(self, *args) -> None:
        self._rows.append(list(args))

    def sort_by(self, column: int) -> None:
        """Sort rows ascending by the 1-based column when rendering."""
        self._sort_column = column

    def _sorted_rows(self) -> list[list]:
        if not self._sort_column:
            return list(self._rows)
        index = self._sort_column - 1

        def key(row):
            return str(row[index]) if index < len(row) else ""

        return sorted(self._rows, key=key)

    def render(self) -> str:
        """Write the table to the writer and return its text."""
        headers = [[str(cell).upper() for cell in row] for row in self._headers]
        body = [[str(cell) for cell in row] for row in self._sorted_rows()]
        columns = max((len(row) for row in headers + body), default=0)
        if columns == 0:
            return ""

        widths = [0] * columns
        for row in headers + body:
            for index, cell in enumerate(row):
                widths[index] = max(widths[index], len(cell))

        separator = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

        def line(row):
            cells = row + [""] * (columns - len(row))
            return "|" + "|".join(f" {cell.ljust(width)} " for cell, width in zip(cells, widths)) + "|"

        lines = [separator]
        if headers:
            lines.extend(line(row) for row in headers)
            lines.append(separator)
        if body:
            lines.extend(line(row) for row in body)
            lines.append(separator)

        text = "\n".join(lines)
        writer = self.writer if self.writer is not None else sys.stdout
        writer.write(text + "\n")
        return text