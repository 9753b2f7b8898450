"""Terminal implementation of :class:`~boxctl.core.protocols.OutputRenderer`.

Results go to stdout, diagnostics and pull progress to stderr.  Rich is
used when it is installed; every method has a plain-text fallback.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from boxctl.cli.console import out
from boxctl.cli.help import print_help
from boxctl.core.command import Command
from boxctl.core.protocols import ProgressCallback


def _ignore_progress(_event: dict[str, Any]) -> None:
    return None


def _print_plain_table(columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    widths = [len(column) for column in columns]
    for row in rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))
    print("  ".join(c.ljust(w) for c, w in zip(columns, widths)).rstrip())
    for row in rows:
        print("  ".join(c.ljust(w) for c, w in zip(row, widths)).rstrip())


class ConsoleRenderer:
    """Render task output on the terminal.

    Parameters
    ----------
    show_progress:
        When ``False``, image pulls run without a progress display.
    """

    def __init__(self, show_progress: bool = True) -> None:
        self._show_progress = show_progress

    def print_message(self, text: str) -> None:
        out.print(text, markup=False, highlight=False, soft_wrap=True)

    def print_table(self, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        try:
            from rich import box
            from rich.table import Table
        except ModuleNotFoundError:
            _print_plain_table(columns, rows)
            return

        table = Table(
            box=box.SIMPLE_HEAD,
            show_header=True,
            header_style="bold cyan",
            show_edge=False,
            pad_edge=False,
        )
        for column in columns:
            table.add_column(column, no_wrap=True)
        for row in rows:
            table.add_row(*row)
        out.print(table)

    def print_json(self, payload: Any) -> None:
        text = json.dumps(payload, indent=4, default=str)
        out.print(text, markup=False, highlight=False, soft_wrap=True)

    def print_help(self, command: Command) -> None:
        print_help(command)

    def write_stream(self, data: bytes, stderr: bool = False) -> None:
        stream = sys.stderr if stderr else sys.stdout
        buffer = getattr(stream, "buffer", None)
        if buffer is None:
            stream.write(data.decode("utf-8", errors="replace"))
            stream.flush()
            return
        stream.flush()
        buffer.write(data)
        buffer.flush()

    @contextmanager
    def pull_progress(self, enabled: bool = True) -> Iterator[ProgressCallback]:
        """Yield a pull-progress callback, a Rich bar when enabled.

        Progress is drawn only when both *enabled* and the renderer's
        ``show_progress`` allow it.
        """
        if not (enabled and self._show_progress):
            yield _ignore_progress
            return

        from boxctl.cli.progress import RichPullProgress
        from boxctl.exceptions import EnvironmentError

        try:
            progress = RichPullProgress()
        except EnvironmentError:
            yield _ignore_progress
            return

        with progress:
            yield progress
