"""Console helpers with optional Rich support.

Rich is imported lazily so that ``--help`` and error reporting keep
working, as plain text, when it is not installed.
"""

from __future__ import annotations

import sys
from typing import Any

from boxctl.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` or raise ``EnvironmentError``."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc
    return Console


def get_rich_console(stderr: bool = True) -> Any:
    """Create a Rich console writing to stderr (default) or stdout."""
    console_class = _load_rich_console_class()
    return console_class(stderr=stderr)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with a plain-text fallback.

    Keyword arguments are passed through to ``Console.print``.  The
    fallback honours ``sep`` and ``end`` and ignores the rest.
    """

    def __init__(self, stderr: bool) -> None:
        self._stderr = stderr

    def print(self, *objects: object, **kwargs: Any) -> None:
        try:
            rich_console = get_rich_console(stderr=self._stderr)
        except EnvironmentError:
            print(
                *objects,
                sep=kwargs.get("sep", " "),
                end=kwargs.get("end", "\n"),
                file=sys.stderr if self._stderr else sys.stdout,
            )
            return
        rich_console.print(*objects, **kwargs)


console = _ConsoleProxy(stderr=True)
"""Diagnostics: errors, hints and progress."""

out = _ConsoleProxy(stderr=False)
"""Command results: ids, tables, JSON and help."""
