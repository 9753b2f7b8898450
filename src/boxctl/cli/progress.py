"""Rich progress display driven by image-pull events.

The container service forwards the raw events of a ``docker pull``
stream through its ``progress_callback``.  :class:`RichPullProgress`
turns them into one progress bar per image layer.

An event is a dict such as::

    {"status": "Downloading", "id": "a1b2c3", "progressDetail": {"current": 512, "total": 2048}}

Events without an ``id`` (``"Pulling from library/alpine"``,
``"Digest: ..."``) are status lines and are ignored.
"""

from __future__ import annotations

from typing import Any

from boxctl.cli.console import get_rich_console
from boxctl.exceptions import EnvironmentError

_DONE_STATUSES = frozenset({"Pull complete", "Already exists", "Download complete"})


class RichPullProgress:
    """Callable pull-event adapter for Rich.

    Usage::

        with RichPullProgress() as progress:
            service.create(session, image, options, progress_callback=progress)
    """

    def __init__(self) -> None:
        try:
            from rich.progress import (
                BarColumn,
                DownloadColumn,
                Progress,
                SpinnerColumn,
                TextColumn,
            )
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._progress: Any = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            console=get_rich_console(),
            transient=True,
        )
        self._tasks: dict[str, Any] = {}
        self._started: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> RichPullProgress:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if not self._started:
            self._progress.start()
            self._started = True

    def stop(self) -> None:
        """Stop the display (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False

    # ------------------------------------------------------------------
    # Callback
    # ------------------------------------------------------------------

    def __call__(self, event: dict[str, Any]) -> None:
        if not self._started:
            return

        layer = event.get("id")
        if not layer:
            return

        status: str = event.get("status", "")
        detail = event.get("progressDetail") or {}
        total = _safe_int(detail.get("total"))
        current = _safe_int(detail.get("current"))

        task_id = self._tasks.get(layer)
        if task_id is None:
            task_id = self._progress.add_task(f"{layer}: {status}", total=total)
            self._tasks[layer] = task_id

        if status in _DONE_STATUSES:
            task = self._progress.tasks[task_id]
            self._progress.update(
                task_id,
                description=f"{layer}: {status}",
                total=task.total or 1,
                completed=task.total or 1,
            )
            return

        self._progress.update(task_id, description=f"{layer}: {status}")
        if total is not None:
            self._progress.update(task_id, total=total)
        if current is not None:
            self._progress.update(task_id, completed=current)


def _safe_int(value: object) -> int | None:
    """Convert *value* to ``int`` or return ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float, str)):
            return int(value)
        return None
    except (TypeError, ValueError):
        return None
