"""Task pipeline: run the steps of a command in order.

A task is any callable taking the :class:`~boxctl.core.context.ExecutionContext`.
The first task that raises stops the pipeline; its exception reaches
the CLI error boundary unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boxctl.core.context import ExecutionContext

logger = logging.getLogger(__name__)

Task = Callable[["ExecutionContext"], None]


def run_tasks(context: ExecutionContext, *tasks: Task) -> None:
    """Run *tasks* against *context*, stopping at the first failure."""
    for task in tasks:
        name = getattr(task, "__name__", repr(task))
        logger.debug("Running task %s", name)
        try:
            task(context)
        except Exception:
            logger.debug("Task %s failed; skipping remaining tasks", name)
            raise
