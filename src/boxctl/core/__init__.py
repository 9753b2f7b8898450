"""Core layer — the dispatch-and-execution engine.

Rules
-----
* No ``print()`` calls and no terminal rendering.
* No filesystem or network I/O.
* No imports from ``cli``, ``infra``, ``commands`` or ``tasks``.
* Collaborators are reached only through :mod:`boxctl.core.protocols`.
"""

from boxctl.core.arguments import NO_LIMIT, ArgKind, ArgMap, ArgType, Argument
from boxctl.core.command import Command, Invocation, resolve
from boxctl.core.context import DataKey, ExecutionContext, Services, SharedData
from boxctl.core.parser import ParseResult, parse_arguments
from boxctl.core.pipeline import Task, run_tasks

__all__: list[str] = [
    "NO_LIMIT",
    "ArgKind",
    "ArgMap",
    "ArgType",
    "Argument",
    "Command",
    "DataKey",
    "ExecutionContext",
    "Invocation",
    "ParseResult",
    "Services",
    "SharedData",
    "Task",
    "parse_arguments",
    "resolve",
    "run_tasks",
]
