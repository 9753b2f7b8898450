"""Request-scoped execution context shared by the tasks of one command.

The context bundles the parsed :class:`~boxctl.core.arguments.ArgMap`,
the collaborators the tasks call, and :class:`SharedData` — a
write-once store through which earlier tasks hand values to later ones.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from boxctl.core.arguments import ArgMap
from boxctl.core.models import ContainerOptions, Session
from boxctl.core.pipeline import Task, run_tasks
from boxctl.core.protocols import ContainerService, OutputRenderer, SessionService
from boxctl.exceptions import DataContractError


class DataKey(enum.Enum):
    """Closed set of values tasks may publish for later tasks."""

    SESSION = "session"
    CONTAINER_OPTIONS = "container_options"
    CONTAINERS = "containers"


_DATA_TYPES = MappingProxyType(
    {
        DataKey.SESSION: Session,
        DataKey.CONTAINER_OPTIONS: ContainerOptions,
        DataKey.CONTAINERS: list,
    },
)


class SharedData:
    """Write-once store keyed by :class:`DataKey`.

    Each key may be published exactly once and must hold a value of the
    type registered for it.  Reading a key nobody published is a defect
    in the pipeline, reported as :class:`DataContractError`.
    """

    def __init__(self) -> None:
        self._values: dict[DataKey, Any] = {}

    def add(self, key: DataKey, value: Any) -> None:
        if key in self._values:
            raise DataContractError(f"Shared data {key.name} was already published")
        expected = _DATA_TYPES[key]
        if not isinstance(value, expected):
            raise DataContractError(
                f"Shared data {key.name} expects {expected.__name__}, "
                f"got {type(value).__name__}",
            )
        self._values[key] = value

    def contains(self, key: DataKey) -> bool:
        return key in self._values

    def get(self, key: DataKey) -> Any:
        try:
            return self._values[key]
        except KeyError:
            raise DataContractError(
                f"Shared data {key.name} read before any task published it",
            ) from None

    def __len__(self) -> int:
        return len(self._values)


@dataclass(frozen=True, slots=True)
class Services:
    """Collaborators available to tasks."""

    containers: ContainerService
    sessions: SessionService
    renderer: OutputRenderer


@dataclass(slots=True)
class ExecutionContext:
    """Everything one command invocation needs while its tasks run."""

    args: ArgMap
    services: Services
    data: SharedData = field(default_factory=SharedData)

    def run(self, *tasks: Task) -> None:
        """Run *tasks* in order against this context."""
        run_tasks(self, *tasks)
