"""Domain models for boxctl.

Value objects are **frozen** dataclasses with no behaviour beyond data
access; enumerations are closed sets.  Nothing here performs I/O or
imports an external package.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Signal(enum.IntEnum):
    """Process signals understood by container stop/kill (Linux numbering)."""

    SIGHUP = 1
    SIGINT = 2
    SIGQUIT = 3
    SIGILL = 4
    SIGTRAP = 5
    SIGABRT = 6
    SIGBUS = 7
    SIGFPE = 8
    SIGKILL = 9
    SIGUSR1 = 10
    SIGSEGV = 11
    SIGUSR2 = 12
    SIGPIPE = 13
    SIGALRM = 14
    SIGTERM = 15
    SIGSTKFLT = 16
    SIGCHLD = 17
    SIGCONT = 18
    SIGSTOP = 19
    SIGTSTP = 20
    SIGTTIN = 21
    SIGTTOU = 22
    SIGURG = 23
    SIGXCPU = 24
    SIGXFSZ = 25
    SIGVTALRM = 26
    SIGPROF = 27
    SIGWINCH = 28
    SIGIO = 29
    SIGPWR = 30
    SIGSYS = 31


class FormatType(enum.Enum):
    """Output formats accepted by ``container list --format``."""

    TABLE = "table"
    JSON = "json"


class PullPolicy(enum.Enum):
    """When to pull the image before creating a container."""

    ALWAYS = "always"
    MISSING = "missing"
    NEVER = "never"


class ProgressMode(enum.Enum):
    """How image-pull progress is shown by ``create`` and ``run``."""

    AUTO = "auto"
    NONE = "none"


class ContainerState(enum.Enum):
    """Lifecycle state reported by the container engine."""

    CREATED = "created"
    RUNNING = "running"
    PAUSED = "paused"
    RESTARTING = "restarting"
    REMOVING = "removing"
    EXITED = "exited"
    DEAD = "dead"
    UNKNOWN = "unknown"

    @classmethod
    def from_status(cls, status: str | None) -> ContainerState:
        """Map an engine status string, tolerating values we do not know."""
        try:
            return cls((status or "").lower())
        except ValueError:
            return cls.UNKNOWN


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Session:
    """An open connection to a container engine."""

    session_id: str
    """Name of the session (the Docker context name)."""

    client: Any
    """Engine client handle owned by the session service."""


@dataclass(frozen=True, slots=True)
class SessionInformation:
    """One row of ``session list``."""

    name: str
    host: str
    current: bool


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PortMapping:
    """A ``--publish`` value split into its parts."""

    container_port: int
    protocol: str = "tcp"
    host_ip: str | None = None
    host_port: int | None = None


@dataclass(frozen=True, slots=True)
class ContainerOptions:
    """Options gathered from the command line for create/run/exec."""

    arguments: tuple[str, ...] = ()
    """Command followed by its forwarded arguments."""

    detach: bool = False
    interactive: bool = False
    tty: bool = False
    name: str | None = None
    env: tuple[str, ...] = ()
    publish: tuple[PortMapping, ...] = ()
    volumes: tuple[str, ...] = ()
    tmpfs: tuple[str, ...] = ()
    dns: tuple[str, ...] = ()
    dns_search: tuple[str, ...] = ()
    user: str | None = None
    entrypoint: str | None = None
    remove: bool = False
    dns_options: tuple[str, ...] = ()
    pull: PullPolicy = PullPolicy.MISSING
    progress: ProgressMode = ProgressMode.AUTO
    cid_file: Path | None = None


@dataclass(frozen=True, slots=True)
class StopContainerOptions:
    """Signal and grace period used by ``container stop``."""

    DEFAULT_TIMEOUT = -1
    """Sentinel meaning "let the engine pick its default grace period"."""

    signal: Signal = Signal.SIGTERM
    timeout: int = DEFAULT_TIMEOUT


@dataclass(frozen=True, slots=True)
class CreateContainerResult:
    """Identifier of a freshly created container."""

    id: str


@dataclass(frozen=True, slots=True)
class ContainerInformation:
    """Summary of one container as shown by ``container list``."""

    id: str
    name: str
    image: str
    state: ContainerState

    @property
    def short_id(self) -> str:
        return self.id[:12]

    def to_dict(self) -> dict[str, str]:
        """Return the JSON-serialisable form used by ``--format json``."""
        return {
            "Id": self.id,
            "Name": self.name,
            "Image": self.image,
            "State": self.state.value,
        }
