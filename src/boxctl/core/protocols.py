"""Protocols (interfaces) for the external collaborators.

Tasks talk to the container engine, the session manager and the
terminal only through these contracts.  Concrete implementations live
in :mod:`boxctl.infra` (Docker) and :mod:`boxctl.cli.render` (rich);
tests substitute in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, Protocol

from boxctl.core.models import (
    ContainerInformation,
    ContainerOptions,
    CreateContainerResult,
    Session,
    SessionInformation,
    Signal,
    StopContainerOptions,
)

if TYPE_CHECKING:
    from boxctl.core.command import Command

ProgressCallback = Callable[[dict[str, Any]], None]
"""Receives one engine progress event (e.g. an image-pull layer update)."""

OutputCallback = Callable[[bytes, bool], None]
"""Receives a chunk of process output and whether it came from stderr."""


class ContainerService(Protocol):
    """Contract for container engine backends.

    Implementations must map all backend-specific exceptions to
    :class:`~boxctl.exceptions.ServiceError` subclasses.
    """

    def create(
        self,
        session: Session,
        image: str,
        options: ContainerOptions,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> CreateContainerResult:
        """Pull *image* according to ``options.pull`` and create a container."""
        ...  # pragma: no cover

    def start(
        self,
        session: Session,
        container_id: str,
        *,
        on_output: OutputCallback | None = None,
    ) -> int | None:
        """Start a container.

        With *on_output* the call stays attached, relays the container's
        output and returns its exit code once it stops.
        """
        ...  # pragma: no cover

    def stop(self, session: Session, container_id: str, options: StopContainerOptions) -> None:
        ...  # pragma: no cover

    def kill(self, session: Session, container_id: str, signal: Signal) -> None:
        ...  # pragma: no cover

    def delete(self, session: Session, container_id: str, force: bool) -> None:
        ...  # pragma: no cover

    def list(self, session: Session) -> list[ContainerInformation]:
        ...  # pragma: no cover

    def inspect(self, session: Session, container_id: str) -> dict[str, Any]:
        ...  # pragma: no cover

    def exec(
        self,
        session: Session,
        container_id: str,
        options: ContainerOptions,
        *,
        on_output: OutputCallback | None = None,
    ) -> int | None:
        """Run ``options.arguments`` inside a running container.

        Returns the process exit code, or ``None`` when detached.
        """
        ...  # pragma: no cover


class SessionService(Protocol):
    """Contract for session (engine connection) management."""

    def create_session(self, name: str | None = None) -> Session:
        """Open the session called *name*, or the default session."""
        ...  # pragma: no cover

    def list_sessions(self) -> list[SessionInformation]:
        ...  # pragma: no cover

    def attach(self, session_id: str) -> int:
        """Run an interactive shell bound to *session_id*; return its exit code."""
        ...  # pragma: no cover


class OutputRenderer(Protocol):
    """Contract for everything a task shows to the user."""

    def print_message(self, text: str) -> None:
        ...  # pragma: no cover

    def print_table(self, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        ...  # pragma: no cover

    def print_json(self, payload: Any) -> None:
        ...  # pragma: no cover

    def print_help(self, command: Command) -> None:
        ...  # pragma: no cover

    def write_stream(self, data: bytes, stderr: bool = False) -> None:
        """Relay raw process output; matches :data:`OutputCallback`."""
        ...  # pragma: no cover

    def pull_progress(self, enabled: bool = True) -> AbstractContextManager[ProgressCallback]:
        """Return a context manager yielding an image-pull progress callback.

        With *enabled* false the callback discards every event.
        """
        ...  # pragma: no cover
