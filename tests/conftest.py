"""Shared pytest fixtures and configuration for the boxctl test suite.

Guidelines
----------
* No Docker daemon and no network access in any test.
* The Docker SDK must be mocked at the infra boundary.
* Core tests must be pure — no side effects.
* Command and task tests run against the in-memory fakes below.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import pytest

from boxctl.core.command import Command
from boxctl.core.context import Services
from boxctl.core.models import (
    ContainerInformation,
    ContainerOptions,
    ContainerState,
    CreateContainerResult,
    Session,
    SessionInformation,
    Signal,
    StopContainerOptions,
)
from boxctl.core.protocols import OutputCallback, ProgressCallback
from boxctl.exceptions import ContainerNotFoundError, SessionNotFoundError


class FakeContainerService:
    """Records every call; ids listed in ``missing`` raise ``ContainerNotFoundError``."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.missing: set[str] = set()
        self.containers: list[ContainerInformation] = []
        self.output: list[tuple[bytes, bool]] = []
        self.pull_events: list[dict[str, Any]] = []
        self.exit_code: int = 0

    def _check(self, container_id: str) -> None:
        if container_id in self.missing:
            raise ContainerNotFoundError(f"No such container: {container_id}")

    def create(
        self,
        session: Session,
        image: str,
        options: ContainerOptions,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> CreateContainerResult:
        self.calls.append(("create", session.session_id, image, options))
        if progress_callback is not None:
            for event in self.pull_events:
                progress_callback(event)
        return CreateContainerResult(id="c0ffee" * 10 + "abcd")

    def start(
        self,
        session: Session,
        container_id: str,
        *,
        on_output: OutputCallback | None = None,
    ) -> int | None:
        self._check(container_id)
        self.calls.append(("start", container_id, on_output is not None))
        if on_output is None:
            return None
        for data, stderr in self.output:
            on_output(data, stderr)
        return self.exit_code

    def stop(self, session: Session, container_id: str, options: StopContainerOptions) -> None:
        self._check(container_id)
        self.calls.append(("stop", container_id, options))

    def kill(self, session: Session, container_id: str, signal: Signal) -> None:
        self._check(container_id)
        self.calls.append(("kill", container_id, signal))

    def delete(self, session: Session, container_id: str, force: bool) -> None:
        self.calls.append(("delete", container_id, force))
        self._check(container_id)

    def list(self, session: Session) -> list[ContainerInformation]:
        self.calls.append(("list",))
        return list(self.containers)

    def inspect(self, session: Session, container_id: str) -> dict[str, Any]:
        self._check(container_id)
        self.calls.append(("inspect", container_id))
        return {"Id": container_id, "State": {"Status": "running"}}

    def exec(
        self,
        session: Session,
        container_id: str,
        options: ContainerOptions,
        *,
        on_output: OutputCallback | None = None,
    ) -> int | None:
        self._check(container_id)
        self.calls.append(("exec", container_id, options, on_output is not None))
        if options.detach:
            return None
        return self.exit_code


class FakeSessionService:
    def __init__(self) -> None:
        self.opened: list[str | None] = []
        self.attached: list[str] = []
        self.sessions: list[SessionInformation] = [
            SessionInformation(name="default", host="unix:///var/run/docker.sock", current=True),
            SessionInformation(name="remote", host="ssh://build@ci", current=False),
        ]

    def create_session(self, name: str | None = None) -> Session:
        self.opened.append(name)
        if name is not None and name not in {s.name for s in self.sessions}:
            raise SessionNotFoundError(f"Session not found: {name}")
        return Session(session_id=name or "default", client=object())

    def list_sessions(self) -> list[SessionInformation]:
        return list(self.sessions)

    def attach(self, session_id: str) -> int:
        self.attached.append(session_id)
        return 0


class FakeRenderer:
    """Collects everything tasks ask to show."""

    def __init__(self) -> None:
        self.messages: list[str] = []
        self.tables: list[tuple[tuple[str, ...], list[tuple[str, ...]]]] = []
        self.json: list[Any] = []
        self.help: list[Command] = []
        self.stream: list[tuple[bytes, bool]] = []
        self.progress_events: list[dict[str, Any]] = []
        self.progress_enabled: list[bool] = []

    def print_message(self, text: str) -> None:
        self.messages.append(text)

    def print_table(self, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self.tables.append((tuple(columns), [tuple(row) for row in rows]))

    def print_json(self, payload: Any) -> None:
        self.json.append(payload)

    def print_help(self, command: Command) -> None:
        self.help.append(command)

    def write_stream(self, data: bytes, stderr: bool = False) -> None:
        self.stream.append((data, stderr))

    @contextmanager
    def pull_progress(self, enabled: bool = True) -> Iterator[ProgressCallback]:
        self.progress_enabled.append(enabled)
        yield self.progress_events.append


def container(
    container_id: str,
    state: ContainerState = ContainerState.RUNNING,
    name: str | None = None,
    image: str = "alpine:3.20",
) -> ContainerInformation:
    return ContainerInformation(
        id=container_id,
        name=name or f"name-{container_id[:4]}",
        image=image,
        state=state,
    )


@pytest.fixture()
def make_container() -> Callable[..., ContainerInformation]:
    return container


@pytest.fixture()
def container_service() -> FakeContainerService:
    return FakeContainerService()


@pytest.fixture()
def session_service() -> FakeSessionService:
    return FakeSessionService()


@pytest.fixture()
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture()
def services(
    container_service: FakeContainerService,
    session_service: FakeSessionService,
    renderer: FakeRenderer,
) -> Services:
    return Services(containers=container_service, sessions=session_service, renderer=renderer)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``BOXCTL_*`` variables from the developer's shell out of tests."""
    for name in ("BOXCTL_LOG_LEVEL", "BOXCTL_SESSION", "BOXCTL_NO_PROGRESS", "BOXCTL_SHELL"):
        monkeypatch.delenv(name, raising=False)
