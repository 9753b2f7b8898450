"""Docker contexts as sessions.

A session is a Docker context: a named daemon endpoint managed with
``docker context``.  Opening a session connects a ``DockerClient`` to
the context's host; attaching starts an interactive shell with
``DOCKER_CONTEXT`` set so that tools run from it talk to that daemon.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Any

from boxctl.core.models import Session, SessionInformation
from boxctl.exceptions import ServiceError, SessionNotFoundError
from boxctl.infra.docker_support import load_docker, translate_errors

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


class DockerSessionService:
    """Concrete :class:`SessionService` over Docker contexts.

    Parameters
    ----------
    default_session:
        Context opened when no name is given.  ``None`` connects using
        the ``DOCKER_*`` environment (``docker.from_env``).
    shell:
        Program started by :meth:`attach`.
    """

    def __init__(self, default_session: str | None = None, shell: str | None = None) -> None:
        self._default_session = default_session
        self._shell = shell or os.environ.get("SHELL") or "/bin/sh"

    def create_session(self, name: str | None = None) -> Session:
        docker = load_docker()
        name = name or self._default_session

        if name is None:
            logger.debug("Connecting to Docker from the environment")
            with translate_errors(DEFAULT_SESSION_ID):
                client = docker.from_env()
            return Session(session_id=DEFAULT_SESSION_ID, client=client)

        context = self._get_context(name)
        logger.debug("Connecting to context %s at %s", name, context.Host)
        with translate_errors(name):
            client = docker.DockerClient(
                base_url=context.Host or None,
                tls=context.TLSConfig or False,
            )
        return Session(session_id=name, client=client)

    def list_sessions(self) -> list[SessionInformation]:
        context_api = self._context_api()
        with translate_errors("contexts"):
            contexts = context_api.contexts()
            current = context_api.get_current_context()
        current_name = current.Name if current is not None else None
        return [
            SessionInformation(
                name=context.Name,
                host=context.Host or "",
                current=context.Name == current_name,
            )
            for context in contexts
        ]

    def attach(self, session_id: str) -> int:
        self._get_context(session_id)
        env = {**os.environ, "DOCKER_CONTEXT": session_id}
        logger.debug("Starting %s for session %s", self._shell, session_id)
        try:
            return subprocess.call([self._shell], env=env)
        except OSError as exc:
            raise ServiceError(
                f"Cannot start shell {self._shell}: {exc.strerror or exc}",
                hint="Set BOXCTL_SHELL to an installed shell.",
            ) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _context_api() -> Any:
        load_docker()
        from docker.context import ContextAPI

        return ContextAPI

    def _get_context(self, name: str) -> Any:
        with translate_errors(name):
            context = self._context_api().get_context(name)
        if context is None:
            raise SessionNotFoundError(
                f"Session not found: {name}",
                hint="List sessions with: boxctl session list",
            )
        return context
