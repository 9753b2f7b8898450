"""Session-related tasks."""

from __future__ import annotations

import logging

from boxctl.core.arguments import ArgType
from boxctl.core.context import DataKey, ExecutionContext

logger = logging.getLogger(__name__)

SESSION_COLUMNS: tuple[str, ...] = ("NAME", "HOST", "CURRENT")


def create_session(context: ExecutionContext) -> None:
    """Open the session named by ``--session`` (or the default) and publish it."""
    name = context.args.get(ArgType.SESSION) if context.args.contains(ArgType.SESSION) else None
    session = context.services.sessions.create_session(name)
    logger.debug("Opened session %s", session.session_id)
    context.data.add(DataKey.SESSION, session)


def list_sessions(context: ExecutionContext) -> None:
    sessions = context.services.sessions.list_sessions()
    renderer = context.services.renderer

    if context.args.contains(ArgType.VERBOSE):
        plural = "" if len(sessions) == 1 else "s"
        renderer.print_message(f"Found {len(sessions)} session{plural}")

    renderer.print_table(
        SESSION_COLUMNS,
        [(s.name, s.host, "*" if s.current else "") for s in sessions],
    )


def attach_to_session(context: ExecutionContext) -> None:
    assert context.args.contains(ArgType.SESSION_ID)
    session_id = context.args.get(ArgType.SESSION_ID)
    exit_code = context.services.sessions.attach(session_id)
    logger.debug("Shell for session %s exited with %s", session_id, exit_code)
