"""``session`` command group and its sub-commands."""

from __future__ import annotations

from boxctl.core.arguments import ArgType, Argument
from boxctl.core.command import Command
from boxctl.core.context import ExecutionContext
from boxctl.tasks.session_tasks import attach_to_session, list_sessions


class SessionListCommand(Command):
    name = "list"

    def get_arguments(self) -> list[Argument]:
        return [
            Argument.create(
                ArgType.VERBOSE,
                help="Show detailed information about the listed sessions",
            ),
        ]

    def short_description(self) -> str:
        return "List sessions."

    def long_description(self) -> str:
        return "Lists the available sessions."

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(list_sessions)


class SessionShellCommand(Command):
    name = "shell"

    def get_arguments(self) -> list[Argument]:
        return [Argument.create(ArgType.SESSION_ID, required=True)]

    def short_description(self) -> str:
        return "Attach to a session."

    def long_description(self) -> str:
        return "Opens an interactive shell bound to a session."

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(attach_to_session)


class SessionCommand(Command):
    name = "session"

    def get_commands(self) -> list[Command]:
        return [
            SessionListCommand(self.full_name),
            SessionShellCommand(self.full_name),
        ]

    def short_description(self) -> str:
        return "Manage sessions."

    def long_description(self) -> str:
        return "Lists sessions and attaches shells to them."
