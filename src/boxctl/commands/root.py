"""Root of the command tree."""

from __future__ import annotations

from boxctl.commands.container import CONTAINER_SUBCOMMANDS, ContainerCommand
from boxctl.commands.session import SessionCommand
from boxctl.core.arguments import ArgType, Argument
from boxctl.core.command import Command
from boxctl.core.context import ExecutionContext
from boxctl.version import __version__


class RootCommand(Command):
    """``boxctl`` itself.

    Container sub-commands are also mounted directly under the root, so
    ``boxctl ls`` is the same command as ``boxctl container ls``.
    """

    name = "boxctl"

    def get_arguments(self) -> list[Argument]:
        return [Argument.create(ArgType.VERSION)]

    def get_commands(self) -> list[Command]:
        commands: list[Command] = [
            ContainerCommand(self.full_name),
            SessionCommand(self.full_name),
        ]
        commands.extend(command(self.full_name) for command in CONTAINER_SUBCOMMANDS)
        return commands

    def short_description(self) -> str:
        return "Container command-line interface."

    def long_description(self) -> str:
        return "Manage containers and sessions from the command line."

    def _execute_internal(self, context: ExecutionContext) -> None:
        if context.args.contains(ArgType.VERSION):
            context.services.renderer.print_message(f"{self.name} {__version__}")
            return
        super()._execute_internal(context)
