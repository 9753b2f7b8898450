"""``container`` command group and its sub-commands."""

from __future__ import annotations

from boxctl.core.arguments import NO_LIMIT, ArgMap, ArgType, Argument
from boxctl.core.command import Command
from boxctl.core.context import ExecutionContext
from boxctl.core.validation import parse_format, parse_integer
from boxctl.exceptions import ArgumentValueError
from boxctl.tasks.container_tasks import (
    create_container,
    delete_containers,
    exec_container,
    get_containers,
    inspect_containers,
    kill_containers,
    list_containers,
    run_container,
    set_container_options_from_args,
    start_container,
    stop_containers,
)
from boxctl.tasks.session_tasks import create_session


def _create_arguments() -> list[Argument]:
    """Arguments shared by ``create`` and ``run``."""
    return [
        Argument.create(ArgType.IMAGE_ID, required=True),
        Argument.create(ArgType.COMMAND),
        Argument.create(ArgType.FORWARD_ARGS),
        Argument.create(ArgType.CID_FILE),
        Argument.create(ArgType.DNS, max_count=NO_LIMIT),
        Argument.create(ArgType.DNS_OPTION, max_count=NO_LIMIT),
        Argument.create(ArgType.DNS_SEARCH, max_count=NO_LIMIT),
        Argument.create(ArgType.ENTRYPOINT),
        Argument.create(ArgType.ENV, max_count=NO_LIMIT),
        Argument.create(ArgType.ENV_FILE),
        Argument.create(ArgType.INTERACTIVE),
        Argument.create(ArgType.NAME),
        Argument.create(ArgType.PROGRESS),
        Argument.create(ArgType.PUBLISH, max_count=NO_LIMIT),
        Argument.create(ArgType.PULL),
        Argument.create(ArgType.REMOVE),
        Argument.create(ArgType.SESSION),
        Argument.create(ArgType.TMPFS, max_count=NO_LIMIT),
        Argument.create(ArgType.TTY),
        Argument.create(ArgType.USER),
        Argument.create(ArgType.VOLUME, max_count=NO_LIMIT),
    ]


class ContainerCreateCommand(Command):
    name = "create"

    def get_arguments(self) -> list[Argument]:
        return _create_arguments()

    def short_description(self) -> str:
        return "Create a container."

    def long_description(self) -> str:
        return "Creates a container from an image without starting it and prints its ID."

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(create_session, set_container_options_from_args, create_container)


class ContainerDeleteCommand(Command):
    name = "delete"

    def get_arguments(self) -> list[Argument]:
        return [
            Argument.create(ArgType.CONTAINER_ID, max_count=NO_LIMIT),
            Argument.create(ArgType.FORCE),
            Argument.create(ArgType.SESSION),
        ]

    def short_description(self) -> str:
        return "Delete containers."

    def long_description(self) -> str:
        return "Deletes containers."

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(create_session, delete_containers)


class ContainerExecCommand(Command):
    name = "exec"

    def get_arguments(self) -> list[Argument]:
        return [
            Argument.create(ArgType.CONTAINER_ID, required=True),
            Argument.create(ArgType.COMMAND, required=True),
            Argument.create(
                ArgType.FORWARD_ARGS,
                help="Arguments to pass to the command being executed inside the container",
            ),
            Argument.create(ArgType.DETACH, help="Run the command in the background"),
            Argument.create(ArgType.ENV, max_count=NO_LIMIT),
            Argument.create(ArgType.ENV_FILE),
            Argument.create(ArgType.INTERACTIVE),
            Argument.create(ArgType.SESSION),
            Argument.create(ArgType.TTY),
            Argument.create(ArgType.USER),
        ]

    def short_description(self) -> str:
        return "Execute a command in a running container."

    def long_description(self) -> str:
        return "Executes a command in a running container."

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(create_session, set_container_options_from_args, exec_container)


class ContainerInspectCommand(Command):
    name = "inspect"

    def get_arguments(self) -> list[Argument]:
        return [
            Argument.create(ArgType.CONTAINER_ID, required=True, max_count=NO_LIMIT),
            Argument.create(ArgType.SESSION),
        ]

    def short_description(self) -> str:
        return "Inspect a container."

    def long_description(self) -> str:
        return "Displays detailed information about one or more containers as JSON."

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(create_session, inspect_containers)


class ContainerKillCommand(Command):
    name = "kill"

    def get_arguments(self) -> list[Argument]:
        return [
            Argument.create(ArgType.CONTAINER_ID, max_count=NO_LIMIT),
            Argument.create(ArgType.SESSION),
            Argument.create(ArgType.SIGNAL, help="Signal to send (default: SIGKILL)"),
        ]

    def short_description(self) -> str:
        return "Kill containers."

    def long_description(self) -> str:
        return "Kills containers."

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(create_session, kill_containers)


class ContainerListCommand(Command):
    name = "list"
    aliases = ("ls", "ps")

    def get_arguments(self) -> list[Argument]:
        return [
            Argument.create(ArgType.ALL),
            Argument.create(ArgType.FORMAT),
            Argument.create(ArgType.QUIET),
            Argument.create(ArgType.SESSION),
        ]

    def short_description(self) -> str:
        return "List containers."

    def long_description(self) -> str:
        return (
            "Lists containers. By default, only running containers are shown; "
            "use --all to include all containers."
        )

    def _validate_arguments_internal(self, args: ArgMap) -> None:
        if args.contains(ArgType.FORMAT):
            parse_format(args.get(ArgType.FORMAT))

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(create_session, get_containers, list_containers)


class ContainerRunCommand(Command):
    name = "run"

    def get_arguments(self) -> list[Argument]:
        arguments = _create_arguments()
        arguments.append(Argument.create(ArgType.DETACH))
        return arguments

    def short_description(self) -> str:
        return "Run a container."

    def long_description(self) -> str:
        return (
            "Creates and starts a container. By default the command stays attached "
            "to the container's output; use --detach to run it in the background."
        )

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(create_session, set_container_options_from_args, run_container)


class ContainerStartCommand(Command):
    name = "start"

    def get_arguments(self) -> list[Argument]:
        return [
            Argument.create(ArgType.CONTAINER_ID, required=True),
            Argument.create(ArgType.ATTACH),
            Argument.create(ArgType.SESSION),
        ]

    def short_description(self) -> str:
        return "Start a container."

    def long_description(self) -> str:
        return (
            "Starts a container. Use --attach to stay attached to the container's "
            "stdout and stderr streams."
        )

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(create_session, start_container)


class ContainerStopCommand(Command):
    name = "stop"

    def get_arguments(self) -> list[Argument]:
        return [
            Argument.create(ArgType.CONTAINER_ID, max_count=NO_LIMIT),
            Argument.create(ArgType.SESSION),
            Argument.create(ArgType.SIGNAL, help="Signal to send (default: SIGTERM)"),
            Argument.create(ArgType.TIME),
        ]

    def short_description(self) -> str:
        return "Stop containers."

    def long_description(self) -> str:
        return "Stops containers."

    def _validate_arguments_internal(self, args: ArgMap) -> None:
        if args.contains(ArgType.TIME):
            value = args.get(ArgType.TIME)
            if parse_integer(value, "time") < 0:
                raise ArgumentValueError(
                    "time",
                    value,
                    reason="must not be negative",
                    hint="Use 0 to kill at once, or omit --time for the engine default.",
                )

    def _execute_internal(self, context: ExecutionContext) -> None:
        context.run(create_session, stop_containers)


CONTAINER_SUBCOMMANDS: tuple[type[Command], ...] = (
    ContainerCreateCommand,
    ContainerDeleteCommand,
    ContainerExecCommand,
    ContainerInspectCommand,
    ContainerKillCommand,
    ContainerListCommand,
    ContainerRunCommand,
    ContainerStartCommand,
    ContainerStopCommand,
)


class ContainerCommand(Command):
    name = "container"

    def get_commands(self) -> list[Command]:
        return [command(self.full_name) for command in CONTAINER_SUBCOMMANDS]

    def short_description(self) -> str:
        return "Manage containers."

    def long_description(self) -> str:
        return "Creates, runs, inspects and removes containers."
