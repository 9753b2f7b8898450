"""Tests for resolving command lines against the full command tree.

Each case runs resolution, structural parsing and value validation,
which is everything ``main`` does before executing a command.
"""

from __future__ import annotations

import shlex

import pytest

from boxctl.commands import RootCommand
from boxctl.commands.container import ContainerListCommand
from boxctl.core.arguments import ArgType
from boxctl.core.command import Invocation, resolve
from boxctl.exceptions import (
    ArgumentError,
    ArgumentValueError,
    BoxctlError,
    UnknownCommandError,
)


def _resolve(command_line: str) -> Invocation:
    invocation = resolve(RootCommand(), shlex.split(command_line))
    if not invocation.help_requested:
        invocation.command.validate_arguments(invocation.args)
    return invocation


COMMAND_LINES: list[tuple[str, str, bool]] = [
    # Root
    ("", "boxctl", True),
    ("--help", "boxctl", True),
    ("--version", "boxctl", True),
    # Sessions
    ("session list", "list", True),
    ("session list -v", "list", True),
    ("session list --verbose", "list", True),
    ("session list --verbose --help", "list", True),
    ("session list --notanarg", "list", False),
    ("session list extraarg", "list", False),
    ("session shell session1", "shell", True),
    ("session shell", "shell", False),
    # Containers
    ("container list", "list", True),
    ("container ls", "list", True),
    ("container ps", "list", True),
    ("list", "list", True),
    ("ls", "list", True),
    ("ps", "list", True),
    ("container list --session foo", "list", True),
    ("container list -qa", "list", True),
    ("container list --format json", "list", True),
    ("container list --format table", "list", True),
    ("container list --format badformat", "list", False),
    ("run ubuntu", "run", True),
    ("container run ubuntu bash -c 'echo Hello World'", "run", True),
    ("container run ubuntu", "run", True),
    ("container run -it --name foo ubuntu", "run", True),
    ("container run -d -p 8080:80 -e A=1 -v /src:/dst --rm nginx", "run", True),
    ("container run -p notaport nginx", "run", False),
    ("container run --pull sometimes nginx", "run", False),
    ("stop", "stop", True),
    ("container stop cont1 --signal 9", "stop", True),
    ("container stop cont1 --signal SIGALRM", "stop", True),
    ("container stop cont1 --signal sigkill", "stop", True),
    ("container stop cont1 -s KILL", "stop", True),
    ("container stop cont1 -t 30", "stop", True),
    ("container stop cont1 -t soon", "stop", False),
    ("container stop cont1 --signal 999", "stop", False),
    ("container stop cont1 --signal NOTASIGNAL", "stop", False),
    ("start cont", "start", True),
    ("container start cont", "start", True),
    ("container start -a cont", "start", True),
    ("create ubuntu:latest", "create", True),
    ("container create --name foo ubuntu", "create", True),
    ("container create --name foo --name bar ubuntu", "create", False),
    ("exec cont1 echo Hello", "exec", True),
    ("exec cont1", "exec", False),
    ('container exec -it cont1 sh -c "echo a && echo b"', "exec", True),
    ("kill cont1 --signal sigkill", "kill", True),
    ("container kill cont1 -s KILL", "kill", True),
    ("inspect cont1", "inspect", True),
    ("inspect", "inspect", False),
    ("container inspect cont1", "inspect", True),
    ("delete cont1", "delete", True),
    ("container delete cont1 cont2", "delete", True),
    ("container delete -f cont1", "delete", True),
    # Errors
    ("invalid command", "", False),
    ("CONTAINER list", "list", False),
    ("container LS", "list", False),
    ("container list --FORMAT json", "list", False),
    ("container list -A", "list", False),
]


@pytest.mark.parametrize(("command_line", "expected", "succeeds"), COMMAND_LINES)
def test_command_line(command_line: str, expected: str, succeeds: bool) -> None:
    if not succeeds:
        with pytest.raises(BoxctlError):
            _resolve(command_line)
        return
    assert _resolve(command_line).command.name == expected


# ---------------------------------------------------------------------------
# Tree shape
# ---------------------------------------------------------------------------

class TestTree:
    @pytest.mark.parametrize("line", ["container list", "container ls", "ls", "ps", "list"])
    def test_list_spellings_reach_same_command(self, line: str) -> None:
        assert isinstance(_resolve(line).command, ContainerListCommand)

    def test_full_names(self) -> None:
        assert _resolve("container ls").command.full_name == "boxctl container list"
        assert _resolve("ls").command.full_name == "boxctl list"
        assert _resolve("session shell s1").command.full_name == "boxctl session shell"

    def test_root_children(self) -> None:
        names = [child.name for child in RootCommand().get_commands()]
        assert names[:2] == ["container", "session"]
        assert set(names[2:]) == {
            "create", "delete", "exec", "inspect", "kill", "list", "run", "start", "stop",
        }

    def test_child_names_are_unique_per_level(self) -> None:
        pending = [RootCommand()]
        while pending:
            node = pending.pop()
            children = node.get_commands()
            tokens = [t for child in children for t in (child.name, *child.aliases)]
            assert len(tokens) == len(set(tokens)), node.full_name
            pending.extend(children)

    def test_resolution_is_deterministic(self) -> None:
        first = _resolve("container stop a b -s 9")
        second = _resolve("container stop a b -s 9")
        assert type(first.command) is type(second.command)
        assert first.args.get_all(ArgType.CONTAINER_ID) == second.args.get_all(ArgType.CONTAINER_ID)


# ---------------------------------------------------------------------------
# Failure kinds
# ---------------------------------------------------------------------------

class TestFailures:
    def test_unknown_root_command(self) -> None:
        with pytest.raises(UnknownCommandError) as exc_info:
            _resolve("invalid command")
        assert exc_info.value.token == "invalid"
        assert "container" in exc_info.value.valid_commands

    def test_unknown_group_command(self) -> None:
        with pytest.raises(UnknownCommandError) as exc_info:
            _resolve("session lsit")
        assert exc_info.value.valid_commands == ("list", "shell")

    def test_case_sensitive_command(self) -> None:
        with pytest.raises(UnknownCommandError):
            _resolve("container LS")

    def test_unknown_command_with_help_shows_help(self) -> None:
        invocation = _resolve("container bogus --help")
        assert invocation.help_requested
        assert invocation.command.name == "container"

    def test_unknown_flag_on_group(self) -> None:
        with pytest.raises(ArgumentError, match="--bogus"):
            _resolve("container --bogus")

    def test_help_in_place_of_a_value_shows_help(self) -> None:
        invocation = _resolve("container list --format --help")
        assert invocation.help_requested
        assert invocation.command.full_name == "boxctl container list"

    def test_unknown_progress_mode(self) -> None:
        with pytest.raises(ArgumentValueError, match="fancy"):
            _resolve("run --progress fancy alpine")

    def test_badformat_is_a_value_error(self) -> None:
        with pytest.raises(ArgumentValueError, match="badformat"):
            _resolve("container list --format badformat")

    def test_missing_command_is_structural(self) -> None:
        with pytest.raises(ArgumentError, match="<command>"):
            _resolve("exec cont1")


# ---------------------------------------------------------------------------
# Parsed values through the tree
# ---------------------------------------------------------------------------

class TestParsedValues:
    def test_exec_forwarding(self) -> None:
        args = _resolve('container exec -it cont1 sh -c "echo a && echo b"').args
        assert args.get(ArgType.CONTAINER_ID) == "cont1"
        assert args.get(ArgType.COMMAND) == "sh"
        assert args.get_all(ArgType.FORWARD_ARGS) == ("-c", "echo a && echo b")

    def test_run_forwarding(self) -> None:
        args = _resolve("container run ubuntu bash -c 'echo Hello World'").args
        assert args.get(ArgType.IMAGE_ID) == "ubuntu"
        assert args.get(ArgType.COMMAND) == "bash"
        assert args.get_all(ArgType.FORWARD_ARGS) == ("-c", "echo Hello World")

    def test_env_three_times(self) -> None:
        args = _resolve("run -e A=1 -e B=2 --env C=3 alpine").args
        assert args.get_all(ArgType.ENV) == ("A=1", "B=2", "C=3")

    def test_delete_targets_in_order(self) -> None:
        args = _resolve("container delete c b a").args
        assert args.get_all(ArgType.CONTAINER_ID) == ("c", "b", "a")

    def test_stop_tty_alias_is_time(self) -> None:
        args = _resolve("stop cont1 -t 5").args
        assert args.get(ArgType.TIME) == "5"

    def test_stop_zero_time_is_accepted(self) -> None:
        assert _resolve("stop cont1 --time 0").args.get(ArgType.TIME) == "0"

    def test_stop_negative_time_is_rejected(self) -> None:
        with pytest.raises(ArgumentValueError, match="must not be negative"):
            _resolve("stop cont1 -t -5")

    def test_run_tty_alias_is_tty(self) -> None:
        args = _resolve("run -t alpine").args
        assert args.contains(ArgType.TTY)
