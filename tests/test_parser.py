"""Tests for structural argument parsing."""

from __future__ import annotations

import pytest

from boxctl.core.arguments import NO_LIMIT, ArgType, Argument
from boxctl.core.parser import parse_arguments
from boxctl.exceptions import ArgumentError


def _exec_arguments() -> list[Argument]:
    return [
        Argument.create(ArgType.CONTAINER_ID, required=True),
        Argument.create(ArgType.COMMAND, required=True),
        Argument.create(ArgType.FORWARD_ARGS),
        Argument.create(ArgType.DETACH),
        Argument.create(ArgType.ENV, max_count=NO_LIMIT),
        Argument.create(ArgType.INTERACTIVE),
        Argument.create(ArgType.TTY),
        Argument.create(ArgType.USER),
    ]


def _list_arguments() -> list[Argument]:
    return [
        Argument.create(ArgType.ALL),
        Argument.create(ArgType.FORMAT),
        Argument.create(ArgType.QUIET),
        Argument.create(ArgType.SESSION),
    ]


def _stop_arguments() -> list[Argument]:
    return [
        Argument.create(ArgType.CONTAINER_ID, max_count=NO_LIMIT),
        Argument.create(ArgType.SIGNAL),
        Argument.create(ArgType.TIME),
    ]


# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------

class TestFlags:
    def test_long_flag(self) -> None:
        result = parse_arguments(_list_arguments(), ["--all"])
        assert result.args.contains(ArgType.ALL)
        assert not result.help_requested

    def test_short_flag(self) -> None:
        assert parse_arguments(_list_arguments(), ["-q"]).args.contains(ArgType.QUIET)

    def test_bundled_short_flags(self) -> None:
        args = parse_arguments(_list_arguments(), ["-qa"]).args
        assert args.contains(ArgType.QUIET)
        assert args.contains(ArgType.ALL)

    def test_value_with_space(self) -> None:
        args = parse_arguments(_list_arguments(), ["--format", "json"]).args
        assert args.get(ArgType.FORMAT) == "json"

    def test_value_with_equals(self) -> None:
        args = parse_arguments(_list_arguments(), ["--format=json"]).args
        assert args.get(ArgType.FORMAT) == "json"

    def test_value_with_equals_keeps_later_equals(self) -> None:
        args = parse_arguments(_exec_arguments(), ["--env=A=b=c", "c1", "sh"]).args
        assert args.get_all(ArgType.ENV) == ("A=b=c",)

    def test_attached_short_value(self) -> None:
        args = parse_arguments(_stop_arguments(), ["-sKILL"]).args
        assert args.get(ArgType.SIGNAL) == "KILL"

    def test_short_value_with_equals(self) -> None:
        args = parse_arguments(_stop_arguments(), ["-s=KILL"]).args
        assert args.get(ArgType.SIGNAL) == "KILL"

    def test_short_value_takes_next_token_even_if_dashed(self) -> None:
        args = parse_arguments(_stop_arguments(), ["-t", "-1"]).args
        assert args.get(ArgType.TIME) == "-1"

    def test_repeated_multi_value_argument_keeps_order(self) -> None:
        args = parse_arguments(
            _exec_arguments(),
            ["-e", "A=1", "--env", "B=2", "-eC=3", "c1", "sh"],
        ).args
        assert args.get_all(ArgType.ENV) == ("A=1", "B=2", "C=3")

    def test_flag_is_case_sensitive(self) -> None:
        with pytest.raises(ArgumentError, match="Unrecognized argument: --ALL"):
            parse_arguments(_list_arguments(), ["--ALL"])

    def test_short_alias_is_case_sensitive(self) -> None:
        with pytest.raises(ArgumentError, match="Unrecognized argument: -A"):
            parse_arguments(_list_arguments(), ["-A"])

    def test_unknown_char_in_bundle(self) -> None:
        with pytest.raises(ArgumentError, match=r"-x \(in -qx\)"):
            parse_arguments(_list_arguments(), ["-qx"])


# ---------------------------------------------------------------------------
# Structural errors
# ---------------------------------------------------------------------------

class TestStructuralErrors:
    def test_missing_value(self) -> None:
        with pytest.raises(ArgumentError, match="Argument --format requires a value"):
            parse_arguments(_list_arguments(), ["--format"])

    def test_missing_short_value(self) -> None:
        with pytest.raises(ArgumentError, match="Argument -s requires a value"):
            parse_arguments(_stop_arguments(), ["-s"])

    def test_flag_given_a_value(self) -> None:
        with pytest.raises(ArgumentError, match="does not take a value"):
            parse_arguments(_list_arguments(), ["--all=yes"])

    def test_single_valued_argument_twice(self) -> None:
        with pytest.raises(ArgumentError, match="at most 1 time"):
            parse_arguments(_list_arguments(), ["--format", "json", "--format", "table"])

    def test_single_flag_twice(self) -> None:
        with pytest.raises(ArgumentError, match="at most 1 time"):
            parse_arguments(_list_arguments(), ["-a", "--all"])

    def test_unexpected_positional(self) -> None:
        with pytest.raises(
            ArgumentError,
            match="Found a positional argument when none was expected: extra",
        ):
            parse_arguments(_list_arguments(), ["extra"])

    def test_missing_required_positional(self) -> None:
        with pytest.raises(ArgumentError, match="Required argument not provided: <command>"):
            parse_arguments(_exec_arguments(), ["cont1"])

    def test_first_error_is_reported(self) -> None:
        with pytest.raises(ArgumentError, match="--bogus"):
            parse_arguments(_list_arguments(), ["--bogus", "extra"])

    def test_errors_carry_help_hint(self) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            parse_arguments(_list_arguments(), ["--bogus"])
        assert exc_info.value.hint == "Use --help to see the accepted arguments."

    def test_duplicate_alias_in_declaration(self) -> None:
        with pytest.raises(ValueError, match="Duplicate argument alias: -t"):
            parse_arguments(
                [Argument.create(ArgType.TTY), Argument.create(ArgType.TIME)],
                [],
            )


# ---------------------------------------------------------------------------
# Positionals and forwarding
# ---------------------------------------------------------------------------

class TestPositionals:
    def test_exec_with_command(self) -> None:
        args = parse_arguments(_exec_arguments(), ["cont1", "echo"]).args
        assert args.get(ArgType.CONTAINER_ID) == "cont1"
        assert args.get(ArgType.COMMAND) == "echo"
        assert args.get_all(ArgType.FORWARD_ARGS) == ()

    def test_tokens_after_command_are_forwarded_verbatim(self) -> None:
        args = parse_arguments(
            _exec_arguments(),
            ["-it", "cont1", "sh", "-c", "echo hi", "--help"],
        )
        assert not args.help_requested
        assert args.args.contains(ArgType.INTERACTIVE)
        assert args.args.contains(ArgType.TTY)
        assert args.args.get_all(ArgType.FORWARD_ARGS) == ("-c", "echo hi", "--help")

    def test_flags_before_command_are_parsed(self) -> None:
        args = parse_arguments(_exec_arguments(), ["cont1", "-u", "root", "ls"]).args
        assert args.get(ArgType.USER) == "root"
        assert args.get(ArgType.COMMAND) == "ls"

    def test_unbounded_positional_collects_everything(self) -> None:
        args = parse_arguments(_stop_arguments(), ["a", "b", "-t", "5", "c"]).args
        assert args.get_all(ArgType.CONTAINER_ID) == ("a", "b", "c")
        assert args.get(ArgType.TIME) == "5"

    def test_no_positionals_for_unbounded_optional(self) -> None:
        args = parse_arguments(_stop_arguments(), []).args
        assert args.get_all(ArgType.CONTAINER_ID) == ()

    def test_double_dash_ends_options(self) -> None:
        args = parse_arguments(_stop_arguments(), ["--", "-weird-name"]).args
        assert args.get_all(ArgType.CONTAINER_ID) == ("-weird-name",)

    def test_lone_dash_is_positional(self) -> None:
        args = parse_arguments(_stop_arguments(), ["-"]).args
        assert args.get_all(ArgType.CONTAINER_ID) == ("-",)


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------

class TestHelp:
    @pytest.mark.parametrize("flag", ["--help", "-h", "-?"])
    def test_help_flags(self, flag: str) -> None:
        assert parse_arguments(_list_arguments(), [flag]).help_requested

    def test_help_wins_over_errors(self) -> None:
        result = parse_arguments(_list_arguments(), ["--bogus", "extra", "--help"])
        assert result.help_requested

    def test_help_wins_over_missing_required(self) -> None:
        assert parse_arguments(_exec_arguments(), ["-h"]).help_requested

    def test_help_inside_bundle(self) -> None:
        assert parse_arguments(_list_arguments(), ["-qh"]).help_requested

    @pytest.mark.parametrize("flag", ["--help", "-h", "-?"])
    def test_help_is_not_taken_as_a_value(self, flag: str) -> None:
        result = parse_arguments(_list_arguments(), ["--format", flag])
        assert result.help_requested
        assert not result.args.contains(ArgType.FORMAT)

    def test_help_after_short_value_flag(self) -> None:
        result = parse_arguments(_stop_arguments(), ["c1", "-s", "-h"])
        assert result.help_requested
        assert not result.args.contains(ArgType.SIGNAL)

    def test_help_after_double_dash_is_positional(self) -> None:
        args = parse_arguments(_stop_arguments(), ["--", "--help"])
        assert not args.help_requested
        assert args.args.get_all(ArgType.CONTAINER_ID) == ("--help",)

    def test_result_map_is_frozen(self) -> None:
        args = parse_arguments(_list_arguments(), ["-a"]).args
        with pytest.raises(RuntimeError):
            args.add(ArgType.QUIET, "-q")
