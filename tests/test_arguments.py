"""Tests for argument descriptors and the parsed-value map."""

from __future__ import annotations

import pytest

from boxctl.core.arguments import HELP_FLAGS, NO_LIMIT, ArgKind, ArgMap, ArgType, Argument


# ---------------------------------------------------------------------------
# Argument.create
# ---------------------------------------------------------------------------

class TestArgumentCreate:
    def test_value_flag_gets_long_and_short_alias(self) -> None:
        arg = Argument.create(ArgType.SIGNAL)
        assert arg.aliases == ("--signal", "-s")
        assert arg.kind is ArgKind.VALUE
        assert arg.takes_value

    def test_flag_without_short_alias(self) -> None:
        arg = Argument.create(ArgType.REMOVE)
        assert arg.aliases == ("--rm",)
        assert not arg.takes_value

    def test_positional_has_no_aliases(self) -> None:
        arg = Argument.create(ArgType.CONTAINER_ID, required=True)
        assert arg.aliases == ()
        assert arg.is_positional
        assert arg.required
        assert arg.display_name == "<container-id>"

    def test_option_display_name_is_long_alias(self) -> None:
        assert Argument.create(ArgType.ENV).display_name == "--env"

    def test_help_uses_all_help_flags(self) -> None:
        assert Argument.create(ArgType.HELP).aliases == HELP_FLAGS

    def test_forward_is_always_unbounded(self) -> None:
        arg = Argument.create(ArgType.FORWARD_ARGS, max_count=1)
        assert arg.max_count is NO_LIMIT
        assert arg.kind is ArgKind.FORWARD
        assert arg.is_positional

    def test_help_text_override(self) -> None:
        arg = Argument.create(ArgType.SIGNAL, help="Signal to send (default: SIGKILL)")
        assert arg.help == "Signal to send (default: SIGKILL)"

    def test_default_help_text(self) -> None:
        assert Argument.create(ArgType.TTY).help == "Allocate a pseudo-TTY"

    def test_every_type_can_be_created(self) -> None:
        for arg_type in ArgType:
            arg = Argument.create(arg_type)
            assert arg.type is arg_type
            assert arg.name

    def test_allows(self) -> None:
        single = Argument.create(ArgType.NAME)
        assert single.allows(1)
        assert not single.allows(2)
        many = Argument.create(ArgType.ENV, max_count=NO_LIMIT)
        assert many.allows(100)

    def test_argument_is_frozen(self) -> None:
        arg = Argument.create(ArgType.NAME)
        with pytest.raises(AttributeError):
            arg.name = "other"  # type: ignore[misc]


# ---------------------------------------------------------------------------
# ArgMap
# ---------------------------------------------------------------------------

class TestArgMap:
    def test_values_keep_insertion_order(self) -> None:
        args = ArgMap()
        args.add(ArgType.ENV, "A=1")
        args.add(ArgType.ENV, "B=2")
        args.add(ArgType.ENV, "C=3")
        assert args.get_all(ArgType.ENV) == ("A=1", "B=2", "C=3")
        assert args.count(ArgType.ENV) == 3

    def test_get_single_value(self) -> None:
        args = ArgMap()
        args.add(ArgType.NAME, "web")
        assert args.get(ArgType.NAME) == "web"

    def test_get_missing_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            ArgMap().get(ArgType.NAME)

    def test_get_with_several_values_raises_value_error(self) -> None:
        args = ArgMap()
        args.add(ArgType.ENV, "A=1")
        args.add(ArgType.ENV, "B=2")
        with pytest.raises(ValueError, match="get_all"):
            args.get(ArgType.ENV)

    def test_get_all_missing_is_empty(self) -> None:
        assert ArgMap().get_all(ArgType.VOLUME) == ()

    def test_contains(self) -> None:
        args = ArgMap()
        args.add(ArgType.ALL, "--all")
        assert args.contains(ArgType.ALL)
        assert ArgType.ALL in args
        assert not args.contains(ArgType.QUIET)

    def test_frozen_map_rejects_add(self) -> None:
        args = ArgMap()
        args.add(ArgType.ALL, "-a")
        frozen = args.freeze()
        assert frozen is args
        with pytest.raises(RuntimeError):
            args.add(ArgType.QUIET, "-q")

    def test_iteration_and_len(self) -> None:
        args = ArgMap()
        args.add(ArgType.ALL, "-a")
        args.add(ArgType.QUIET, "-q")
        assert list(args) == [ArgType.ALL, ArgType.QUIET]
        assert len(args) == 2
        assert "ALL" in repr(args)
