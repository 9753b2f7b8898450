"""Structural parsing of the tokens left over after command resolution.

Tokens are classified as flags (``--name``, ``--name=value``, ``-n``,
bundled ``-it``) or positional values.  Positional values fill the
command's positional arguments in declaration order; once the
positional argument in front of a forwarding argument is filled, every
remaining token is forwarded verbatim (``exec c1 sh -c "echo hi"``).

Structural errors are collected while the whole stream is scanned so
that a help flag anywhere on the line still wins over a malformed
command line.  Only the first error is reported.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from boxctl.core.arguments import HELP_FLAGS, ArgKind, ArgMap, Argument
from boxctl.exceptions import ArgumentError

_HELP_HINT = "Use --help to see the accepted arguments."


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of :func:`parse_arguments`."""

    args: ArgMap
    help_requested: bool = False


def parse_arguments(arguments: Sequence[Argument], tokens: Sequence[str]) -> ParseResult:
    """Parse *tokens* against the declared *arguments*.

    Raises
    ------
    ArgumentError
        When the tokens do not fit the declaration and no help flag was
        given.
    """
    return _Parser(arguments).parse(tokens)


class _Parser:
    """Single-use parser state for one command line."""

    def __init__(self, arguments: Sequence[Argument]) -> None:
        self._arguments: tuple[Argument, ...] = tuple(arguments)
        self._by_alias: dict[str, Argument] = {}
        for argument in self._arguments:
            for alias in argument.aliases:
                if alias in self._by_alias:
                    raise ValueError(f"Duplicate argument alias: {alias}")
                self._by_alias[alias] = argument
        self._positionals: list[Argument] = [a for a in self._arguments if a.is_positional]
        self._positional_index: int = 0
        self._forwarding: bool = False
        self._help: bool = False
        self._errors: list[ArgumentError] = []
        self._args: ArgMap = ArgMap()

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def parse(self, tokens: Sequence[str]) -> ParseResult:
        stream: deque[str] = deque(tokens)
        options_done = False

        while stream:
            token = stream.popleft()
            if self._forwarding or options_done:
                self._add_positional(token)
            elif token == "--":
                options_done = True
            elif token in HELP_FLAGS:
                self._help = True
            elif token.startswith("--"):
                self._parse_long(token, stream)
            elif token.startswith("-") and len(token) > 1:
                self._parse_short(token, stream)
            else:
                self._add_positional(token)

        if self._help:
            return ParseResult(self._args.freeze(), help_requested=True)

        for argument in self._arguments:
            if argument.required and not self._args.contains(argument.type):
                self._fail(f"Required argument not provided: {argument.display_name}")

        if self._errors:
            raise self._errors[0]
        return ParseResult(self._args.freeze())

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    def _parse_long(self, token: str, stream: deque[str]) -> None:
        name, has_inline, inline = token.partition("=")
        argument = self._by_alias.get(name)
        if argument is None:
            self._fail(f"Unrecognized argument: {name}")
            return

        if not argument.takes_value:
            if has_inline:
                self._fail(f"Argument {name} does not take a value")
                return
            self._record(argument, name)
            return

        if has_inline:
            self._record(argument, inline)
        else:
            self._record_next(argument, name, stream)

    def _parse_short(self, token: str, stream: deque[str]) -> None:
        # ``-qa`` sets both flags; ``-sKILL`` / ``-s=KILL`` carry a value.
        for index in range(1, len(token)):
            alias = f"-{token[index]}"
            if alias in HELP_FLAGS:
                self._help = True
                continue

            argument = self._by_alias.get(alias)
            if argument is None:
                suffix = f" (in {token})" if len(token) > 2 else ""
                self._fail(f"Unrecognized argument: {alias}{suffix}")
                return

            if not argument.takes_value:
                self._record(argument, alias)
                continue

            rest = token[index + 1:]
            if rest:
                self._record(argument, rest.removeprefix("="))
            else:
                self._record_next(argument, alias, stream)
            return

    def _record_next(self, argument: Argument, spelling: str, stream: deque[str]) -> None:
        # A help flag is never taken as a value; it stays in the stream.
        if stream and stream[0] not in HELP_FLAGS:
            self._record(argument, stream.popleft())
        else:
            self._fail(f"Argument {spelling} requires a value")

    # ------------------------------------------------------------------
    # Positionals
    # ------------------------------------------------------------------

    def _add_positional(self, token: str) -> None:
        while self._positional_index < len(self._positionals):
            argument = self._positionals[self._positional_index]
            if argument.allows(self._args.count(argument.type) + 1):
                self._args.add(argument.type, token)
                if argument.kind is ArgKind.FORWARD:
                    self._forwarding = True
                elif self._is_full(argument) and self._next_is_forward():
                    self._positional_index += 1
                    self._forwarding = True
                return
            self._positional_index += 1

        self._fail(f"Found a positional argument when none was expected: {token}")

    def _is_full(self, argument: Argument) -> bool:
        return not argument.allows(self._args.count(argument.type) + 1)

    def _next_is_forward(self) -> bool:
        following = self._positional_index + 1
        return (
            following < len(self._positionals)
            and self._positionals[following].kind is ArgKind.FORWARD
        )

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def _record(self, argument: Argument, value: str) -> None:
        if not argument.allows(self._args.count(argument.type) + 1):
            self._fail(
                f"Argument {argument.display_name} may be provided at most "
                f"{argument.max_count} time(s)",
            )
            return
        self._args.add(argument.type, value)

    def _fail(self, message: str) -> None:
        self._errors.append(ArgumentError(message, hint=_HELP_HINT))
