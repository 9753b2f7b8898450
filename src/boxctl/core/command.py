"""Command nodes and command-line resolution.

A :class:`Command` is one node of the dispatch tree.  Subclasses
declare their name, aliases, arguments and children, and override two
hooks: :meth:`Command._validate_arguments_internal` for checks that
span several arguments, and :meth:`Command._execute_internal` which
chains the command's tasks onto the execution context.

:func:`resolve` walks the tree for a token sequence and returns the
:class:`Invocation` to run.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from boxctl.core.arguments import HELP_FLAGS, ArgMap, Argument
from boxctl.core.parser import parse_arguments
from boxctl.core.validation import validate_argument_values
from boxctl.exceptions import UnknownCommandError

if TYPE_CHECKING:
    from boxctl.core.context import ExecutionContext

logger = logging.getLogger(__name__)


class Command(abc.ABC):
    """One node of the command tree.

    Parameters
    ----------
    parent_name:
        Full name of the parent node, used only to build
        :attr:`full_name`.  Empty for the root.
    """

    name: ClassVar[str]
    aliases: ClassVar[tuple[str, ...]] = ()

    def __init__(self, parent_name: str = "") -> None:
        self._parent_name: str = parent_name

    @property
    def full_name(self) -> str:
        """Space-joined chain of names from the root to this node."""
        if not self._parent_name:
            return self.name
        return f"{self._parent_name} {self.name}"

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def get_arguments(self) -> list[Argument]:
        return []

    def get_commands(self) -> list[Command]:
        return []

    @abc.abstractmethod
    def short_description(self) -> str:
        ...  # pragma: no cover

    def long_description(self) -> str:
        return self.short_description()

    def matches(self, token: str) -> bool:
        """Exact, case-sensitive match against the name or an alias."""
        return token == self.name or token in self.aliases

    def find_command(self, token: str) -> Command | None:
        if token.startswith("-"):
            return None
        for child in self.get_commands():
            if child.matches(token):
                return child
        return None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_arguments(self, args: ArgMap) -> None:
        """Run per-type validation, then the command-specific hook.

        Raises
        ------
        ArgumentValueError
            For the first value that fails either phase.
        """
        for argument in self.get_arguments():
            validate_argument_values(argument, args)
        self._validate_arguments_internal(args)

    def _validate_arguments_internal(self, args: ArgMap) -> None:
        """Hook for checks a single argument type cannot express."""

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, context: ExecutionContext) -> None:
        logger.debug("Executing command '%s'", self.full_name)
        self._execute_internal(context)

    def _execute_internal(self, context: ExecutionContext) -> None:
        """Default body: nodes that only group sub-commands show their help."""
        context.services.renderer.print_help(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.full_name!r})"


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Invocation:
    """A resolved command together with its parsed arguments."""

    command: Command
    args: ArgMap
    help_requested: bool = False


def resolve(root: Command, tokens: Sequence[str]) -> Invocation:
    """Resolve *tokens* (without the program name) against the tree at *root*.

    Descends greedily while the next token names a child of the current
    node, then parses every remaining token as arguments of the node
    reached.

    Raises
    ------
    UnknownCommandError
        When the node reached only groups sub-commands and the next
        token names none of them.
    ArgumentError
        When the remaining tokens do not fit the node's arguments.
    """
    command = root
    position = 0
    while position < len(tokens):
        child = command.find_command(tokens[position])
        if child is None:
            break
        command = child
        position += 1

    remaining = list(tokens[position:])
    logger.debug("Resolved '%s' with arguments %r", command.full_name, remaining)

    arguments = command.get_arguments()
    children = command.get_commands()
    if (
        remaining
        and children
        and not remaining[0].startswith("-")
        and not any(argument.is_positional for argument in arguments)
    ):
        if any(token in HELP_FLAGS for token in remaining):
            return Invocation(command, ArgMap().freeze(), help_requested=True)
        raise UnknownCommandError(remaining[0], [child.name for child in children])

    parsed = parse_arguments(arguments, remaining)
    return Invocation(command, parsed.args, parsed.help_requested)
