"""Argument descriptors and the parsed argument map.

Every parameter a command can accept is named by an :class:`ArgType`.
The type fixes the canonical flag name, the optional one-letter alias,
the kind of value and a default help text; a command only decides
whether the argument is required, how often it may occur and, when
useful, a command-specific help text.

The parsed result of one command line is an :class:`ArgMap`.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass
from typing import NamedTuple

NO_LIMIT: None = None
"""``max_count`` value for an argument that may occur any number of times."""

HELP_FLAGS: tuple[str, ...] = ("--help", "-h", "-?")


class ArgKind(enum.Enum):
    """How an argument appears on the command line."""

    POSITIONAL = "positional"
    """Bare value, assigned by declaration order."""

    VALUE = "value"
    """Flag followed by one value (``--name foo``, ``--name=foo``)."""

    FLAG = "flag"
    """Presence-only flag (``--all``)."""

    FORWARD = "forward"
    """Trailing positional that absorbs every remaining token verbatim."""


class ArgType(enum.Enum):
    """Closed set of argument semantics shared by all commands."""

    ALL = enum.auto()
    ATTACH = enum.auto()
    CID_FILE = enum.auto()
    COMMAND = enum.auto()
    CONTAINER_ID = enum.auto()
    DETACH = enum.auto()
    DNS = enum.auto()
    DNS_OPTION = enum.auto()
    DNS_SEARCH = enum.auto()
    ENTRYPOINT = enum.auto()
    ENV = enum.auto()
    ENV_FILE = enum.auto()
    FORCE = enum.auto()
    FORMAT = enum.auto()
    FORWARD_ARGS = enum.auto()
    HELP = enum.auto()
    IMAGE_ID = enum.auto()
    INTERACTIVE = enum.auto()
    NAME = enum.auto()
    PROGRESS = enum.auto()
    PUBLISH = enum.auto()
    PULL = enum.auto()
    QUIET = enum.auto()
    REMOVE = enum.auto()
    SESSION = enum.auto()
    SESSION_ID = enum.auto()
    SIGNAL = enum.auto()
    TIME = enum.auto()
    TMPFS = enum.auto()
    TTY = enum.auto()
    USER = enum.auto()
    VERBOSE = enum.auto()
    VERSION = enum.auto()
    VOLUME = enum.auto()


class _TypeInfo(NamedTuple):
    name: str
    alias: str | None
    kind: ArgKind
    help: str


_TYPE_INFO: dict[ArgType, _TypeInfo] = {
    ArgType.ALL: _TypeInfo("all", "a", ArgKind.FLAG, "Show all containers (default shows just running)"),
    ArgType.ATTACH: _TypeInfo("attach", "a", ArgKind.FLAG, "Attach to the container's output streams"),
    ArgType.CID_FILE: _TypeInfo("cidfile", None, ArgKind.VALUE, "Write the container ID to the file"),
    ArgType.COMMAND: _TypeInfo("command", None, ArgKind.POSITIONAL, "The command to run"),
    ArgType.CONTAINER_ID: _TypeInfo("container-id", None, ArgKind.POSITIONAL, "Container ID or name"),
    ArgType.DETACH: _TypeInfo("detach", "d", ArgKind.FLAG, "Run in the background and print the container ID"),
    ArgType.DNS: _TypeInfo("dns", None, ArgKind.VALUE, "Set custom DNS servers"),
    ArgType.DNS_OPTION: _TypeInfo("dns-option", None, ArgKind.VALUE, "Set DNS resolver options"),
    ArgType.DNS_SEARCH: _TypeInfo("dns-search", None, ArgKind.VALUE, "Set custom DNS search domains"),
    ArgType.ENTRYPOINT: _TypeInfo("entrypoint", None, ArgKind.VALUE, "Overwrite the default entrypoint of the image"),
    ArgType.ENV: _TypeInfo("env", "e", ArgKind.VALUE, "Set environment variables (KEY=VALUE)"),
    ArgType.ENV_FILE: _TypeInfo("env-file", None, ArgKind.VALUE, "Read in a file of environment variables"),
    ArgType.FORCE: _TypeInfo("force", "f", ArgKind.FLAG, "Force the removal of a running container"),
    ArgType.FORMAT: _TypeInfo("format", None, ArgKind.VALUE, "Output format (table, json)"),
    ArgType.FORWARD_ARGS: _TypeInfo("arguments", None, ArgKind.FORWARD, "Arguments passed to the command"),
    ArgType.HELP: _TypeInfo("help", "h", ArgKind.FLAG, "Shows help about the selected command"),
    ArgType.IMAGE_ID: _TypeInfo("image", None, ArgKind.POSITIONAL, "Image name"),
    ArgType.INTERACTIVE: _TypeInfo("interactive", "i", ArgKind.FLAG, "Keep STDIN open even if not attached"),
    ArgType.NAME: _TypeInfo("name", None, ArgKind.VALUE, "Assign a name to the container"),
    ArgType.PROGRESS: _TypeInfo("progress", None, ArgKind.VALUE, "Image pull progress output (auto, none)"),
    ArgType.PUBLISH: _TypeInfo("publish", "p", ArgKind.VALUE, "Publish a container's port to the host"),
    ArgType.PULL: _TypeInfo("pull", None, ArgKind.VALUE, "Pull image before creating (always, missing, never)"),
    ArgType.QUIET: _TypeInfo("quiet", "q", ArgKind.FLAG, "Only display container IDs"),
    ArgType.REMOVE: _TypeInfo("rm", None, ArgKind.FLAG, "Automatically remove the container when it exits"),
    ArgType.SESSION: _TypeInfo("session", None, ArgKind.VALUE, "Specify the session to use"),
    ArgType.SESSION_ID: _TypeInfo("session-id", None, ArgKind.POSITIONAL, "Session ID"),
    ArgType.SIGNAL: _TypeInfo("signal", "s", ArgKind.VALUE, "Signal to send to the container"),
    ArgType.TIME: _TypeInfo("time", "t", ArgKind.VALUE, "Seconds to wait before killing the container"),
    ArgType.TMPFS: _TypeInfo("tmpfs", None, ArgKind.VALUE, "Mount a tmpfs directory"),
    ArgType.TTY: _TypeInfo("tty", "t", ArgKind.FLAG, "Allocate a pseudo-TTY"),
    ArgType.USER: _TypeInfo("user", "u", ArgKind.VALUE, "Username or UID"),
    ArgType.VERBOSE: _TypeInfo("verbose", "v", ArgKind.FLAG, "Show detailed information"),
    ArgType.VERSION: _TypeInfo("version", None, ArgKind.FLAG, "Show version information"),
    ArgType.VOLUME: _TypeInfo("volume", "v", ArgKind.VALUE, "Bind mount a volume"),
}


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Argument:
    """Declared shape of one parameter of a command."""

    type: ArgType
    name: str
    aliases: tuple[str, ...]
    kind: ArgKind
    required: bool = False
    max_count: int | None = 1
    help: str = ""

    @classmethod
    def create(
        cls,
        arg_type: ArgType,
        required: bool = False,
        max_count: int | None = 1,
        help: str | None = None,
    ) -> Argument:
        """Build the descriptor for *arg_type* from the shared type table.

        ``FORWARD`` arguments are always unbounded.
        """
        info = _TYPE_INFO[arg_type]
        aliases: tuple[str, ...] = ()
        if info.kind in (ArgKind.VALUE, ArgKind.FLAG):
            aliases = (f"--{info.name}",)
            if info.alias is not None:
                aliases += (f"-{info.alias}",)
        if arg_type is ArgType.HELP:
            aliases = HELP_FLAGS
        if info.kind is ArgKind.FORWARD:
            max_count = NO_LIMIT
        return cls(
            type=arg_type,
            name=info.name,
            aliases=aliases,
            kind=info.kind,
            required=required,
            max_count=max_count,
            help=help if help is not None else info.help,
        )

    @property
    def is_positional(self) -> bool:
        return self.kind in (ArgKind.POSITIONAL, ArgKind.FORWARD)

    @property
    def takes_value(self) -> bool:
        return self.kind is not ArgKind.FLAG

    @property
    def display_name(self) -> str:
        """Name used in help and error text (``--signal`` or ``<image>``)."""
        if self.is_positional:
            return f"<{self.name}>"
        return self.aliases[0]

    def allows(self, count: int) -> bool:
        """Whether *count* occurrences are within ``max_count``."""
        return self.max_count is None or count <= self.max_count


# ---------------------------------------------------------------------------
# Parsed values
# ---------------------------------------------------------------------------

class ArgMap:
    """Parsed values of one command line, keyed by :class:`ArgType`.

    Values keep command-line order.  Presence flags record the spelling
    that was used.  The parser freezes the map once parsing succeeds.
    """

    def __init__(self) -> None:
        self._values: dict[ArgType, list[str]] = {}
        self._frozen: bool = False

    def add(self, arg_type: ArgType, value: str) -> None:
        if self._frozen:
            raise RuntimeError("ArgMap is read-only once parsing completed")
        self._values.setdefault(arg_type, []).append(value)

    def freeze(self) -> ArgMap:
        self._frozen = True
        return self

    def contains(self, arg_type: ArgType) -> bool:
        return arg_type in self._values

    def count(self, arg_type: ArgType) -> int:
        return len(self._values.get(arg_type, ()))

    def get(self, arg_type: ArgType) -> str:
        """Return the single value recorded for *arg_type*.

        Raises
        ------
        KeyError
            If *arg_type* was not supplied.
        ValueError
            If *arg_type* was supplied more than once; use :meth:`get_all`.
        """
        values = self._values[arg_type]
        if len(values) != 1:
            raise ValueError(
                f"{arg_type.name} holds {len(values)} values; use get_all()",
            )
        return values[0]

    def get_all(self, arg_type: ArgType) -> tuple[str, ...]:
        return tuple(self._values.get(arg_type, ()))

    def __contains__(self, arg_type: object) -> bool:
        return arg_type in self._values

    def __iter__(self) -> Iterator[ArgType]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        items = ", ".join(f"{key.name}={values!r}" for key, values in self._values.items())
        return f"ArgMap({items})"
