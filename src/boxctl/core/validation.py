"""Per-type argument value validation.

Every function here is a pure conversion from a raw command-line
string to a typed value, raising
:class:`~boxctl.exceptions.ArgumentValueError` for anything it cannot
convert.  :func:`validate_argument_values` runs the conversion for each
argument type that has registered semantics, so the same rules apply
to every command that declares the argument.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from boxctl.core.arguments import ArgMap, ArgType, Argument
from boxctl.core.models import FormatType, PortMapping, ProgressMode, PullPolicy, Signal
from boxctl.exceptions import ArgumentValueError

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_PORT_PATTERN = re.compile(
    r"(?:(?:(?P<ip>\[[0-9A-Fa-f:]+\]|[0-9.]+):)?(?P<host>[0-9]*):)?"
    r"(?P<container>[0-9]+)(?:/(?P<proto>tcp|udp|sctp))?",
)

SIGNALS: Mapping[str, Signal] = MappingProxyType(
    {member.name: member for member in Signal},
)
"""Read-only lookup of canonical signal names (``"SIGKILL"``)."""


# ---------------------------------------------------------------------------
# Integers
# ---------------------------------------------------------------------------

def parse_integer(
    value: str,
    argument: str = "integer",
    *,
    bits: int = 64,
    signed: bool = True,
) -> int:
    """Convert an optionally-signed decimal literal to ``int``.

    The result must fit a *bits*-wide integer of the requested
    signedness.  Whitespace, underscores and any other character make
    the literal invalid.
    """
    if not _INTEGER_PATTERN.fullmatch(value):
        raise ArgumentValueError(argument, value, reason="expected an integer")
    number = int(value)
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= number <= high:
        raise ArgumentValueError(
            argument,
            value,
            reason=f"must be between {low} and {high}",
        )
    return number


# ---------------------------------------------------------------------------
# Signals
# ---------------------------------------------------------------------------

_SIGNAL_HINT = (
    "Use a signal name such as SIGKILL, KILL or sigterm, "
    f"or a number between {int(min(Signal))} and {int(max(Signal))} such as 9."
)


def parse_signal(value: str, argument: str = "signal") -> Signal:
    """Convert a signal name or number to :class:`Signal`.

    Accepts ``SIGKILL``, ``KILL`` (the ``SIG`` prefix and the name are
    case-insensitive) or a number in the valid signal range.
    """
    if _INTEGER_PATTERN.fullmatch(value):
        try:
            return Signal(int(value))
        except ValueError:
            raise ArgumentValueError(
                argument,
                value,
                reason="signal number out of range",
                hint=_SIGNAL_HINT,
            ) from None

    name = value.upper()
    if not name.startswith("SIG"):
        name = f"SIG{name}"
    signal = SIGNALS.get(name)
    if signal is None:
        raise ArgumentValueError(argument, value, hint=_SIGNAL_HINT)
    return signal


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

def parse_format(value: str, argument: str = "format") -> FormatType:
    """Convert a ``--format`` value; the comparison is case-sensitive."""
    try:
        return FormatType(value)
    except ValueError:
        raise ArgumentValueError(
            argument,
            value,
            hint="Supported format types are: " + ", ".join(f.value for f in FormatType),
        ) from None


def parse_pull_policy(value: str, argument: str = "pull") -> PullPolicy:
    try:
        return PullPolicy(value)
    except ValueError:
        raise ArgumentValueError(
            argument,
            value,
            hint="Supported pull policies are: " + ", ".join(p.value for p in PullPolicy),
        ) from None


def parse_progress_mode(value: str, argument: str = "progress") -> ProgressMode:
    try:
        return ProgressMode(value)
    except ValueError:
        raise ArgumentValueError(
            argument,
            value,
            hint="Supported progress modes are: " + ", ".join(m.value for m in ProgressMode),
        ) from None


# ---------------------------------------------------------------------------
# Structured values
# ---------------------------------------------------------------------------

def parse_port_mapping(value: str, argument: str = "publish") -> PortMapping:
    """Parse ``[[ip:]host:]container[/protocol]``."""
    match = _PORT_PATTERN.fullmatch(value)
    if match is None:
        raise ArgumentValueError(
            argument,
            value,
            hint="Expected [[ip:]host-port:]container-port[/tcp|udp|sctp], e.g. 8080:80",
        )
    container_port = _parse_port(match.group("container"), argument, value)
    host = match.group("host")
    host_ip = match.group("ip")
    return PortMapping(
        container_port=container_port,
        protocol=match.group("proto") or "tcp",
        host_ip=host_ip.strip("[]") if host_ip else None,
        host_port=_parse_port(host, argument, value) if host else None,
    )


def _parse_port(text: str, argument: str, value: str) -> int:
    port = int(text)
    if not 0 < port < 65536:
        raise ArgumentValueError(argument, value, reason="port must be between 1 and 65535")
    return port


def parse_env(value: str, argument: str = "env") -> str:
    """Accept ``KEY=VALUE`` or a bare ``KEY``; the key must be non-empty."""
    key = value.partition("=")[0]
    if not key or any(ch.isspace() for ch in key):
        raise ArgumentValueError(
            argument,
            value,
            hint="Expected KEY=VALUE or KEY",
        )
    return value


# ---------------------------------------------------------------------------
# Per-type dispatch
# ---------------------------------------------------------------------------

_VALIDATORS: Mapping[ArgType, Callable[[str, str], Any]] = MappingProxyType(
    {
        ArgType.ENV: parse_env,
        ArgType.PROGRESS: parse_progress_mode,
        ArgType.PUBLISH: parse_port_mapping,
        ArgType.PULL: parse_pull_policy,
        ArgType.SIGNAL: parse_signal,
        ArgType.TIME: parse_integer,
    },
)


def validate_argument_values(argument: Argument, args: ArgMap) -> None:
    """Convert every value supplied for *argument*; fail on the first bad one."""
    validator = _VALIDATORS.get(argument.type)
    if validator is None:
        return
    for value in args.get_all(argument.type):
        validator(value, argument.name)
