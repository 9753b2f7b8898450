"""Help text for command nodes.

The text is assembled from what the node itself declares (its name
chain, descriptions, aliases, children and arguments) so every command
gets help without writing any.  Every command implicitly accepts the
help flags, so they are listed even though no command declares them.
"""

from __future__ import annotations

from boxctl.cli.console import out
from boxctl.core.arguments import ArgType, Argument
from boxctl.core.command import Command

_INDENT = "  "
_GAP = 2


def _usage(command: Command, arguments: list[Argument]) -> str:
    parts = [command.full_name]
    if command.get_commands():
        parts.append("[command]")
    for argument in arguments:
        if not argument.is_positional:
            continue
        token = argument.display_name
        if argument.max_count != 1:
            token += "..."
        parts.append(token if argument.required else f"[{token}]")
    parts.append("[options]")
    return "Usage: " + " ".join(parts)


def _option_label(argument: Argument) -> str:
    short = [alias for alias in argument.aliases if not alias.startswith("--")]
    long = [alias for alias in argument.aliases if alias.startswith("--")]
    label = ", ".join(short + long)
    if argument.takes_value:
        label += f" <{argument.name}>"
    return label


def _section(title: str, rows: list[tuple[str, str]]) -> list[str]:
    width = max(len(label) for label, _ in rows) + _GAP
    lines = [f"{title}:"]
    for label, text in rows:
        lines.append(f"{_INDENT}{label.ljust(width)}{text}".rstrip())
    lines.append("")
    return lines


def format_help(command: Command) -> str:
    """Return the full help text for *command*."""
    arguments = command.get_arguments()
    lines = [_usage(command, arguments), "", command.long_description(), ""]

    if command.aliases:
        lines += ["Aliases: " + ", ".join(command.aliases), ""]

    children = command.get_commands()
    if children:
        lines += _section(
            "Available commands",
            [(child.name, child.short_description()) for child in children],
        )

    positionals = [a for a in arguments if a.is_positional]
    if positionals:
        lines += _section(
            "Arguments",
            [(a.display_name, a.help) for a in positionals],
        )

    options = [a for a in arguments if not a.is_positional]
    options.append(Argument.create(ArgType.HELP))
    lines += _section("Options", [(_option_label(a), a.help) for a in options])

    return "\n".join(lines).rstrip() + "\n"


def print_help(command: Command) -> None:
    """Write the help text for *command* to stdout."""
    out.print(format_help(command), end="", markup=False, highlight=False, soft_wrap=True)
