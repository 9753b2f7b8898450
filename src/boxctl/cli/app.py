"""CLI application entry point for boxctl.

This module is the **sole error boundary** for the entire application.
It catches :class:`~boxctl.exceptions.BoxctlError`, ``KeyboardInterrupt``
and any unexpected ``Exception``, renders a short message on stderr and
returns a well-defined exit code.

Flow of :func:`main`
--------------------
1. Load :class:`~boxctl.config.Settings` and configure logging.
2. Resolve the command line against the command tree.
3. Show help and stop when a help flag was given.
4. Validate the argument values.
5. Execute the command's task pipeline against a fresh
   :class:`~boxctl.core.context.ExecutionContext`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

from boxctl.cli import exit_codes
from boxctl.cli.console import console
from boxctl.cli.log_setup import configure_logging
from boxctl.cli.render import ConsoleRenderer
from boxctl.commands import RootCommand
from boxctl.config import Settings, load_settings
from boxctl.core.command import resolve
from boxctl.core.context import ExecutionContext, Services
from boxctl.exceptions import BoxctlError

logger = logging.getLogger(__name__)


def build_services(settings: Settings) -> Services:
    """Wire the Docker-backed collaborators and the terminal renderer."""
    from boxctl.infra.docker_container_service import DockerContainerService
    from boxctl.infra.docker_session_service import DockerSessionService

    return Services(
        containers=DockerContainerService(),
        sessions=DockerSessionService(
            default_session=settings.session,
            shell=settings.shell,
        ),
        renderer=ConsoleRenderer(show_progress=settings.show_progress),
    )


def main(argv: Sequence[str] | None = None, *, services: Services | None = None) -> int:
    """Run the boxctl CLI.

    Parameters
    ----------
    argv:
        Arguments without the program name.  When ``None`` (default),
        ``sys.argv[1:]`` is used.
    services:
        Collaborators to run against.  When ``None``, the Docker-backed
        implementations are built from the settings.

    Returns
    -------
    int
        OS process exit code.
    """
    settings = load_settings()
    configure_logging(settings.log_level)

    tokens = list(sys.argv[1:] if argv is None else argv)
    root = RootCommand()
    invocation = resolve(root, tokens)

    if services is None:
        services = build_services(settings)

    if invocation.help_requested:
        services.renderer.print_help(invocation.command)
        return exit_codes.SUCCESS

    invocation.command.validate_arguments(invocation.args)

    context = ExecutionContext(invocation.args, services)
    invocation.command.execute(context)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except BoxctlError as exc:
        logger.debug("Command failed", exc_info=True)
        console.print(f"Error: {exc}", style="bold red", markup=False, highlight=False, soft_wrap=True)
        if exc.hint:
            console.print(f"Hint: {exc.hint}", style="yellow", markup=False, highlight=False, soft_wrap=True)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\nAborted by user.", style="yellow", markup=False)
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        logger.debug("Unexpected failure", exc_info=True)
        console.print(
            "Unexpected error. Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}",
            style="bold red",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
