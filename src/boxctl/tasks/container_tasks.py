"""Container-related tasks.

Each task reads the parsed arguments and the shared data published by
earlier tasks, calls the container service, and may publish a value of
its own.  Tasks that act on several container ids call the service once
per id in command-line order; the first failure ends the loop and
nothing already done is rolled back.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from boxctl.core.arguments import ArgMap, ArgType
from boxctl.core.context import DataKey, ExecutionContext
from boxctl.core.models import (
    ContainerInformation,
    ContainerOptions,
    ContainerState,
    FormatType,
    ProgressMode,
    PullPolicy,
    Signal,
    StopContainerOptions,
)
from boxctl.core.validation import (
    parse_format,
    parse_integer,
    parse_port_mapping,
    parse_progress_mode,
    parse_pull_policy,
    parse_signal,
)
from boxctl.exceptions import InputFileError

logger = logging.getLogger(__name__)

CONTAINER_COLUMNS: tuple[str, ...] = ("ID", "NAME", "IMAGE", "STATE")


# ---------------------------------------------------------------------------
# Option gathering
# ---------------------------------------------------------------------------

def set_container_options_from_args(context: ExecutionContext) -> None:
    """Publish :class:`ContainerOptions` built from the command line."""
    args = context.args
    arguments = args.get_all(ArgType.COMMAND) + args.get_all(ArgType.FORWARD_ARGS)

    env: list[str] = []
    for env_file in args.get_all(ArgType.ENV_FILE):
        env.extend(_read_env_file(Path(env_file)))
    env.extend(args.get_all(ArgType.ENV))

    options = ContainerOptions(
        arguments=arguments,
        detach=args.contains(ArgType.DETACH),
        interactive=args.contains(ArgType.INTERACTIVE),
        tty=args.contains(ArgType.TTY),
        name=_optional(args, ArgType.NAME),
        env=tuple(env),
        publish=tuple(parse_port_mapping(v) for v in args.get_all(ArgType.PUBLISH)),
        volumes=args.get_all(ArgType.VOLUME),
        tmpfs=args.get_all(ArgType.TMPFS),
        dns=args.get_all(ArgType.DNS),
        dns_search=args.get_all(ArgType.DNS_SEARCH),
        dns_options=args.get_all(ArgType.DNS_OPTION),
        user=_optional(args, ArgType.USER),
        entrypoint=_optional(args, ArgType.ENTRYPOINT),
        remove=args.contains(ArgType.REMOVE),
        pull=(
            parse_pull_policy(args.get(ArgType.PULL))
            if args.contains(ArgType.PULL)
            else PullPolicy.MISSING
        ),
        progress=(
            parse_progress_mode(args.get(ArgType.PROGRESS))
            if args.contains(ArgType.PROGRESS)
            else ProgressMode.AUTO
        ),
        cid_file=Path(args.get(ArgType.CID_FILE)) if args.contains(ArgType.CID_FILE) else None,
    )
    context.data.add(DataKey.CONTAINER_OPTIONS, options)


def _optional(args: ArgMap, arg_type: ArgType) -> str | None:
    return args.get(arg_type) if args.contains(arg_type) else None


def _read_env_file(path: Path) -> list[str]:
    """Return the ``KEY=VALUE`` lines of *path*, skipping blanks and comments."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputFileError(
            f"Cannot read env file {path}: {exc.strerror or exc}",
        ) from exc
    entries: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#"):
            entries.append(stripped)
    return entries


# ---------------------------------------------------------------------------
# Create / run / start
# ---------------------------------------------------------------------------

def create_container(context: ExecutionContext) -> None:
    assert context.data.contains(DataKey.SESSION)
    assert context.args.contains(ArgType.IMAGE_ID)
    assert context.data.contains(DataKey.CONTAINER_OPTIONS)

    options: ContainerOptions = context.data.get(DataKey.CONTAINER_OPTIONS)
    container_id = _create(context, options)
    context.services.renderer.print_message(container_id)


def run_container(context: ExecutionContext) -> None:
    """Create the container, then start it attached unless ``--detach``."""
    assert context.data.contains(DataKey.SESSION)
    assert context.args.contains(ArgType.IMAGE_ID)
    assert context.data.contains(DataKey.CONTAINER_OPTIONS)

    options: ContainerOptions = context.data.get(DataKey.CONTAINER_OPTIONS)
    container_id = _create(context, options)
    renderer = context.services.renderer
    session = context.data.get(DataKey.SESSION)

    if options.detach:
        context.services.containers.start(session, container_id)
        renderer.print_message(container_id)
        return

    exit_code = context.services.containers.start(
        session,
        container_id,
        on_output=renderer.write_stream,
    )
    logger.debug("Container %s exited with %s", container_id, exit_code)


def _create(context: ExecutionContext, options: ContainerOptions) -> str:
    cid_file = options.cid_file
    if cid_file is not None and cid_file.exists():
        raise InputFileError(f"Container ID file {cid_file} already exists")

    enabled = options.progress is ProgressMode.AUTO
    with context.services.renderer.pull_progress(enabled) as progress:
        result = context.services.containers.create(
            context.data.get(DataKey.SESSION),
            context.args.get(ArgType.IMAGE_ID),
            options,
            progress_callback=progress,
        )

    if cid_file is not None:
        try:
            cid_file.write_text(result.id, encoding="utf-8")
        except OSError as exc:
            raise InputFileError(
                f"Cannot write container ID file {cid_file}: {exc.strerror or exc}",
            ) from exc
    return result.id


def start_container(context: ExecutionContext) -> None:
    assert context.data.contains(DataKey.SESSION)
    assert context.args.contains(ArgType.CONTAINER_ID)

    session = context.data.get(DataKey.SESSION)
    container_id = context.args.get(ArgType.CONTAINER_ID)
    if context.args.contains(ArgType.ATTACH):
        context.services.containers.start(
            session,
            container_id,
            on_output=context.services.renderer.write_stream,
        )
    else:
        context.services.containers.start(session, container_id)


def exec_container(context: ExecutionContext) -> None:
    assert context.data.contains(DataKey.SESSION)
    assert context.args.contains(ArgType.CONTAINER_ID)
    assert context.data.contains(DataKey.CONTAINER_OPTIONS)

    options: ContainerOptions = context.data.get(DataKey.CONTAINER_OPTIONS)
    container_id = context.args.get(ArgType.CONTAINER_ID)
    exit_code = context.services.containers.exec(
        context.data.get(DataKey.SESSION),
        container_id,
        options,
        on_output=None if options.detach else context.services.renderer.write_stream,
    )
    logger.debug("Exec in %s finished with %s", container_id, exit_code)


# ---------------------------------------------------------------------------
# Multi-target operations
# ---------------------------------------------------------------------------

def delete_containers(context: ExecutionContext) -> None:
    assert context.data.contains(DataKey.SESSION)

    session = context.data.get(DataKey.SESSION)
    force = context.args.contains(ArgType.FORCE)
    for container_id in context.args.get_all(ArgType.CONTAINER_ID):
        context.services.containers.delete(session, container_id, force)


def inspect_containers(context: ExecutionContext) -> None:
    assert context.data.contains(DataKey.SESSION)

    session = context.data.get(DataKey.SESSION)
    result: list[dict[str, Any]] = [
        context.services.containers.inspect(session, container_id)
        for container_id in context.args.get_all(ArgType.CONTAINER_ID)
    ]
    context.services.renderer.print_json(result)


def kill_containers(context: ExecutionContext) -> None:
    assert context.data.contains(DataKey.SESSION)

    session = context.data.get(DataKey.SESSION)
    signal = Signal.SIGKILL
    if context.args.contains(ArgType.SIGNAL):
        signal = parse_signal(context.args.get(ArgType.SIGNAL))

    for container_id in context.args.get_all(ArgType.CONTAINER_ID):
        context.services.containers.kill(session, container_id, signal)


def stop_containers(context: ExecutionContext) -> None:
    assert context.data.contains(DataKey.SESSION)

    session = context.data.get(DataKey.SESSION)
    signal = Signal.SIGTERM
    timeout = StopContainerOptions.DEFAULT_TIMEOUT
    if context.args.contains(ArgType.SIGNAL):
        signal = parse_signal(context.args.get(ArgType.SIGNAL))
    if context.args.contains(ArgType.TIME):
        timeout = parse_integer(context.args.get(ArgType.TIME), "time")
    options = StopContainerOptions(signal=signal, timeout=timeout)

    for container_id in context.args.get_all(ArgType.CONTAINER_ID):
        context.services.containers.stop(session, container_id, options)


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

def get_containers(context: ExecutionContext) -> None:
    assert context.data.contains(DataKey.SESSION)

    session = context.data.get(DataKey.SESSION)
    context.data.add(DataKey.CONTAINERS, list(context.services.containers.list(session)))


def list_containers(context: ExecutionContext) -> None:
    assert context.data.contains(DataKey.CONTAINERS)

    containers: list[ContainerInformation] = context.data.get(DataKey.CONTAINERS)
    if not context.args.contains(ArgType.ALL):
        containers = [c for c in containers if c.state is ContainerState.RUNNING]

    renderer = context.services.renderer
    if context.args.contains(ArgType.QUIET):
        for container in containers:
            renderer.print_message(container.short_id)
        return

    format_type = FormatType.TABLE
    if context.args.contains(ArgType.FORMAT):
        format_type = parse_format(context.args.get(ArgType.FORMAT))

    if format_type is FormatType.JSON:
        renderer.print_json([c.to_dict() for c in containers])
    else:
        renderer.print_table(
            CONTAINER_COLUMNS,
            [(c.short_id, c.name, c.image, c.state.value) for c in containers],
        )
