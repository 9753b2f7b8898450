"""Docker SDK backed implementation of :class:`~boxctl.core.protocols.ContainerService`.

Every call goes through the ``DockerClient`` carried by the
:class:`~boxctl.core.models.Session`.  Docker errors are translated by
:func:`~boxctl.infra.docker_support.translate_errors`; nothing raw
escapes the infrastructure boundary.
"""

from __future__ import annotations

import logging
from typing import Any

from boxctl.core.models import (
    ContainerInformation,
    ContainerOptions,
    ContainerState,
    CreateContainerResult,
    PortMapping,
    PullPolicy,
    Session,
    Signal,
    StopContainerOptions,
)
from boxctl.core.protocols import OutputCallback, ProgressCallback
from boxctl.exceptions import (
    ImageNotFoundError,
    ImagePullError,
    ServiceError,
    ServiceUnavailableError,
)
from boxctl.infra.docker_support import load_docker, translate_errors

logger = logging.getLogger(__name__)

ENGINE_STOP_TIMEOUT: int = 10
"""Grace period, in seconds, Docker applies when none is given."""


class DockerContainerService:
    """Concrete :class:`ContainerService` backed by the Docker SDK.

    Usage::

        service = DockerContainerService()
        result = service.create(session, "alpine:3.20", ContainerOptions())
        service.start(session, result.id)
    """

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(
        self,
        session: Session,
        image: str,
        options: ContainerOptions,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> CreateContainerResult:
        client = session.client
        self._ensure_image(client, image, options.pull, progress_callback)

        logger.debug("Creating container from %s", image)
        with translate_errors(image):
            container = client.containers.create(
                image,
                command=list(options.arguments) or None,
                name=options.name,
                tty=options.tty,
                stdin_open=options.interactive,
                environment=list(options.env) or None,
                entrypoint=options.entrypoint,
                user=options.user,
                ports=_port_bindings(options.publish) or None,
                volumes=list(options.volumes) or None,
                tmpfs=list(options.tmpfs) or None,
                dns=list(options.dns) or None,
                dns_search=list(options.dns_search) or None,
                dns_opt=list(options.dns_options) or None,
                auto_remove=options.remove,
            )
        return CreateContainerResult(id=container.id)

    def _ensure_image(
        self,
        client: Any,
        image: str,
        policy: PullPolicy,
        progress_callback: ProgressCallback | None,
    ) -> None:
        if policy is not PullPolicy.ALWAYS:
            try:
                with translate_errors(image):
                    client.images.get(image)
                return
            except ImageNotFoundError:
                if policy is PullPolicy.NEVER:
                    raise ImageNotFoundError(
                        f"No such image: {image}",
                        hint="Pull it first, or use --pull missing.",
                    ) from None
        self._pull(client, image, progress_callback)

    def _pull(self, client: Any, image: str, progress_callback: ProgressCallback | None) -> None:
        docker = load_docker()
        repository, tag = docker.utils.parse_repository_tag(image)
        logger.debug("Pulling %s:%s", repository, tag or "latest")
        try:
            with translate_errors(image):
                for event in client.api.pull(
                    repository,
                    tag=tag or "latest",
                    stream=True,
                    decode=True,
                ):
                    if "error" in event:
                        raise ImagePullError(
                            f"Failed to pull {image}: {event['error']}",
                        )
                    if progress_callback is not None:
                        progress_callback(event)
        except (ImagePullError, ServiceUnavailableError):
            raise
        except ServiceError as exc:
            raise ImagePullError(
                f"Failed to pull {image}: {exc}",
                hint="Check the image name and that you are logged in to its registry.",
            ) from exc

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(
        self,
        session: Session,
        container_id: str,
        *,
        on_output: OutputCallback | None = None,
    ) -> int | None:
        api = session.client.api
        logger.debug("Starting %s (attached=%s)", container_id, on_output is not None)
        with translate_errors(container_id):
            if on_output is None:
                api.start(container_id)
                return None

            stream = api.attach(
                container_id,
                stdout=True,
                stderr=True,
                stream=True,
                logs=True,
                demux=True,
            )
            api.start(container_id)
            _relay(stream, on_output)
            return _wait_for_exit(api, container_id)

    def stop(self, session: Session, container_id: str, options: StopContainerOptions) -> None:
        api = session.client.api
        # Negative means the engine default.
        timeout = None if options.timeout < 0 else options.timeout
        logger.debug("Stopping %s with %s (timeout=%s)", container_id, options.signal.name, timeout)

        with translate_errors(container_id):
            if options.signal is Signal.SIGTERM:
                api.stop(container_id, timeout=timeout)
                return

            import requests

            api.kill(container_id, signal=int(options.signal))
            grace = ENGINE_STOP_TIMEOUT if timeout is None else timeout
            if grace <= 0:
                _kill_if_running(api, container_id)
                return
            try:
                api.wait(container_id, timeout=grace)
            except (requests.exceptions.ReadTimeout, requests.exceptions.ConnectionError):
                logger.debug("%s still running after %ss, killing", container_id, grace)
                _kill_if_running(api, container_id)

    def kill(self, session: Session, container_id: str, signal: Signal) -> None:
        logger.debug("Sending %s to %s", signal.name, container_id)
        with translate_errors(container_id):
            session.client.api.kill(container_id, signal=int(signal))

    def delete(self, session: Session, container_id: str, force: bool) -> None:
        logger.debug("Deleting %s (force=%s)", container_id, force)
        with translate_errors(container_id):
            session.client.api.remove_container(container_id, force=force)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, session: Session) -> list[ContainerInformation]:
        with translate_errors("containers"):
            containers = session.client.containers.list(all=True)
        return [_to_information(container) for container in containers]

    def inspect(self, session: Session, container_id: str) -> dict[str, Any]:
        with translate_errors(container_id):
            return session.client.api.inspect_container(container_id)

    # ------------------------------------------------------------------
    # Exec
    # ------------------------------------------------------------------

    def exec(
        self,
        session: Session,
        container_id: str,
        options: ContainerOptions,
        *,
        on_output: OutputCallback | None = None,
    ) -> int | None:
        api = session.client.api
        logger.debug("Exec %r in %s", options.arguments, container_id)
        with translate_errors(container_id):
            created = api.exec_create(
                container_id,
                list(options.arguments),
                stdout=True,
                stderr=True,
                stdin=options.interactive,
                tty=options.tty,
                environment=list(options.env) or None,
                user=options.user or "",
            )
            exec_id = created["Id"]

            if options.detach:
                api.exec_start(exec_id, detach=True, tty=options.tty)
                return None

            stream = api.exec_start(exec_id, tty=options.tty, stream=True, demux=True)
            if on_output is not None:
                _relay(stream, on_output)
            else:
                for _ in stream:
                    pass
            return api.exec_inspect(exec_id).get("ExitCode")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _relay(stream: Any, on_output: OutputCallback) -> None:
    """Forward ``(stdout, stderr)`` chunks from a demultiplexed stream."""
    for stdout, stderr in stream:
        if stdout:
            on_output(stdout, False)
        if stderr:
            on_output(stderr, True)


def _kill_if_running(api: Any, container_id: str) -> None:
    errors = load_docker().errors
    try:
        api.kill(container_id, signal=int(Signal.SIGKILL))
    except errors.APIError as exc:
        # 409: the container already exited on the first signal.
        if exc.status_code != 409:
            raise
        logger.debug("%s exited before SIGKILL", container_id)


def _wait_for_exit(api: Any, container_id: str) -> int | None:
    errors = load_docker().errors
    try:
        result = api.wait(container_id)
    except errors.NotFound:
        # Removed on exit (--rm) before the wait call landed.
        return None
    return result.get("StatusCode")


def _port_bindings(publish: tuple[PortMapping, ...]) -> dict[str, Any]:
    """Convert port mappings to the ``ports`` argument of ``containers.create``."""
    bindings: dict[str, Any] = {}
    for mapping in publish:
        key = f"{mapping.container_port}/{mapping.protocol}"
        if mapping.host_ip is not None:
            host: Any = (mapping.host_ip, mapping.host_port)
        else:
            host = mapping.host_port
        if key not in bindings:
            bindings[key] = host
        elif isinstance(bindings[key], list):
            bindings[key].append(host)
        else:
            bindings[key] = [bindings[key], host]
    return bindings


def _to_information(container: Any) -> ContainerInformation:
    attrs = container.attrs or {}
    image = (attrs.get("Config") or {}).get("Image") or attrs.get("Image", "")
    return ContainerInformation(
        id=container.id,
        name=container.name or "",
        image=image,
        state=ContainerState.from_status(container.status),
    )
