"""Docker SDK loading and error translation shared by the adapters.

This module and the two adapters next to it are the **only** places
that import ``docker``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from boxctl.exceptions import (
    ContainerNotFoundError,
    EnvironmentError,
    ImageNotFoundError,
    ServiceError,
    ServiceUnavailableError,
)

DAEMON_HINT = "Is the Docker daemon running? Check DOCKER_HOST or the selected session."


def load_docker() -> Any:
    """Import and return the ``docker`` package or raise ``EnvironmentError``."""
    try:
        import docker
        import docker.errors
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "docker is not installed. Install with: pip install docker",
        ) from exc
    return docker


@contextmanager
def translate_errors(subject: str) -> Iterator[None]:
    """Re-raise Docker SDK and transport errors as :class:`ServiceError`.

    Parameters
    ----------
    subject:
        Container id or image name the wrapped call acts on; used in
        the not-found messages.
    """
    import requests

    errors = load_docker().errors
    try:
        yield
    except errors.ImageNotFound as exc:
        raise ImageNotFoundError(
            f"No such image: {subject}",
            hint="Check the image name, or pull it with --pull always.",
        ) from exc
    except errors.NotFound as exc:
        raise ContainerNotFoundError(
            f"No such container: {subject}",
            hint="List containers with: boxctl list --all",
        ) from exc
    except errors.APIError as exc:
        raise ServiceError(str(exc.explanation or exc)) from exc
    except errors.DockerException as exc:
        raise ServiceUnavailableError(
            f"Cannot connect to the Docker daemon: {exc}",
            hint=DAEMON_HINT,
        ) from exc
    except requests.exceptions.RequestException as exc:
        raise ServiceUnavailableError(
            f"Lost connection to the Docker daemon: {exc}",
            hint=DAEMON_HINT,
        ) from exc
