"""Custom exception hierarchy for boxctl.

All user-facing exceptions inherit from :class:`BoxctlError`.  Raw
third-party exceptions (e.g. from the Docker SDK) must NEVER propagate
beyond the infrastructure layer — they are caught there and re-raised
as a typed subclass defined here.

Hierarchy
---------
BoxctlError
├── CommandError
│   └── UnknownCommandError
├── ArgumentError
├── ArgumentValueError
├── InputFileError
├── ServiceError
│   ├── ContainerNotFoundError
│   ├── ImageNotFoundError
│   ├── ImagePullError
│   ├── SessionNotFoundError
│   └── ServiceUnavailableError
└── EnvironmentError

:class:`DataContractError` is deliberately outside the hierarchy: it
marks a broken task pipeline, not a condition the user can fix.
"""

from __future__ import annotations

from collections.abc import Iterable


class BoxctlError(Exception):
    """Base exception for all boxctl errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command resolution ----------------------------------------------------

class CommandError(BoxctlError):
    """Raised when the command line does not name a valid command."""


class UnknownCommandError(CommandError):
    """Raised when a token does not match any sub-command of its parent."""

    def __init__(self, token: str, valid_commands: Iterable[str]) -> None:
        self.token: str = token
        self.valid_commands: tuple[str, ...] = tuple(valid_commands)
        super().__init__(
            f"Unrecognized command: '{token}'",
            hint="Valid commands: " + ", ".join(self.valid_commands),
        )


# --- Arguments -------------------------------------------------------------

class ArgumentError(BoxctlError):
    """Raised when the command line is structurally invalid.

    Covers unknown flags, missing values, missing required arguments,
    excess positional values and exceeded occurrence limits.
    """


class ArgumentValueError(BoxctlError):
    """Raised when an argument value fails its semantic validation."""

    def __init__(
        self,
        argument: str,
        value: str,
        *,
        reason: str | None = None,
        hint: str | None = None,
    ) -> None:
        self.argument: str = argument
        self.value: str = value
        message = f"Invalid {argument} argument value: {value}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, hint=hint)


class InputFileError(BoxctlError):
    """Raised when a file named on the command line cannot be used."""


# --- External services -----------------------------------------------------

class ServiceError(BoxctlError):
    """Raised when a container or session service call fails."""


class ContainerNotFoundError(ServiceError):
    """Raised when the referenced container does not exist."""


class ImageNotFoundError(ServiceError):
    """Raised when the referenced image is not available locally."""


class ImagePullError(ServiceError):
    """Raised when pulling an image from its registry fails."""


class SessionNotFoundError(ServiceError):
    """Raised when the referenced session does not exist."""


class ServiceUnavailableError(ServiceError):
    """Raised when the container engine cannot be reached."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(BoxctlError):
    """Raised when a required runtime dependency is not available."""


# --- Programming contract --------------------------------------------------

class DataContractError(AssertionError):
    """Raised when a task reads or rewrites shared data out of contract.

    Reading a key no earlier task published, or publishing a key twice,
    is a defect in how a command assembled its pipeline.
    """
