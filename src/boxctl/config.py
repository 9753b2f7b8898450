"""Runtime settings read from ``BOXCTL_*`` environment variables."""

from __future__ import annotations

import os

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from boxctl.exceptions import BoxctlError

_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _default_shell() -> str:
    if os.name == "nt":
        return os.environ.get("COMSPEC", "cmd.exe")
    return os.environ.get("SHELL") or "/bin/sh"


class Settings(BaseSettings):
    """Process-wide settings.

    Attributes
    ----------
    log_level:
        Level name for the ``boxctl`` logger (``BOXCTL_LOG_LEVEL``).
    session:
        Session used when ``--session`` is not given; ``None`` means the
        engine's environment default (``BOXCTL_SESSION``).
    no_progress:
        Hide the image-pull progress bar (``BOXCTL_NO_PROGRESS``).
    shell:
        Program started by ``session shell`` (``BOXCTL_SHELL``).
    """

    model_config = SettingsConfigDict(
        env_prefix="BOXCTL_",
        case_sensitive=False,
        env_ignore_empty=True,
        frozen=True,
    )

    log_level: str = Field(default="WARNING", description="Level name for the boxctl logger")
    session: str | None = Field(default=None, description="Default session name")
    no_progress: bool = Field(default=False, description="Hide image-pull progress")
    shell: str = Field(default_factory=_default_shell)

    @field_validator("log_level", mode="before")
    @classmethod
    def _check_log_level(cls, value: object) -> str:
        level = str(value).strip().upper() or "WARNING"
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @property
    def show_progress(self) -> bool:
        return not self.no_progress


_HINTS: dict[str, str] = {
    "log_level": "Valid levels: " + ", ".join(_LOG_LEVELS),
    "no_progress": "Use 1, true, yes or on to hide progress; 0, false, no or off to show it.",
}


def load_settings() -> Settings:
    """Build :class:`Settings` from the process environment.

    Raises
    ------
    BoxctlError
        If a ``BOXCTL_*`` variable holds a value its setting rejects.
    """
    try:
        return Settings()
    except ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else ""
        raise BoxctlError(
            f"Invalid BOXCTL_{field.upper()}: {error['input']}",
            hint=_HINTS.get(field, error["msg"]),
        ) from exc
