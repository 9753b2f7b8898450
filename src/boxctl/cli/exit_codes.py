"""Process exit codes returned by :func:`boxctl.cli.app.main`."""

from __future__ import annotations

SUCCESS: int = 0
"""The command ran to completion, or help was shown."""

GENERAL_ERROR: int = 1
"""A :class:`~boxctl.exceptions.BoxctlError` stopped the command."""

UNEXPECTED_ERROR: int = 2
"""Any other exception reached the error boundary."""

KEYBOARD_INTERRUPT: int = 130
"""Interrupted with Ctrl+C (128 + SIGINT)."""
