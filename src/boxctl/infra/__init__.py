"""Infrastructure layer — container engine integration.

This layer wraps all interaction with the Docker SDK and the operating
system.  Every raw third-party exception must be caught here and
re-raised as a :class:`~boxctl.exceptions.BoxctlError` subclass.

Rules
-----
* No imports from ``cli``, ``commands`` or ``tasks``.
* No user-facing output; progress and process output go through the
  callbacks handed in by the caller.
* Classes satisfy the protocols in :mod:`boxctl.core.protocols`
  structurally.
"""
