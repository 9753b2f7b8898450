"""Task layer — the steps command pipelines are built from.

Rules
-----
* A task takes the :class:`~boxctl.core.context.ExecutionContext` and
  returns nothing.
* Collaborators are reached only through ``context.services``.
* A task asserts the presence of every shared value it reads.
* No imports from ``cli`` or ``infra``.
"""
