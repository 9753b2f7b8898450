"""Command layer — the concrete command tree.

Each module declares command nodes; :class:`RootCommand` ties them
together.  The tree is built by explicit construction, never by
discovery.
"""

from boxctl.commands.root import RootCommand

__all__: list[str] = ["RootCommand"]
