"""boxctl — container command-line front end.

Resolves a command line against a tree of subcommands and runs the
selected command as a pipeline of tasks over a Docker-backed session.
"""

from boxctl.version import __version__

__all__: list[str] = ["__version__"]
