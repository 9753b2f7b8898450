"""CLI layer — entry point, terminal rendering and the error boundary.

This package is the outermost layer of the application.  It may import
from ``core``, ``tasks``, ``commands`` and ``infra``, but no other layer
may import from ``cli``.
"""
