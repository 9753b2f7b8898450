"""Single source of truth for the boxctl version string."""

__version__ = "0.1.0"
