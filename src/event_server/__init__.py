"""Event management REST backend."""

__version__ = "1.0.0"
