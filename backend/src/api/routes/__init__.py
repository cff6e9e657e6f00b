"""HTTP API route handlers."""

from . import auth, logs, notes

__all__ = ["auth", "notes", "logs"]
