"""Caller identity and workspace access checks.

There is no authentication: the principal is whatever username/workspace the
caller supplies. The check itself is a pure function so it can be tested
without touching storage.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models.note import Note
from .errors import UnauthorizedError


@dataclass(frozen=True)
class Principal:
    """Identity a store call runs as."""

    user_id: str
    workspace: str


def ensure_workspace_access(principal: Principal, note: Note) -> None:
    """Raise UnauthorizedError unless ``note`` belongs to the caller's workspace.

    Authorship is irrelevant: any member of the workspace may edit or delete.
    """
    if note.workspace != principal.workspace:
        raise UnauthorizedError(
            "Unauthorized: note belongs to a different workspace",
            detail={"note_id": note.id, "workspace": principal.workspace},
        )


__all__ = ["Principal", "ensure_workspace_access"]
