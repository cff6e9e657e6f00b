"""Caller identity dependency.

Identity is trusted as supplied: the ``X-User-Id`` and ``X-Workspace``
headers become the principal every note operation runs as.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Header

from ...services.authorization import Principal


def get_principal(
    user_id: Annotated[str, Header(alias="X-User-Id", min_length=1)],
    workspace: Annotated[str, Header(alias="X-Workspace", min_length=1)],
) -> Principal:
    """Build the principal from request headers (missing headers fail validation)."""
    return Principal(user_id=user_id, workspace=workspace)


__all__ = ["get_principal"]
