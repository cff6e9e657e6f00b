"""HTTP API routes for demo login and presence."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ...models.user import LoginRequest, LogoutRequest, User
from ...services.container import get_user_directory
from ...services.users import UserDirectory

router = APIRouter()


@router.post("/api/auth/login", response_model=User)
async def login(request: LoginRequest, users: UserDirectory = Depends(get_user_directory)):
    """Join a workspace, creating the user on first login."""
    return users.login(request.username, request.workspace)


@router.post("/api/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(request: LogoutRequest, users: UserDirectory = Depends(get_user_directory)):
    """Mark the user inactive."""
    users.logout(request.username)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/api/presence", response_model=list[User])
async def list_active_users(
    workspace: str = Query(..., min_length=1),
    users: UserDirectory = Depends(get_user_directory),
):
    """Users active in the workspace during the presence window."""
    return users.list_active(workspace)


@router.get("/api/users/{username}", response_model=Optional[User])
async def get_current_user(username: str, users: UserDirectory = Depends(get_user_directory)):
    return users.get_current(username)


__all__ = ["router"]
