"""User presence models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Demo user record with workspace presence."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "6f1c2b9e4d7a4c0e9a3b5d8f1e2c7a90",
                "username": "alice",
                "display_name": "alice",
                "workspace": "teamA",
                "last_active": 1736935800000,
            }
        }
    )

    id: str = Field(..., description="Stable user ID")
    username: str = Field(..., min_length=1, description="Unique login name")
    display_name: str = Field(..., description="Name shown in presence lists")
    workspace: str = Field(..., description="Workspace joined on the latest login")
    last_active: int = Field(..., description="Last activity (epoch ms)")


class LoginRequest(BaseModel):
    """Request payload to join a workspace."""

    username: str = Field(..., min_length=1, max_length=64)
    workspace: str = Field(..., min_length=1, max_length=64)


class LogoutRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)


__all__ = ["User", "LoginRequest", "LogoutRequest"]
