"""Note-related Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Note(BaseModel):
    """Note shared within a workspace."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0b5e8f3c1a2d4e6f8a9b0c1d2e3f4a5b",
                "user_id": "alice",
                "workspace": "teamA",
                "title": "Standup",
                "content": "Ship the search fix before Friday.",
                "created_at": 1736935800000,
                "updated_at": 1736939400000,
            }
        }
    )

    id: str = Field(..., description="Note ID")
    user_id: str = Field(..., description="Author username")
    workspace: str = Field(..., description="Owning workspace (immutable)")
    title: str
    content: str
    created_at: int = Field(..., description="Creation timestamp (epoch ms)")
    updated_at: int = Field(..., description="Last update timestamp (epoch ms)")


class NoteCreate(BaseModel):
    """Request payload to create a note."""

    title: str = Field(..., min_length=1, max_length=256)
    content: str = Field("", max_length=1_048_576)


class NoteUpdate(BaseModel):
    """Request payload to replace a note's title and content."""

    title: str = Field(..., min_length=1, max_length=256)
    content: str = Field(..., max_length=1_048_576)


class GenerateRequest(BaseModel):
    topic: Optional[str] = Field(None, min_length=1, max_length=256)


class GeneratedNote(BaseModel):
    """Title/content pair returned by the note generator."""

    title: str
    content: str


__all__ = ["Note", "NoteCreate", "NoteUpdate", "GenerateRequest", "GeneratedNote"]
