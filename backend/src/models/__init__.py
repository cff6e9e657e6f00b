"""Pydantic models for data validation and serialization."""

from .activity import ClearLogsResponse, LogEntry, LogStats, LogType
from .note import GeneratedNote, GenerateRequest, Note, NoteCreate, NoteUpdate
from .user import LoginRequest, LogoutRequest, User

__all__ = [
    "User",
    "LoginRequest",
    "LogoutRequest",
    "Note",
    "NoteCreate",
    "NoteUpdate",
    "GenerateRequest",
    "GeneratedNote",
    "LogType",
    "LogEntry",
    "LogStats",
    "ClearLogsResponse",
]
