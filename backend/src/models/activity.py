"""Activity log models."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

LogType = Literal["query", "mutation", "subscription", "error"]


class LogEntry(BaseModel):
    """Single activity log record."""

    id: int
    type: LogType
    operation: str = Field(..., description="Operation identifier, e.g. notes.createNote")
    user_id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: int = Field(..., description="Insert time (epoch ms)")
    execution_time: Optional[int] = Field(None, ge=0, description="Duration in ms")


class LogStats(BaseModel):
    """Aggregates over the retained activity log window."""

    total_queries: int = 0
    total_mutations: int = 0
    average_execution_time: float = 0.0
    active_connections: int = 0


class ClearLogsResponse(BaseModel):
    deleted_count: int


__all__ = ["LogType", "LogEntry", "LogStats", "ClearLogsResponse"]
