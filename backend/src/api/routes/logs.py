"""HTTP API routes for the activity log."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...models.activity import ClearLogsResponse, LogEntry, LogStats
from ...services.activity_log import ActivityLogService
from ...services.container import get_activity_log_service

router = APIRouter()


@router.get("/api/logs", response_model=list[LogEntry])
async def get_logs(activity_log: ActivityLogService = Depends(get_activity_log_service)):
    """Retrieve recent activity, newest first."""
    return activity_log.list()


@router.get("/api/logs/stats", response_model=LogStats)
async def get_stats(activity_log: ActivityLogService = Depends(get_activity_log_service)):
    return activity_log.stats()


@router.delete("/api/logs", response_model=ClearLogsResponse)
async def clear_logs(activity_log: ActivityLogService = Depends(get_activity_log_service)):
    """Drop every entry; a single clear notice remains."""
    return ClearLogsResponse(deleted_count=activity_log.clear())


__all__ = ["router"]
