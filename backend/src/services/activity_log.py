"""Activity log - fixed-capacity FIFO window over recent operations."""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Dict, List, Optional, get_args

from ..models.activity import LogEntry, LogStats, LogType
from .clock import Clock, epoch_ms
from .database import DatabaseService
from .errors import ValidationFailure
from .events import ActivityEvent
from .users import UserDirectory

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100
LOG_TYPES = frozenset(get_args(LogType))

_ENTRY_COLUMNS = "id, type, operation, user_id, data, timestamp, execution_time"


def _row_to_entry(row: sqlite3.Row) -> LogEntry:
    return LogEntry(
        id=row["id"],
        type=row["type"],
        operation=row["operation"],
        user_id=row["user_id"],
        data=json.loads(row["data"]) if row["data"] else {},
        timestamp=row["timestamp"],
        execution_time=row["execution_time"],
    )


class ActivityLogService:
    """Append-only telemetry stream capped at ``capacity`` entries.

    Insert and eviction share one transaction, so the table never holds more
    than ``capacity`` rows once an append returns. Evicted entries are gone
    for good. Ordering is by timestamp, insertion order breaking ties.
    """

    def __init__(
        self,
        db_service: DatabaseService | None = None,
        *,
        users: UserDirectory | None = None,
        clock: Clock | None = None,
        capacity: int = DEFAULT_CAPACITY,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._db = db_service or DatabaseService()
        self._clock = clock or epoch_ms
        self._users = users or UserDirectory(self._db, clock=self._clock)
        self.capacity = capacity

    def _insert(
        self,
        conn: sqlite3.Connection,
        type: LogType,
        operation: str,
        user_id: Optional[str],
        data: Optional[Dict[str, Any]],
        execution_time: Optional[int],
    ) -> None:
        conn.execute(
            """
            INSERT INTO activity_log (type, operation, user_id, data, timestamp, execution_time)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                type,
                operation,
                user_id,
                json.dumps(data or {}, default=str),
                self._clock(),
                execution_time,
            ),
        )

    def append(
        self,
        type: LogType,
        operation: str,
        user_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        execution_time: Optional[int] = None,
    ) -> None:
        """Record one entry and evict the oldest beyond capacity."""
        if type not in LOG_TYPES:
            raise ValidationFailure(
                f"Unknown log type: {type}", detail={"allowed": sorted(LOG_TYPES)}
            )
        conn = self._db.connect()
        try:
            with conn:
                self._insert(conn, type, operation, user_id, data, execution_time)
                conn.execute(
                    """
                    DELETE FROM activity_log
                    WHERE id NOT IN (
                        SELECT id FROM activity_log
                        ORDER BY timestamp DESC, id DESC
                        LIMIT ?
                    )
                    """,
                    (self.capacity,),
                )
        finally:
            conn.close()

    def record_event(self, event: ActivityEvent) -> None:
        """Event bus subscriber."""
        self.append(
            event.type,
            event.operation,
            user_id=event.user_id,
            data=event.data,
            execution_time=event.execution_time,
        )

    def _window(self, conn: sqlite3.Connection) -> List[LogEntry]:
        cursor = conn.execute(
            f"""
            SELECT {_ENTRY_COLUMNS} FROM activity_log
            ORDER BY timestamp DESC, id DESC
            LIMIT ?
            """,
            (self.capacity,),
        )
        return [_row_to_entry(row) for row in cursor.fetchall()]

    def list(self) -> List[LogEntry]:
        """Retained entries, newest first."""
        conn = self._db.connect()
        try:
            return self._window(conn)
        finally:
            conn.close()

    def stats(self) -> LogStats:
        """Aggregate the retained window plus current presence."""
        entries = self.list()

        total_queries = 0
        total_mutations = 0
        total_execution_time = 0
        execution_time_count = 0
        for entry in entries:
            if entry.type == "query":
                total_queries += 1
            elif entry.type == "mutation":
                total_mutations += 1
            if entry.execution_time is not None:
                total_execution_time += entry.execution_time
                execution_time_count += 1

        average = total_execution_time / execution_time_count if execution_time_count else 0.0
        return LogStats(
            total_queries=total_queries,
            total_mutations=total_mutations,
            average_execution_time=average,
            active_connections=self._users.count_active(),
        )

    def clear(self) -> int:
        """Delete every entry, leaving a single notice of how many were removed."""
        conn = self._db.connect()
        try:
            with conn:
                deleted = conn.execute("SELECT COUNT(*) FROM activity_log").fetchone()[0]
                conn.execute("DELETE FROM activity_log")
                self._insert(
                    conn,
                    "mutation",
                    "logs.clearLogs",
                    None,
                    {"message": "All logs cleared", "deletedCount": deleted},
                    None,
                )
        finally:
            conn.close()

        logger.info("Cleared %d activity log entries", deleted)
        return deleted


__all__ = ["ActivityLogService", "DEFAULT_CAPACITY"]
