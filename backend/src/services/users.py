"""User directory - demo logins and workspace presence."""

from __future__ import annotations

import logging
import sqlite3
import uuid
from typing import List, Optional

from ..models.user import User
from .clock import Clock, elapsed_ms, epoch_ms
from .database import DatabaseService
from .errors import NotFoundError
from .events import ActivityEvent, EventBus

logger = logging.getLogger(__name__)

DEFAULT_ACTIVE_WINDOW_MS = 5 * 60 * 1000

_USER_COLUMNS = "id, username, display_name, workspace, last_active"


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        display_name=row["display_name"],
        workspace=row["workspace"],
        last_active=row["last_active"],
    )


class UserDirectory:
    """Track which usernames are active in which workspace.

    A user counts as active while ``last_active`` lies strictly inside the
    trailing presence window. Users are never deleted; logging out backdates
    ``last_active`` to the window edge instead.
    """

    def __init__(
        self,
        db_service: DatabaseService | None = None,
        *,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
        active_window_ms: int = DEFAULT_ACTIVE_WINDOW_MS,
    ):
        self._db = db_service or DatabaseService()
        self._events = event_bus or EventBus()
        self._clock = clock or epoch_ms
        self.active_window_ms = active_window_ms

    def _active_cutoff(self) -> int:
        return self._clock() - self.active_window_ms

    def login(self, username: str, workspace: str) -> User:
        """Create the user on first login, otherwise move it to ``workspace``."""
        now = self._clock()
        conn = self._db.connect()
        try:
            with conn:
                row = conn.execute(
                    f"SELECT {_USER_COLUMNS} FROM users WHERE username = ?", (username,)
                ).fetchone()
                if row:
                    conn.execute(
                        "UPDATE users SET workspace = ?, last_active = ? WHERE id = ?",
                        (workspace, now, row["id"]),
                    )
                    user_id = row["id"]
                    created = False
                else:
                    user_id = uuid.uuid4().hex
                    conn.execute(
                        """
                        INSERT INTO users (id, username, display_name, workspace, last_active)
                        VALUES (?, ?, ?, ?, ?)
                        """,
                        (user_id, username, username, workspace, now),
                    )
                    created = True
                user = _row_to_user(
                    conn.execute(
                        f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
                    ).fetchone()
                )
        finally:
            conn.close()

        logger.info(
            "%s user %s in workspace %s", "Created" if created else "Logged in", username, workspace
        )
        self._events.emit(
            ActivityEvent(
                type="mutation",
                operation="auth.loginDemoUser",
                user_id=username,
                data={"workspace": workspace, "created": created},
                execution_time=elapsed_ms(self._clock, now),
            )
        )
        return user

    def logout(self, username: str) -> None:
        """Mark ``username`` inactive by backdating its last activity."""
        started = self._clock()
        conn = self._db.connect()
        try:
            with conn:
                cursor = conn.execute(
                    "UPDATE users SET last_active = ? WHERE username = ?",
                    (started - self.active_window_ms, username),
                )
                if cursor.rowcount == 0:
                    raise NotFoundError("User not found", detail={"username": username})
        finally:
            conn.close()

        logger.info("Logged out user %s", username)
        self._events.emit(
            ActivityEvent(
                type="mutation",
                operation="auth.logoutUser",
                user_id=username,
                execution_time=elapsed_ms(self._clock, started),
            )
        )

    def get_current(self, username: str) -> Optional[User]:
        conn = self._db.connect()
        try:
            row = conn.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE username = ?", (username,)
            ).fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    def list_active(self, workspace: str) -> List[User]:
        """Active users of ``workspace``, most recently active first."""
        conn = self._db.connect()
        try:
            cursor = conn.execute(
                f"""
                SELECT {_USER_COLUMNS} FROM users
                WHERE workspace = ? AND last_active > ?
                ORDER BY last_active DESC
                """,
                (workspace, self._active_cutoff()),
            )
            return [_row_to_user(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def count_active(self) -> int:
        """Number of active users across every workspace."""
        conn = self._db.connect()
        try:
            cursor = conn.execute(
                "SELECT COUNT(*) FROM users WHERE last_active > ?", (self._active_cutoff(),)
            )
            return cursor.fetchone()[0]
        finally:
            conn.close()

    def touch(self, username: str) -> None:
        """Refresh presence for ``username``; unknown users are ignored."""
        conn = self._db.connect()
        try:
            with conn:
                conn.execute(
                    "UPDATE users SET last_active = ? WHERE username = ?",
                    (self._clock(), username),
                )
        finally:
            conn.close()


__all__ = ["UserDirectory", "DEFAULT_ACTIVE_WINDOW_MS"]
