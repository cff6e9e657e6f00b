"""Note store - workspace-scoped CRUD and substring search."""

from __future__ import annotations

import logging
import sqlite3
import uuid
from typing import List, Optional

from ..models.note import Note
from .authorization import Principal, ensure_workspace_access
from .clock import Clock, elapsed_ms, epoch_ms
from .database import DatabaseService
from .errors import NotFoundError, ServiceError
from .events import ActivityEvent, EventBus
from .users import UserDirectory

logger = logging.getLogger(__name__)

_NOTE_COLUMNS = "id, user_id, workspace, title, content, created_at, updated_at"


def _row_to_note(row: sqlite3.Row) -> Note:
    return Note(
        id=row["id"],
        user_id=row["user_id"],
        workspace=row["workspace"],
        title=row["title"],
        content=row["content"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def matches_query(note: Note, query: str) -> bool:
    """Case-insensitive substring match against title or content."""
    needle = query.lower()
    return needle in note.title.lower() or needle in note.content.lower()


class NoteService:
    """Notes shared inside a workspace.

    Every mutation touches the author's presence and emits an activity event
    carrying sizes rather than content.
    """

    def __init__(
        self,
        db_service: DatabaseService | None = None,
        *,
        users: UserDirectory | None = None,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
    ):
        self._db = db_service or DatabaseService()
        self._clock = clock or epoch_ms
        self._events = event_bus or EventBus()
        self._users = users or UserDirectory(self._db, event_bus=self._events, clock=self._clock)

    def _fetch(self, conn: sqlite3.Connection, note_id: str) -> Optional[Note]:
        row = conn.execute(
            f"SELECT {_NOTE_COLUMNS} FROM notes WHERE id = ?", (note_id,)
        ).fetchone()
        return _row_to_note(row) if row else None

    def _load_owned(self, conn: sqlite3.Connection, principal: Principal, note_id: str) -> Note:
        note = self._fetch(conn, note_id)
        if note is None:
            raise NotFoundError("Note not found", detail={"note_id": note_id})
        ensure_workspace_access(principal, note)
        return note

    def _emit_failure(
        self, operation: str, principal: Principal, note_id: str, exc: ServiceError, started: int
    ) -> None:
        self._events.emit(
            ActivityEvent(
                type="error",
                operation=operation,
                user_id=principal.user_id,
                data={"noteId": note_id, "workspace": principal.workspace, "error": exc.message},
                execution_time=elapsed_ms(self._clock, started),
            )
        )

    def list(self, workspace: str) -> List[Note]:
        """All notes in ``workspace``, most recently updated first."""
        conn = self._db.connect()
        try:
            cursor = conn.execute(
                f"""
                SELECT {_NOTE_COLUMNS} FROM notes
                WHERE workspace = ?
                ORDER BY updated_at DESC, created_at DESC
                """,
                (workspace,),
            )
            return [_row_to_note(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def search(self, workspace: str, query: str) -> List[Note]:
        """Filter ``list(workspace)`` by a case-insensitive substring.

        A blank query applies no filter.
        """
        started = self._clock()
        notes = self.list(workspace)
        if query.strip():
            notes = [note for note in notes if matches_query(note, query)]
        self._events.emit(
            ActivityEvent(
                type="query",
                operation="notes.searchNotes",
                data={"workspace": workspace, "queryLength": len(query), "resultCount": len(notes)},
                execution_time=elapsed_ms(self._clock, started),
            )
        )
        return notes

    def get(self, principal: Principal, note_id: str) -> Note:
        conn = self._db.connect()
        try:
            return self._load_owned(conn, principal, note_id)
        finally:
            conn.close()

    def create(self, principal: Principal, title: str, content: str) -> Note:
        """Insert a note into the caller's workspace."""
        started = self._clock()
        note_id = uuid.uuid4().hex
        conn = self._db.connect()
        try:
            with conn:
                conn.execute(
                    f"INSERT INTO notes ({_NOTE_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (note_id, principal.user_id, principal.workspace, title, content, started, started),
                )
                note = self._fetch(conn, note_id)
        finally:
            conn.close()

        self._users.touch(principal.user_id)
        logger.info("Created note %s in workspace %s", note_id, principal.workspace)
        self._events.emit(
            ActivityEvent(
                type="mutation",
                operation="notes.createNote",
                user_id=principal.user_id,
                data={
                    "noteId": note_id,
                    "workspace": principal.workspace,
                    "titleLength": len(title),
                    "contentLength": len(content),
                },
                execution_time=elapsed_ms(self._clock, started),
            )
        )
        return note

    def update(self, principal: Principal, note_id: str, title: str, content: str) -> Note:
        """Replace title and content; workspace and created_at never change."""
        started = self._clock()
        conn = self._db.connect()
        try:
            with conn:
                existing = self._load_owned(conn, principal, note_id)
                updated_at = max(self._clock(), existing.created_at)
                conn.execute(
                    "UPDATE notes SET title = ?, content = ?, updated_at = ? WHERE id = ?",
                    (title, content, updated_at, note_id),
                )
                note = self._fetch(conn, note_id)
        except ServiceError as exc:
            self._emit_failure("notes.updateNote", principal, note_id, exc, started)
            raise
        finally:
            conn.close()

        self._users.touch(principal.user_id)
        logger.info("Updated note %s in workspace %s", note_id, principal.workspace)
        self._events.emit(
            ActivityEvent(
                type="mutation",
                operation="notes.updateNote",
                user_id=principal.user_id,
                data={
                    "noteId": note_id,
                    "workspace": principal.workspace,
                    "titleLength": len(title),
                    "contentLength": len(content),
                },
                execution_time=elapsed_ms(self._clock, started),
            )
        )
        return note

    def delete(self, principal: Principal, note_id: str) -> None:
        """Hard-delete a note owned by the caller's workspace."""
        started = self._clock()
        conn = self._db.connect()
        try:
            with conn:
                self._load_owned(conn, principal, note_id)
                conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
        except ServiceError as exc:
            self._emit_failure("notes.deleteNote", principal, note_id, exc, started)
            raise
        finally:
            conn.close()

        self._users.touch(principal.user_id)
        logger.info("Deleted note %s from workspace %s", note_id, principal.workspace)
        self._events.emit(
            ActivityEvent(
                type="mutation",
                operation="notes.deleteNote",
                user_id=principal.user_id,
                data={"noteId": note_id, "workspace": principal.workspace},
                execution_time=elapsed_ms(self._clock, started),
            )
        )


__all__ = ["NoteService", "matches_query"]
