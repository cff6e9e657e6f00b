"""HTTP API routes for note operations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from ...models.note import GeneratedNote, GenerateRequest, Note, NoteCreate, NoteUpdate
from ...services.authorization import Principal
from ...services.container import get_note_generator, get_note_service
from ...services.note_generator import NoteGenerator
from ...services.notes import NoteService
from ..middleware import get_principal

router = APIRouter()


@router.get("/api/notes", response_model=list[Note])
async def list_notes(
    principal: Principal = Depends(get_principal),
    notes: NoteService = Depends(get_note_service),
):
    """List all notes in the caller's workspace."""
    return notes.list(principal.workspace)


@router.get("/api/notes/search", response_model=list[Note])
async def search_notes(
    q: str = Query("", max_length=256),
    principal: Principal = Depends(get_principal),
    notes: NoteService = Depends(get_note_service),
):
    """Case-insensitive substring search over titles and content."""
    return notes.search(principal.workspace, q)


@router.post("/api/notes/generate", response_model=GeneratedNote)
async def generate_note(
    request: GenerateRequest | None = None,
    principal: Principal = Depends(get_principal),
    generator: NoteGenerator = Depends(get_note_generator),
):
    """Generate a note with the configured AI provider and save it."""
    topic = request.topic if request else None
    return await generator.generate(principal, topic=topic)


@router.post("/api/notes", response_model=Note, status_code=status.HTTP_201_CREATED)
async def create_note(
    create: NoteCreate,
    principal: Principal = Depends(get_principal),
    notes: NoteService = Depends(get_note_service),
):
    """Create a new note."""
    return notes.create(principal, create.title, create.content)


@router.get("/api/notes/{note_id}", response_model=Note)
async def get_note(
    note_id: str,
    principal: Principal = Depends(get_principal),
    notes: NoteService = Depends(get_note_service),
):
    return notes.get(principal, note_id)


@router.put("/api/notes/{note_id}", response_model=Note)
async def update_note(
    note_id: str,
    update: NoteUpdate,
    principal: Principal = Depends(get_principal),
    notes: NoteService = Depends(get_note_service),
):
    """Replace a note's title and content."""
    return notes.update(principal, note_id, update.title, update.content)


@router.delete("/api/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    principal: Principal = Depends(get_principal),
    notes: NoteService = Depends(get_note_service),
):
    """Delete a note."""
    notes.delete(principal, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
