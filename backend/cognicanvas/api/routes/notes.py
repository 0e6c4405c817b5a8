"""Notes CRUD routes and structural editing of note content."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Query, status

from cognicanvas.api.deps import CurrentUser, DbSession
from cognicanvas.db import crud
from cognicanvas.db.models import Note
from cognicanvas.editor import Document, new_fragment
from cognicanvas.schemas.notes import (
    AnyFragmentIn,
    FragmentRead,
    FragmentUpdate,
    NoteCreate,
    NoteRead,
    NoteUpdate,
    NoteWithFragments,
)

router = APIRouter(prefix="/notes", tags=["notes"])


def _with_fragments(note: Note, document: Document) -> NoteWithFragments:
    return NoteWithFragments.model_validate(
        {
            **NoteRead.model_validate(note).model_dump(),
            "fragments": [FragmentRead.model_validate(f) for f in document.fragments()],
        }
    )


@router.get("/", response_model=list[NoteRead])
async def list_notes(
    current_user: CurrentUser,
    db: DbSession,
    notebook_id: Annotated[UUID | None, Query(alias="notebookId")] = None,
) -> list[NoteRead]:
    """List notes for the current user, newest first, optionally for one notebook."""
    notes = await crud.list_notes(db, current_user.id, notebook_id)
    return [NoteRead.model_validate(n) for n in notes]


@router.post("/", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def create_note(
    data: NoteCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> NoteRead:
    """Create a note in a notebook owned by the current user."""
    fields = data.model_dump(exclude={"notebook_id"})
    note = await crud.create_note(db, current_user.id, data.notebook_id, fields)
    return NoteRead.model_validate(note)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> NoteRead:
    """Get a specific note by ID."""
    note = await crud.get_note(db, current_user.id, note_id)
    return NoteRead.model_validate(note)


@router.patch("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: UUID,
    data: NoteUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> NoteRead:
    """Save a note. Content is replaced as submitted."""
    note = await crud.update_note(
        db, current_user.id, note_id, data.model_dump(exclude_unset=True)
    )
    return NoteRead.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> None:
    """Delete a note with its snippets and revision schedules."""
    await crud.delete_note(db, current_user.id, note_id)


# =============================================================================
# FRAGMENTS
# =============================================================================


@router.get("/{note_id}/fragments", response_model=list[FragmentRead])
async def list_fragments(
    note_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> list[FragmentRead]:
    """Structural fragments of the note content, in document order."""
    note = await crud.get_note(db, current_user.id, note_id)
    return [FragmentRead.model_validate(f) for f in Document.from_html(note.content).fragments()]


@router.post(
    "/{note_id}/fragments",
    response_model=NoteWithFragments,
    status_code=status.HTTP_201_CREATED,
)
async def insert_fragment(
    note_id: UUID,
    data: Annotated[AnyFragmentIn, Body(discriminator="kind")],
    current_user: CurrentUser,
    db: DbSession,
) -> NoteWithFragments:
    """Insert a heading, list, quote, code block, image, drawing or PDF card."""
    note = await crud.get_note(db, current_user.id, note_id)
    fragment = new_fragment(data.kind, **data.model_dump(exclude={"kind", "index"}))

    document = Document.from_html(note.content)
    document.insert(fragment, data.index)
    note = await crud.update_note(db, current_user.id, note_id, {"content": document.to_html()})
    return _with_fragments(note, document)


@router.patch("/{note_id}/fragments/{fragment_id}", response_model=NoteWithFragments)
async def update_fragment(
    note_id: UUID,
    fragment_id: str,
    data: FragmentUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> NoteWithFragments:
    """Resize an image or drawing, or rotate an image."""
    note = await crud.get_note(db, current_user.id, note_id)
    document = Document.from_html(note.content)
    document.update(fragment_id, width=data.width, rotation=data.rotation)
    note = await crud.update_note(db, current_user.id, note_id, {"content": document.to_html()})
    return _with_fragments(note, document)


@router.delete("/{note_id}/fragments/{fragment_id}", response_model=NoteWithFragments)
async def delete_fragment(
    note_id: UUID,
    fragment_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> NoteWithFragments:
    """Remove a fragment. Quotes keep their text as a plain paragraph."""
    note = await crud.get_note(db, current_user.id, note_id)
    document = Document.from_html(note.content)
    document.remove(fragment_id)
    note = await crud.update_note(db, current_user.id, note_id, {"content": document.to_html()})
    return _with_fragments(note, document)
