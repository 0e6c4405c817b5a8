"""Important snippet routes."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from cognicanvas.api.deps import CurrentUser, DbSession
from cognicanvas.db import crud
from cognicanvas.editor import HighlightNotFound, mark_text
from cognicanvas.schemas.snippets import SnippetCreate, SnippetCreated, SnippetRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/important-snippets", tags=["important-snippets"])


@router.get("", response_model=list[SnippetRead])
async def list_snippets(
    current_user: CurrentUser,
    db: DbSession,
    subject_id: Annotated[UUID | None, Query(alias="subjectId")] = None,
) -> list[SnippetRead]:
    """List the current user's snippets, newest first."""
    snippets = await crud.list_snippets(db, current_user.id, subject_id)
    return [SnippetRead.model_validate(s) for s in snippets]


@router.post("", response_model=SnippetCreated, status_code=status.HTTP_201_CREATED)
async def create_snippet(
    data: SnippetCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> SnippetCreated:
    """
    Mark a selection of a note as important.

    Order of writes:
    1. the snippet record (failure here fails the request)
    2. the highlight in the note content
    3. the note's snippet counter (best effort)
    """
    snippet, note = await crud.create_snippet(
        db,
        current_user.id,
        data.note_id,
        data.content,
        notebook_id=data.notebook_id,
        subject_id=data.subject_id,
    )
    # Later writes may roll back, which expires loaded rows
    created = SnippetRead.model_validate(snippet).model_dump()
    snippet_id, note_id, note_content = snippet.id, note.id, note.content

    highlighted = False
    try:
        marked = mark_text(note_content, data.content, data.occurrence, snippet_id=str(snippet_id))
    except HighlightNotFound:
        logger.warning("Snippet %s text not found in note %s; content left as is", snippet_id, note_id)
    else:
        try:
            await crud.update_note(db, current_user.id, note_id, {"content": marked})
            highlighted = True
        except crud.DataAccessError:
            logger.warning("Could not save highlight for snippet %s", snippet_id)

    count = await crud.increment_snippet_count(db, note_id)

    return SnippetCreated.model_validate(
        {
            **created,
            "highlighted": highlighted,
            "important_snippet_count": count,
        }
    )
