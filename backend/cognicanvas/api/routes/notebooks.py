"""Notebook routes."""

from uuid import UUID

from fastapi import APIRouter, status

from cognicanvas.api.deps import CurrentUser, DbSession
from cognicanvas.db import crud
from cognicanvas.schemas.notebooks import NotebookCreate, NotebookRead, NotebookUpdate

router = APIRouter(prefix="/notebooks", tags=["notebooks"])


async def _read(db, notebook) -> NotebookRead:
    note_count = await crud.count_notes(db, notebook.id)
    return NotebookRead.model_validate(notebook).model_copy(update={"note_count": note_count})


@router.post("/", response_model=NotebookRead, status_code=status.HTTP_201_CREATED)
async def create_notebook(
    data: NotebookCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> NotebookRead:
    """Create a notebook. The subject must belong to the current user."""
    fields = data.model_dump(exclude={"subject_id"})
    notebook = await crud.create_notebook(db, current_user.id, data.subject_id, fields)
    return NotebookRead.model_validate(notebook)


@router.get("/{notebook_id}", response_model=NotebookRead)
async def get_notebook(
    notebook_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> NotebookRead:
    """Get a specific notebook by ID."""
    notebook = await crud.get_notebook(db, current_user.id, notebook_id)
    return await _read(db, notebook)


@router.patch("/{notebook_id}", response_model=NotebookRead)
async def update_notebook(
    notebook_id: UUID,
    data: NotebookUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> NotebookRead:
    """Update a notebook."""
    notebook = await crud.update_notebook(
        db, current_user.id, notebook_id, data.model_dump(exclude_unset=True)
    )
    return await _read(db, notebook)


@router.delete("/{notebook_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notebook(
    notebook_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> None:
    """Delete a notebook and everything in it."""
    await crud.delete_notebook(db, current_user.id, notebook_id)
