"""Subject routes, including the subject-scoped notebook collection."""

from uuid import UUID

from fastapi import APIRouter, status

from cognicanvas.api.deps import CurrentUser, DbSession
from cognicanvas.db import crud
from cognicanvas.schemas.notebooks import NotebookCreateInSubject, NotebookRead
from cognicanvas.schemas.subjects import SubjectCreate, SubjectRead, SubjectUpdate

router = APIRouter(prefix="/subjects", tags=["subjects"])


def _read(subject, notebook_count: int) -> SubjectRead:
    return SubjectRead.model_validate(subject).model_copy(update={"notebook_count": notebook_count})


@router.get("/", response_model=list[SubjectRead])
async def list_subjects(
    current_user: CurrentUser,
    db: DbSession,
) -> list[SubjectRead]:
    """List the current user's subjects, newest first, with notebook counts."""
    rows = await crud.list_subjects(db, current_user.id)
    return [_read(subject, count) for subject, count in rows]


@router.post("/", response_model=SubjectRead, status_code=status.HTTP_201_CREATED)
async def create_subject(
    data: SubjectCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> SubjectRead:
    """Create a new subject."""
    subject = await crud.create_subject(db, current_user.id, data.model_dump())
    return _read(subject, 0)


@router.get("/{subject_id}", response_model=SubjectRead)
async def get_subject(
    subject_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> SubjectRead:
    """Get a specific subject by ID."""
    subject = await crud.get_subject(db, current_user.id, subject_id)
    return _read(subject, await crud.count_notebooks(db, subject.id))


@router.patch("/{subject_id}", response_model=SubjectRead)
async def update_subject(
    subject_id: UUID,
    data: SubjectUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> SubjectRead:
    """Update a subject."""
    subject = await crud.update_subject(
        db, current_user.id, subject_id, data.model_dump(exclude_unset=True)
    )
    return _read(subject, await crud.count_notebooks(db, subject.id))


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subject(
    subject_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> None:
    """
    Delete a subject with its notebooks, notes, snippets and revisions.

    Returns 409 without deleting anything when the cascade is larger than
    the configured batch limit.
    """
    await crud.delete_subject(db, current_user.id, subject_id)


@router.get("/{subject_id}/notebooks", response_model=list[NotebookRead])
async def list_subject_notebooks(
    subject_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> list[NotebookRead]:
    """List a subject's notebooks, newest first, with note counts."""
    rows = await crud.list_notebooks(db, current_user.id, subject_id)
    return [
        NotebookRead.model_validate(notebook).model_copy(update={"note_count": count})
        for notebook, count in rows
    ]


@router.post(
    "/{subject_id}/notebooks",
    response_model=NotebookRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_subject_notebook(
    subject_id: UUID,
    data: NotebookCreateInSubject,
    current_user: CurrentUser,
    db: DbSession,
) -> NotebookRead:
    """Create a notebook in the subject given by the path."""
    notebook = await crud.create_notebook(db, current_user.id, subject_id, data.model_dump())
    return NotebookRead.model_validate(notebook)
