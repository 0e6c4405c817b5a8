"""
Persistence adapter.

Thin async functions over the ORM. Every function takes the session and the
owning user's id explicitly and scopes its query by user_id. Callers get plain
ORM objects back (or tuples with child counts for list views).

Error contract:
- NotFoundError: resource missing or owned by another user
- BatchLimitExceeded: a cascade would exceed settings.max_cascade_batch
- ParentMismatchError: supplied parent ids disagree with the stored hierarchy
- DataAccessError: anything the store itself raised (SQLAlchemyError)
"""

import functools
import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cognicanvas.config import get_settings
from cognicanvas.db.models import (
    ImportantSnippet,
    Note,
    Notebook,
    RevisionSchedule,
    Subject,
    User,
    utcnow,
)

logger = logging.getLogger(__name__)


# =============================================================================
# ERRORS
# =============================================================================


class DataAccessError(Exception):
    """The underlying store failed."""


class NotFoundError(Exception):
    """Requested resource does not exist for this user."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"{resource} not found")


class BatchLimitExceeded(Exception):
    """A cascading delete would exceed the per-batch operation limit."""

    def __init__(self, operations: int, limit: int):
        self.operations = operations
        self.limit = limit
        super().__init__(
            f"Delete would touch {operations} documents, more than the batch limit of {limit}"
        )


class ParentMismatchError(ValueError):
    """Supplied notebook/subject ids do not match the note's actual parents."""


def _store_call(func_):
    """Log and wrap store failures as DataAccessError, rolling the session back."""

    @functools.wraps(func_)
    async def wrapper(db: AsyncSession, *args, **kwargs):
        try:
            return await func_(db, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception("Store error in %s", func_.__name__)
            await db.rollback()
            raise DataAccessError(str(e)) from e

    return wrapper


async def _get_owned(db: AsyncSession, model: type, resource_id: UUID, user_id: UUID, label: str):
    result = await db.execute(
        select(model).where(model.id == resource_id, model.user_id == user_id)
    )
    resource = result.scalar_one_or_none()
    if resource is None:
        raise NotFoundError(label)
    return resource


def _apply_changes(obj: Any, changes: dict[str, Any]) -> None:
    for key, value in changes.items():
        setattr(obj, key, value)


# =============================================================================
# USERS
# =============================================================================


@_store_call
async def get_user(db: AsyncSession, user_id: UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


@_store_call
async def get_or_create_user(db: AsyncSession, email: str, name: str) -> User:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user is None:
        user = User(email=email, name=name)
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info("Created user %s", email)
    return user


# =============================================================================
# SUBJECTS
# =============================================================================


def _notebook_count_column():
    return (
        select(func.count(Notebook.id))
        .where(Notebook.subject_id == Subject.id)
        .correlate(Subject)
        .scalar_subquery()
    )


@_store_call
async def create_subject(db: AsyncSession, user_id: UUID, data: dict[str, Any]) -> Subject:
    subject = Subject(user_id=user_id, **data)
    db.add(subject)
    await db.commit()
    await db.refresh(subject)
    return subject


@_store_call
async def list_subjects(db: AsyncSession, user_id: UUID) -> list[tuple[Subject, int]]:
    """List subjects newest first, each paired with its notebook count."""
    stmt = (
        select(Subject, _notebook_count_column())
        .where(Subject.user_id == user_id)
        .order_by(Subject.created_at.desc())
    )
    result = await db.execute(stmt)
    return [(subject, count) for subject, count in result.all()]


@_store_call
async def get_subject(db: AsyncSession, user_id: UUID, subject_id: UUID) -> Subject:
    return await _get_owned(db, Subject, subject_id, user_id, "Subject")


@_store_call
async def update_subject(
    db: AsyncSession, user_id: UUID, subject_id: UUID, changes: dict[str, Any]
) -> Subject:
    subject = await _get_owned(db, Subject, subject_id, user_id, "Subject")
    _apply_changes(subject, changes)
    await db.commit()
    await db.refresh(subject)
    return subject


@_store_call
async def count_notebooks(db: AsyncSession, subject_id: UUID) -> int:
    result = await db.execute(
        select(func.count(Notebook.id)).where(Notebook.subject_id == subject_id)
    )
    return result.scalar() or 0


@_store_call
async def delete_subject(db: AsyncSession, user_id: UUID, subject_id: UUID) -> int:
    """
    Delete a subject with all of its notebooks and notes.

    Child references are gathered first (notebooks, then the notes of each
    notebook), counted against settings.max_cascade_batch, and only then
    deleted in a single transaction. Snippets and revision schedules of the
    removed notes go with them.

    Returns the number of documents (notes + notebooks + subject) removed.
    """
    await _get_owned(db, Subject, subject_id, user_id, "Subject")

    notebook_ids = list(
        (await db.execute(select(Notebook.id).where(Notebook.subject_id == subject_id))).scalars()
    )
    note_ids: list[UUID] = []
    for notebook_id in notebook_ids:
        result = await db.execute(select(Note.id).where(Note.notebook_id == notebook_id))
        note_ids.extend(result.scalars())

    operations = len(note_ids) + len(notebook_ids) + 1
    limit = get_settings().max_cascade_batch
    if operations > limit:
        logger.warning(
            "Refusing to delete subject %s: %d operations exceeds batch limit %d",
            subject_id, operations, limit,
        )
        raise BatchLimitExceeded(operations, limit)

    if note_ids:
        await db.execute(delete(RevisionSchedule).where(RevisionSchedule.note_id.in_(note_ids)))
        await db.execute(delete(ImportantSnippet).where(ImportantSnippet.note_id.in_(note_ids)))
        await db.execute(delete(Note).where(Note.id.in_(note_ids)))
    await db.execute(delete(ImportantSnippet).where(ImportantSnippet.subject_id == subject_id))
    if notebook_ids:
        await db.execute(delete(Notebook).where(Notebook.id.in_(notebook_ids)))
    await db.execute(delete(Subject).where(Subject.id == subject_id))
    await db.commit()

    logger.info(
        "Deleted subject %s with %d notebooks and %d notes",
        subject_id, len(notebook_ids), len(note_ids),
    )
    return operations


# =============================================================================
# NOTEBOOKS
# =============================================================================


def _note_count_column():
    return (
        select(func.count(Note.id))
        .where(Note.notebook_id == Notebook.id)
        .correlate(Notebook)
        .scalar_subquery()
    )


@_store_call
async def create_notebook(
    db: AsyncSession, user_id: UUID, subject_id: UUID, data: dict[str, Any]
) -> Notebook:
    await _get_owned(db, Subject, subject_id, user_id, "Subject")
    notebook = Notebook(user_id=user_id, subject_id=subject_id, **data)
    db.add(notebook)
    await db.commit()
    await db.refresh(notebook)
    return notebook


@_store_call
async def list_notebooks(
    db: AsyncSession, user_id: UUID, subject_id: UUID
) -> list[tuple[Notebook, int]]:
    """List a subject's notebooks newest first with note counts. Unknown subjects yield []."""
    stmt = (
        select(Notebook, _note_count_column())
        .where(Notebook.user_id == user_id, Notebook.subject_id == subject_id)
        .order_by(Notebook.created_at.desc())
    )
    result = await db.execute(stmt)
    return [(notebook, count) for notebook, count in result.all()]


@_store_call
async def get_notebook(db: AsyncSession, user_id: UUID, notebook_id: UUID) -> Notebook:
    return await _get_owned(db, Notebook, notebook_id, user_id, "Notebook")


@_store_call
async def update_notebook(
    db: AsyncSession, user_id: UUID, notebook_id: UUID, changes: dict[str, Any]
) -> Notebook:
    notebook = await _get_owned(db, Notebook, notebook_id, user_id, "Notebook")
    _apply_changes(notebook, changes)
    await db.commit()
    await db.refresh(notebook)
    return notebook


@_store_call
async def count_notes(db: AsyncSession, notebook_id: UUID) -> int:
    result = await db.execute(select(func.count(Note.id)).where(Note.notebook_id == notebook_id))
    return result.scalar() or 0


@_store_call
async def delete_notebook(db: AsyncSession, user_id: UUID, notebook_id: UUID) -> int:
    """Delete a notebook and its notes in one transaction. Returns documents removed."""
    await _get_owned(db, Notebook, notebook_id, user_id, "Notebook")

    note_ids = list(
        (await db.execute(select(Note.id).where(Note.notebook_id == notebook_id))).scalars()
    )
    operations = len(note_ids) + 1
    limit = get_settings().max_cascade_batch
    if operations > limit:
        raise BatchLimitExceeded(operations, limit)

    if note_ids:
        await db.execute(delete(RevisionSchedule).where(RevisionSchedule.note_id.in_(note_ids)))
        await db.execute(delete(ImportantSnippet).where(ImportantSnippet.note_id.in_(note_ids)))
        await db.execute(delete(Note).where(Note.id.in_(note_ids)))
    await db.execute(delete(Notebook).where(Notebook.id == notebook_id))
    await db.commit()

    logger.info("Deleted notebook %s with %d notes", notebook_id, len(note_ids))
    return operations


# =============================================================================
# NOTES
# =============================================================================


@_store_call
async def create_note(
    db: AsyncSession, user_id: UUID, notebook_id: UUID, data: dict[str, Any]
) -> Note:
    await _get_owned(db, Notebook, notebook_id, user_id, "Notebook")
    note = Note(user_id=user_id, notebook_id=notebook_id, **data)
    db.add(note)
    await db.commit()
    await db.refresh(note)
    return note


@_store_call
async def list_notes(
    db: AsyncSession, user_id: UUID, notebook_id: UUID | None = None
) -> list[Note]:
    query = select(Note).where(Note.user_id == user_id)
    if notebook_id:
        query = query.where(Note.notebook_id == notebook_id)
    query = query.order_by(Note.created_at.desc())
    result = await db.execute(query)
    return list(result.scalars())


@_store_call
async def get_note(db: AsyncSession, user_id: UUID, note_id: UUID) -> Note:
    return await _get_owned(db, Note, note_id, user_id, "Note")


@_store_call
async def update_note(
    db: AsyncSession, user_id: UUID, note_id: UUID, changes: dict[str, Any]
) -> Note:
    """Overwrite the given fields. Content is replaced wholesale (last write wins)."""
    note = await _get_owned(db, Note, note_id, user_id, "Note")
    _apply_changes(note, changes)
    await db.commit()
    await db.refresh(note)
    return note


@_store_call
async def delete_note(db: AsyncSession, user_id: UUID, note_id: UUID) -> None:
    await _get_owned(db, Note, note_id, user_id, "Note")
    await db.execute(delete(RevisionSchedule).where(RevisionSchedule.note_id == note_id))
    await db.execute(delete(ImportantSnippet).where(ImportantSnippet.note_id == note_id))
    await db.execute(delete(Note).where(Note.id == note_id))
    await db.commit()


# =============================================================================
# IMPORTANT SNIPPETS
# =============================================================================


@_store_call
async def resolve_note_lineage(
    db: AsyncSession, user_id: UUID, note_id: UUID
) -> tuple[Note, Notebook, Subject]:
    """Load a note together with its notebook and subject."""
    stmt = (
        select(Note, Notebook, Subject)
        .join(Notebook, Note.notebook_id == Notebook.id)
        .join(Subject, Notebook.subject_id == Subject.id)
        .where(Note.id == note_id, Note.user_id == user_id)
    )
    row = (await db.execute(stmt)).one_or_none()
    if row is None:
        raise NotFoundError("Note")
    note, notebook, subject = row
    return note, notebook, subject


@_store_call
async def create_snippet(
    db: AsyncSession,
    user_id: UUID,
    note_id: UUID,
    content: str,
    notebook_id: UUID | None = None,
    subject_id: UUID | None = None,
) -> tuple[ImportantSnippet, Note]:
    """
    Persist an important snippet for a note.

    Display fields are copied from the note's current lineage. If the caller
    supplies notebook_id/subject_id they must match that lineage.
    """
    note, notebook, subject = await resolve_note_lineage(db, user_id, note_id)
    if notebook_id is not None and notebook_id != notebook.id:
        raise ParentMismatchError("notebookId does not match the note's notebook")
    if subject_id is not None and subject_id != subject.id:
        raise ParentMismatchError("subjectId does not match the note's subject")

    snippet = ImportantSnippet(
        user_id=user_id,
        note_id=note.id,
        notebook_id=notebook.id,
        subject_id=subject.id,
        content=content,
        note_title=note.title,
        notebook_name=notebook.title,
        subject_name=subject.name,
        subject_color=subject.color,
    )
    db.add(snippet)
    await db.commit()
    await db.refresh(snippet)
    logger.info("Created important snippet %s for note %s", snippet.id, note.id)
    return snippet, note


async def increment_snippet_count(db: AsyncSession, note_id: UUID) -> int | None:
    """
    Bump a note's important_snippet_count.

    Best effort: failures are logged and swallowed so the snippet creation
    that precedes it still reports success. Returns the new count, or None.
    """
    try:
        await db.execute(
            update(Note)
            .where(Note.id == note_id)
            .values(
                important_snippet_count=Note.important_snippet_count + 1,
                updated_at=utcnow(),
            )
        )
        await db.commit()
        result = await db.execute(
            select(Note.important_snippet_count).where(Note.id == note_id)
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError:
        logger.exception("Error updating important snippet count for note %s", note_id)
        await db.rollback()
        return None


@_store_call
async def list_snippets(
    db: AsyncSession, user_id: UUID, subject_id: UUID | None = None
) -> list[ImportantSnippet]:
    query = select(ImportantSnippet).where(ImportantSnippet.user_id == user_id)
    if subject_id:
        query = query.where(ImportantSnippet.subject_id == subject_id)
    query = query.order_by(ImportantSnippet.created_at.desc())
    result = await db.execute(query)
    return list(result.scalars())


# =============================================================================
# REVISION SCHEDULES
# =============================================================================


@_store_call
async def create_revision(
    db: AsyncSession, user_id: UUID, note_id: UUID, scheduled_at: datetime
) -> RevisionSchedule:
    note = await _get_owned(db, Note, note_id, user_id, "Note")
    revision = RevisionSchedule(
        user_id=user_id,
        note_id=note.id,
        notebook_id=note.notebook_id,
        scheduled_at=scheduled_at,
    )
    db.add(revision)
    await db.commit()
    await db.refresh(revision)
    return revision


@_store_call
async def list_revisions(
    db: AsyncSession, user_id: UUID, include_completed: bool = False
) -> list[RevisionSchedule]:
    query = select(RevisionSchedule).where(RevisionSchedule.user_id == user_id)
    if not include_completed:
        query = query.where(RevisionSchedule.completed.is_(False))
    query = query.order_by(RevisionSchedule.scheduled_at.asc())
    result = await db.execute(query)
    return list(result.scalars())


@_store_call
async def complete_revision(
    db: AsyncSession, user_id: UUID, revision_id: UUID
) -> RevisionSchedule:
    revision = await _get_owned(db, RevisionSchedule, revision_id, user_id, "Revision")
    if not revision.completed:
        revision.completed = True
        revision.completed_at = utcnow()
        await db.commit()
        await db.refresh(revision)
    return revision


@_store_call
async def delete_revision(db: AsyncSession, user_id: UUID, revision_id: UUID) -> None:
    revision = await _get_owned(db, RevisionSchedule, revision_id, user_id, "Revision")
    await db.delete(revision)
    await db.commit()


@_store_call
async def count_completed_revisions(db: AsyncSession, user_id: UUID, note_id: UUID) -> int:
    result = await db.execute(
        select(func.count(RevisionSchedule.id)).where(
            RevisionSchedule.user_id == user_id,
            RevisionSchedule.note_id == note_id,
            RevisionSchedule.completed.is_(True),
        )
    )
    return result.scalar() or 0
