"""Revision scheduling routes."""

from datetime import datetime, timezone
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from cognicanvas.api.deps import CurrentUser, DbSession
from cognicanvas.db import crud
from cognicanvas.schemas.revisions import (
    RevisionCreate,
    RevisionRead,
    RevisionSuggestions,
    SuggestionRead,
)
from cognicanvas.services.revisions import QUICK_SUGGESTIONS, smart_suggestion, suggested_time

router = APIRouter(tags=["revisions"])


def _suggestion(suggestion, now: datetime) -> SuggestionRead:
    return SuggestionRead(
        label=suggestion.label,
        days=suggestion.days,
        description=suggestion.description,
        scheduled_at=suggested_time(suggestion.days, now),
    )


@router.get("/notes/{note_id}/revisions/suggestion", response_model=RevisionSuggestions)
async def get_suggestion(
    note_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> RevisionSuggestions:
    """Suggested review times for a note, based on how often it was reviewed."""
    await crud.get_note(db, current_user.id, note_id)
    completed = await crud.count_completed_revisions(db, current_user.id, note_id)
    now = datetime.now(timezone.utc)
    return RevisionSuggestions(
        completed_count=completed,
        smart=_suggestion(smart_suggestion(completed), now),
        quick=[_suggestion(s, now) for s in QUICK_SUGGESTIONS],
    )


@router.post(
    "/notes/{note_id}/revisions",
    response_model=RevisionRead,
    status_code=status.HTTP_201_CREATED,
)
async def schedule_revision(
    note_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
    data: RevisionCreate | None = None,
) -> RevisionRead:
    """Schedule a review at a given time, a number of days ahead, or the smart default."""
    data = data or RevisionCreate()
    if data.scheduled_at is not None:
        scheduled_at = data.scheduled_at
    elif data.days is not None:
        scheduled_at = suggested_time(data.days)
    else:
        await crud.get_note(db, current_user.id, note_id)
        completed = await crud.count_completed_revisions(db, current_user.id, note_id)
        scheduled_at = suggested_time(smart_suggestion(completed).days)

    revision = await crud.create_revision(db, current_user.id, note_id, scheduled_at)
    return RevisionRead.model_validate(revision)


@router.get("/revisions", response_model=list[RevisionRead])
async def list_revisions(
    current_user: CurrentUser,
    db: DbSession,
    include_completed: Annotated[bool, Query(alias="includeCompleted")] = False,
) -> list[RevisionRead]:
    """List revision schedules, soonest first."""
    revisions = await crud.list_revisions(db, current_user.id, include_completed)
    return [RevisionRead.model_validate(r) for r in revisions]


@router.post("/revisions/{revision_id}/complete", response_model=RevisionRead)
async def complete_revision(
    revision_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> RevisionRead:
    """Mark a revision as done. Completing twice keeps the first completion time."""
    revision = await crud.complete_revision(db, current_user.id, revision_id)
    return RevisionRead.model_validate(revision)


@router.delete("/revisions/{revision_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_revision(
    revision_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
) -> None:
    """Delete a revision schedule."""
    await crud.delete_revision(db, current_user.id, revision_id)
