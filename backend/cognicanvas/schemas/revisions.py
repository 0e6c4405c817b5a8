"""Revision schedule schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, model_validator

from cognicanvas.schemas.base import BaseSchema, UtcDatetime


class RevisionCreate(BaseSchema):
    """Schedule a review of a note.

    Give either scheduled_at or days (from today). With neither, the smart
    suggestion for the note is used.
    """

    scheduled_at: UtcDatetime | None = None
    days: int | None = Field(None, ge=1, le=365)

    @model_validator(mode="after")
    def one_of(self) -> "RevisionCreate":
        if self.scheduled_at is not None and self.days is not None:
            raise ValueError("Provide scheduledAt or days, not both")
        return self


class RevisionRead(BaseSchema):
    """Schema for reading a revision schedule."""

    id: UUID
    user_id: UUID
    note_id: UUID
    notebook_id: UUID
    scheduled_at: UtcDatetime
    completed: bool
    completed_at: UtcDatetime | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class SuggestionRead(BaseSchema):
    label: str
    days: int
    description: str
    scheduled_at: datetime


class RevisionSuggestions(BaseSchema):
    """Smart suggestion for a note plus the fixed quick choices."""

    completed_count: int
    smart: SuggestionRead
    quick: list[SuggestionRead]
