"""Notebook schemas."""

from uuid import UUID

from pydantic import field_validator

from cognicanvas.db.models import NotebookTheme
from cognicanvas.schemas.base import BaseSchema, Title, UtcDatetime, reject_null


class NotebookBase(BaseSchema):
    """Base notebook schema."""

    title: Title
    description: str | None = None
    cover_image: str | None = None
    theme: NotebookTheme = NotebookTheme.DEFAULT


class NotebookCreate(NotebookBase):
    """Schema for creating a notebook under a subject given in the body."""

    subject_id: UUID


class NotebookCreateInSubject(NotebookBase):
    """Schema for creating a notebook when the subject comes from the path."""

    pass


class NotebookRead(NotebookBase):
    """Schema for reading notebook data."""

    id: UUID
    user_id: UUID
    subject_id: UUID
    note_count: int = 0
    created_at: UtcDatetime
    updated_at: UtcDatetime


class NotebookUpdate(BaseSchema):
    """Schema for updating a notebook. All fields optional."""

    title: Title | None = None
    description: str | None = None
    cover_image: str | None = None
    theme: NotebookTheme | None = None

    @field_validator("title", "theme", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
