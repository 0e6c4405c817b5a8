"""Important snippet schemas."""

from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from cognicanvas.schemas.base import BaseSchema, UtcDatetime


class SnippetCreate(BaseSchema):
    """Mark a selection of a note as important.

    content is the selected text, kept byte-for-byte (no stripping).
    occurrence picks which match of the text in the note gets highlighted.
    """

    model_config = ConfigDict(str_strip_whitespace=False)

    content: str
    note_id: UUID
    notebook_id: UUID
    subject_id: UUID
    occurrence: int = Field(0, ge=0)

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Selected text must not be empty")
        return v


class SnippetRead(BaseSchema):
    """Schema for reading an important snippet."""

    model_config = ConfigDict(str_strip_whitespace=False)

    id: UUID
    user_id: UUID
    content: str
    note_id: UUID
    notebook_id: UUID
    subject_id: UUID
    note_title: str
    notebook_name: str
    subject_name: str
    subject_color: str
    created_at: UtcDatetime


class SnippetCreated(SnippetRead):
    """Result of marking a snippet: the record plus what happened to the note."""

    highlighted: bool
    important_snippet_count: int | None = None
