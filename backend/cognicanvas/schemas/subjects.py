"""Subject schemas."""

from uuid import UUID

from pydantic import Field, field_validator

from cognicanvas.schemas.base import BaseSchema, HexColor, Title, UtcDatetime, reject_null


class SubjectBase(BaseSchema):
    """Base subject schema with common fields."""

    name: Title
    description: str | None = None
    color: HexColor = "#3B82F6"
    icon: str | None = Field("📚", max_length=16)


class SubjectCreate(SubjectBase):
    """Schema for creating a subject."""

    pass


class SubjectRead(SubjectBase):
    """Schema for reading subject data."""

    id: UUID
    user_id: UUID
    notebook_count: int = 0
    created_at: UtcDatetime
    updated_at: UtcDatetime


class SubjectUpdate(BaseSchema):
    """Schema for updating a subject. All fields optional."""

    name: Title | None = None
    description: str | None = None
    color: HexColor | None = None
    icon: str | None = Field(None, max_length=16)

    @field_validator("name", "color", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)
