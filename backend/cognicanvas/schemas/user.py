"""User schemas."""

from uuid import UUID

from pydantic import EmailStr

from cognicanvas.schemas.base import BaseSchema, UtcDatetime


class UserRead(BaseSchema):
    """Schema for reading user data."""

    id: UUID
    email: EmailStr
    name: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
