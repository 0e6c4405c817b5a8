"""Base schema configuration."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel


def _ensure_utc(value: datetime) -> datetime:
    """Stores without timezone support hand back naive datetimes; those are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_ensure_utc)]
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
HexColor = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^#[0-9A-Fa-f]{6}$")]


def reject_null(value):
    """Before-validator for optional update fields whose column is NOT NULL."""
    if value is None:
        raise ValueError("may not be null")
    return value


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Fields are snake_case in Python and camelCase on the wire; either
    spelling is accepted on input.
    """

    model_config = ConfigDict(
        from_attributes=True,  # Enable ORM mode
        str_strip_whitespace=True,
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )
