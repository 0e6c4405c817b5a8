"""Note schemas."""

from typing import Literal, Union
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from cognicanvas.db.models import NoteBackground
from cognicanvas.schemas.base import BaseSchema, Title, UtcDatetime, reject_null


class NoteBase(BaseSchema):
    """Base note schema.

    Content is HTML and is stored exactly as submitted, so whitespace is not
    stripped here; only the title is.
    """

    model_config = ConfigDict(str_strip_whitespace=False)

    title: Title
    content: str = ""
    background: NoteBackground = NoteBackground.DEFAULT


class NoteCreate(NoteBase):
    """Schema for creating a note in a notebook."""

    notebook_id: UUID


class NoteRead(NoteBase):
    """Schema for reading note data."""

    id: UUID
    user_id: UUID
    notebook_id: UUID
    important_snippet_count: int
    created_at: UtcDatetime
    updated_at: UtcDatetime


class NoteUpdate(BaseSchema):
    """Schema for saving a note. Provided fields overwrite stored ones."""

    model_config = ConfigDict(str_strip_whitespace=False)

    title: Title | None = None
    content: str | None = None
    background: NoteBackground | None = None

    @field_validator("title", "content", "background", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


# =============================================================================
# EDITOR FRAGMENTS
# =============================================================================


class FragmentInBase(BaseSchema):
    """Common fields for fragment insertion. index=None appends."""

    index: int | None = Field(None, ge=0)


class HeadingFragmentIn(FragmentInBase):
    kind: Literal["heading"]
    text: str = Field(..., min_length=1)
    level: int = Field(2, ge=1, le=3)


class ListFragmentIn(FragmentInBase):
    kind: Literal["list"]
    items: list[str] = Field(..., min_length=1)
    ordered: bool = False


class QuoteFragmentIn(FragmentInBase):
    kind: Literal["quote"]
    text: str = "Your quote here..."


class CodeFragmentIn(FragmentInBase):
    """Code keeps its indentation."""

    model_config = ConfigDict(str_strip_whitespace=False)

    kind: Literal["code"]
    code: str
    language: str | None = None
    title: str | None = None


class ImageFragmentIn(FragmentInBase):
    kind: Literal["image"]
    src: str = Field(..., min_length=1)
    alt: str = "Inserted image"
    width: int | None = Field(None, ge=16, le=4000)


class DrawingFragmentIn(FragmentInBase):
    """A finished drawing, flattened to an image data URL."""

    kind: Literal["drawing"]
    src: str

    @field_validator("src")
    @classmethod
    def must_be_image_data_url(cls, v: str) -> str:
        if not v.startswith("data:image/"):
            raise ValueError("Drawing must be an image data URL")
        return v


class PdfFragmentIn(FragmentInBase):
    kind: Literal["pdf"]
    filename: str = Field(..., min_length=1, max_length=255)
    size_bytes: int = Field(..., ge=0)


AnyFragmentIn = Union[
    HeadingFragmentIn,
    ListFragmentIn,
    QuoteFragmentIn,
    CodeFragmentIn,
    ImageFragmentIn,
    DrawingFragmentIn,
    PdfFragmentIn,
]


class FragmentUpdate(BaseSchema):
    """Resize and/or rotate an image or drawing."""

    width: int | None = Field(None, ge=16, le=4000)
    rotation: int | None = None


class FragmentRead(BaseSchema):
    """A structural block of a note's content."""

    id: str
    kind: str
    payload: dict


class NoteWithFragments(NoteRead):
    """Note plus the structural fragments found in its content."""

    fragments: list[FragmentRead]
