"""
SQLAlchemy 2.0 Models for CogniCanvas.

Uses modern declarative syntax with Mapped[] type annotations.
All models use UUID primary keys. Column types are dialect-neutral so the
same metadata runs on PostgreSQL (asyncpg) and SQLite (aiosqlite).

Hierarchy: User -> Subject -> Notebook -> Note. ImportantSnippet and
RevisionSchedule hang off a Note. Cascades are issued explicitly by
cognicanvas.db.crud inside one transaction; the ondelete rules below are the
database-level backstop.
"""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cognicanvas.db.base import Base


def utcnow() -> datetime:
    """Timezone-aware current time (microsecond resolution, unlike NOW() on SQLite)."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================


class NotebookTheme(str, PyEnum):
    """Cover theme of a notebook."""

    DEFAULT = "default"
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    ORANGE = "orange"
    RED = "red"
    PINK = "pink"
    TEAL = "teal"


class NoteBackground(str, PyEnum):
    """Paper background of a note."""

    DEFAULT = "default"
    PARCHMENT = "parchment"
    GRADIENT = "gradient"
    GREEN = "green"
    PINK = "pink"
    TEAL = "teal"
    GRAY = "gray"
    YELLOW = "yellow"


# =============================================================================
# MODELS
# =============================================================================


class User(Base):
    """
    Core user account.

    Every domain row carries a user_id; there is no global "current user".
    """

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    subjects: Mapped[list["Subject"]] = relationship(
        "Subject", back_populates="user", passive_deletes=True
    )


class Subject(Base):
    """Top-level grouping of notebooks (e.g. "Calculus")."""

    __tablename__ = "subjects"
    __table_args__ = (Index("idx_subjects_user_created_at", "user_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#3B82F6")
    icon: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="subjects")
    notebooks: Mapped[list["Notebook"]] = relationship(
        "Notebook", back_populates="subject", passive_deletes=True
    )


class Notebook(Base):
    """A notebook inside a subject."""

    __tablename__ = "notebooks"
    __table_args__ = (Index("idx_notebooks_subject_created_at", "subject_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    theme: Mapped[str] = mapped_column(
        String(32), nullable=False, default=NotebookTheme.DEFAULT.value
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    subject: Mapped["Subject"] = relationship("Subject", back_populates="notebooks")
    notes: Mapped[list["Note"]] = relationship(
        "Note", back_populates="notebook", passive_deletes=True
    )


class Note(Base):
    """
    A note with rich HTML content.

    content holds the serialized editor document; every save overwrites it.
    important_snippet_count is a denormalized counter bumped by snippet
    creation and never reconciled against the snippet table.
    """

    __tablename__ = "notes"
    __table_args__ = (Index("idx_notes_notebook_created_at", "notebook_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    notebook_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("notebooks.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    background: Mapped[str] = mapped_column(
        String(32), nullable=False, default=NoteBackground.DEFAULT.value
    )
    important_snippet_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    notebook: Mapped["Notebook"] = relationship("Notebook", back_populates="notes")


class ImportantSnippet(Base):
    """
    A passage of a note marked as important.

    note_title, notebook_name, subject_name and subject_color are copied at
    creation time and are not kept in sync with later renames.
    """

    __tablename__ = "important_snippets"
    __table_args__ = (
        Index("idx_snippets_user_created_at", "user_id", "created_at"),
        Index("idx_snippets_user_subject", "user_id", "subject_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    note_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    notebook_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("notebooks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    subject_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    note_title: Mapped[str] = mapped_column(String(255), nullable=False)
    notebook_name: Mapped[str] = mapped_column(String(255), nullable=False)
    subject_name: Mapped[str] = mapped_column(String(255), nullable=False)
    subject_color: Mapped[str] = mapped_column(String(7), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )


class RevisionSchedule(Base):
    """A planned review session for a note."""

    __tablename__ = "revision_schedules"
    __table_args__ = (Index("idx_revisions_user_scheduled_at", "user_id", "scheduled_at"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    note_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    notebook_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("notebooks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )
