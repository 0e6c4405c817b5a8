"""Pydantic schemas for API request/response validation."""

from cognicanvas.schemas.user import UserRead
from cognicanvas.schemas.subjects import SubjectCreate, SubjectRead, SubjectUpdate
from cognicanvas.schemas.notebooks import (
    NotebookCreate,
    NotebookCreateInSubject,
    NotebookRead,
    NotebookUpdate,
)
from cognicanvas.schemas.notes import (
    AnyFragmentIn,
    FragmentRead,
    FragmentUpdate,
    NoteCreate,
    NoteRead,
    NoteUpdate,
    NoteWithFragments,
)
from cognicanvas.schemas.snippets import SnippetCreate, SnippetCreated, SnippetRead
from cognicanvas.schemas.chat import ChatErrorResponse, ChatRequest, ChatResponse
from cognicanvas.schemas.revisions import (
    RevisionCreate,
    RevisionRead,
    RevisionSuggestions,
    SuggestionRead,
)
from cognicanvas.schemas.achievements import AchievementList, AchievementRead, StatsRead
from cognicanvas.schemas.notifications import (
    MarkAllReadResult,
    NotificationFeed,
    NotificationRead,
)
from cognicanvas.schemas.navigation import NavigationState, ViewRead

__all__ = [
    # User
    "UserRead",
    # Subjects
    "SubjectCreate",
    "SubjectRead",
    "SubjectUpdate",
    # Notebooks
    "NotebookCreate",
    "NotebookCreateInSubject",
    "NotebookRead",
    "NotebookUpdate",
    # Notes
    "NoteCreate",
    "NoteRead",
    "NoteUpdate",
    "NoteWithFragments",
    "AnyFragmentIn",
    "FragmentRead",
    "FragmentUpdate",
    # Snippets
    "SnippetCreate",
    "SnippetCreated",
    "SnippetRead",
    # Chat
    "ChatRequest",
    "ChatResponse",
    "ChatErrorResponse",
    # Revisions
    "RevisionCreate",
    "RevisionRead",
    "RevisionSuggestions",
    "SuggestionRead",
    # Achievements
    "AchievementList",
    "AchievementRead",
    "StatsRead",
    # Notifications
    "MarkAllReadResult",
    "NotificationFeed",
    "NotificationRead",
    # Navigation
    "NavigationState",
    "ViewRead",
]
