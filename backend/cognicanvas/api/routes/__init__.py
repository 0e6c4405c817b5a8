"""API routes package."""

from cognicanvas.api.routes import (
    achievements,
    auth,
    chat,
    navigation,
    notebooks,
    notes,
    notifications,
    revisions,
    snippets,
    subjects,
)

__all__ = [
    "achievements",
    "auth",
    "chat",
    "navigation",
    "notebooks",
    "notes",
    "notifications",
    "revisions",
    "snippets",
    "subjects",
]
