"""
Dashboard -> subject -> notebook view stack.

Views are held in memory only; the HTTP layer rebuilds a stack per request
from the ids in the query string.
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class ViewKind(str, Enum):
    DASHBOARD = "dashboard"
    SUBJECT = "subject"
    NOTEBOOK = "notebook"


@dataclass(frozen=True)
class View:
    kind: ViewKind
    id: UUID | None = None
    label: str = "Dashboard"


DASHBOARD = View(ViewKind.DASHBOARD)


class NavigationError(ValueError):
    """Transition not allowed from the current view."""


class ViewStack:
    def __init__(self):
        self._views: list[View] = [DASHBOARD]

    @property
    def current(self) -> View:
        return self._views[-1]

    @property
    def previous(self) -> View | None:
        """The view back() would return, or None on the dashboard."""
        return self._views[-2] if len(self._views) > 1 else None

    def open_subject(self, subject_id: UUID, name: str) -> View:
        if self.current.kind is not ViewKind.DASHBOARD:
            raise NavigationError(f"Cannot open a subject from the {self.current.kind.value} view")
        view = View(ViewKind.SUBJECT, subject_id, name)
        self._views.append(view)
        return view

    def open_notebook(self, notebook_id: UUID, title: str) -> View:
        if self.current.kind is not ViewKind.SUBJECT:
            raise NavigationError(f"Cannot open a notebook from the {self.current.kind.value} view")
        view = View(ViewKind.NOTEBOOK, notebook_id, title)
        self._views.append(view)
        return view

    def back(self) -> View:
        """Pop one level. The dashboard is never popped."""
        if len(self._views) > 1:
            self._views.pop()
        return self.current

    def breadcrumbs(self) -> list[View]:
        return list(self._views)
