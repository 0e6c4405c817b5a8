"""View router schemas."""

from uuid import UUID

from cognicanvas.schemas.base import BaseSchema
from cognicanvas.services.navigation import ViewKind


class ViewRead(BaseSchema):
    kind: ViewKind
    id: UUID | None = None
    label: str


class NavigationState(BaseSchema):
    """Current view, the trail that led to it, and where back() goes."""

    current: ViewRead
    breadcrumbs: list[ViewRead]
    back: ViewRead | None = None
