"""View router route."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from cognicanvas.api.deps import CurrentUser, DbSession
from cognicanvas.db import crud
from cognicanvas.schemas.navigation import NavigationState, ViewRead
from cognicanvas.services.navigation import NavigationError, ViewStack

router = APIRouter(tags=["navigation"])


@router.get("/navigation", response_model=NavigationState)
async def get_navigation(
    current_user: CurrentUser,
    db: DbSession,
    subject_id: Annotated[UUID | None, Query(alias="subjectId")] = None,
    notebook_id: Annotated[UUID | None, Query(alias="notebookId")] = None,
) -> NavigationState:
    """
    Rebuild the dashboard -> subject -> notebook trail for a view.

    With only notebookId, the subject is taken from the notebook.
    """
    stack = ViewStack()
    notebook = None
    if notebook_id is not None:
        notebook = await crud.get_notebook(db, current_user.id, notebook_id)
        if subject_id is None:
            subject_id = notebook.subject_id
        elif notebook.subject_id != subject_id:
            raise NavigationError("Notebook does not belong to this subject")

    if subject_id is not None:
        subject = await crud.get_subject(db, current_user.id, subject_id)
        stack.open_subject(subject.id, subject.name)
    if notebook is not None:
        stack.open_notebook(notebook.id, notebook.title)

    return NavigationState(
        current=ViewRead.model_validate(stack.current),
        breadcrumbs=[ViewRead.model_validate(v) for v in stack.breadcrumbs()],
        back=ViewRead.model_validate(stack.previous) if stack.previous else None,
    )
