"""Notification feed routes."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from cognicanvas.api.deps import CurrentUser, DbSession
from cognicanvas.schemas.notifications import (
    MarkAllReadResult,
    NotificationFeed,
    NotificationFilter,
    NotificationRead,
)
from cognicanvas.services import notifications
from cognicanvas.services.notifications import notification_center

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationFeed)
async def get_feed(
    current_user: CurrentUser,
    db: DbSession,
    filter_: Annotated[NotificationFilter, Query(alias="filter")] = "all",
) -> NotificationFeed:
    """
    The user's feed, newest first.

    Notifications called for by the current data (due revisions, idle
    subjects, unlocked achievements) are merged in before the feed is read.
    """
    derived = await notifications.derive(db, current_user)
    notification_center.merge(current_user.id, derived)
    return NotificationFeed(
        notifications=[
            NotificationRead.model_validate(n)
            for n in notification_center.feed(current_user.id, filter_)
        ],
        unread_count=notification_center.unread_count(current_user.id),
    )


@router.post("/read-all", response_model=MarkAllReadResult)
async def mark_all_read(current_user: CurrentUser) -> MarkAllReadResult:
    """Mark every notification in the feed as read."""
    updated = notification_center.mark_all_read(current_user.id)
    return MarkAllReadResult(updated=updated, unread_count=0)


@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_read(notification_id: str, current_user: CurrentUser) -> NotificationRead:
    """Mark one notification as read."""
    notification = notification_center.mark_read(current_user.id, notification_id)
    return NotificationRead.model_validate(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(notification_id: str, current_user: CurrentUser) -> None:
    """Dismiss a notification. It is not derived again."""
    notification_center.remove(current_user.id, notification_id)
