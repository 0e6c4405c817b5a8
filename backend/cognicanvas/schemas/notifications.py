"""Notification feed schemas."""

from typing import Literal

from cognicanvas.schemas.base import BaseSchema, UtcDatetime

NotificationFilter = Literal["all", "unread", "revision", "system"]


class NotificationRead(BaseSchema):
    id: str
    type: str
    title: str
    message: str
    timestamp: UtcDatetime
    read: bool
    actionable: bool
    action_url: str | None = None
    priority: str


class NotificationFeed(BaseSchema):
    notifications: list[NotificationRead]
    unread_count: int


class MarkAllReadResult(BaseSchema):
    updated: int
    unread_count: int
