"""
In-memory notification feed.

Feeds live in process memory, one per user, and are gone on restart. Derived
notifications (revision reminders, inactivity nudges, achievements) carry a
stable key so that refreshing the feed never adds the same one twice, even
after the user has dismissed it.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cognicanvas.db.models import Note, Notebook, RevisionSchedule, Subject, User
from cognicanvas.services import achievements

logger = logging.getLogger(__name__)

INACTIVITY_THRESHOLD = timedelta(days=14)
UPCOMING_WINDOW = timedelta(hours=24)


class NotificationNotFound(LookupError):
    """No notification with that id in the user's feed."""


@dataclass
class Notification:
    key: str
    type: str  # revision_reminder | inactivity_nudge | achievement | system
    title: str
    message: str
    timestamp: datetime
    priority: str = "low"  # low | medium | high
    read: bool = False
    actionable: bool = False
    action_url: str | None = None
    id: str = field(default_factory=lambda: uuid4().hex)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def welcome(now: datetime) -> Notification:
    return Notification(
        key="system:welcome",
        type="system",
        title="Welcome to CogniCanvas!",
        message="Start creating subjects and notebooks to organize your learning journey.",
        timestamp=now,
    )


# =============================================================================
# DERIVATION
# =============================================================================


def revision_reminders(
    revisions: Iterable[RevisionSchedule],
    note_titles: dict[UUID, str],
    now: datetime,
) -> list[Notification]:
    """Due revisions are high priority; ones within the next 24h are medium."""
    reminders = []
    for revision in revisions:
        if revision.completed:
            continue
        scheduled_at = _as_utc(revision.scheduled_at)
        title = note_titles.get(revision.note_id, "your note")
        if scheduled_at <= now:
            reminders.append(
                Notification(
                    key=f"revision-due:{revision.id}",
                    type="revision_reminder",
                    title="Revision Reminder",
                    message=f'Time to review "{title}"',
                    timestamp=scheduled_at,
                    priority="high",
                    actionable=True,
                    action_url=f"/notes/{revision.note_id}",
                )
            )
        elif scheduled_at - now <= UPCOMING_WINDOW:
            reminders.append(
                Notification(
                    key=f"revision-upcoming:{revision.id}",
                    type="revision_reminder",
                    title="Upcoming Revision",
                    message=f'Schedule for "{title}" is {scheduled_at:%b %d at %H:%M} UTC',
                    timestamp=now,
                    priority="medium",
                    actionable=True,
                    action_url=f"/notes/{revision.note_id}",
                )
            )
    return reminders


def inactivity_nudges(
    last_activity: Iterable[tuple[Subject, datetime]],
    now: datetime,
) -> list[Notification]:
    """One nudge per subject left untouched for INACTIVITY_THRESHOLD or longer."""
    nudges = []
    for subject, last_seen in last_activity:
        last_seen = _as_utc(last_seen)
        idle = now - last_seen
        if idle < INACTIVITY_THRESHOLD:
            continue
        days = idle.days
        period = f"{days // 7} weeks" if days % 7 == 0 else f"{days} days"
        nudges.append(
            Notification(
                key=f"inactive:{subject.id}:{last_seen.date().isoformat()}",
                type="inactivity_nudge",
                title="Feeling distant?",
                message=(
                    f"It's been {period} since you last visited your {subject.name} notes. "
                    "Maybe it's time for a review?"
                ),
                timestamp=now,
                priority="medium",
                actionable=True,
                action_url=f"/subjects/{subject.id}",
            )
        )
    return nudges


def achievement_notifications(
    unlocked: Iterable[achievements.Achievement], now: datetime
) -> list[Notification]:
    return [
        Notification(
            key=f"achievement:{a.id}",
            type="achievement",
            title="Achievement Unlocked!",
            message=f"{a.icon} {a.title}: {a.description}",
            timestamp=now,
        )
        for a in unlocked
    ]


async def derive(db: AsyncSession, user: User, now: datetime | None = None) -> list[Notification]:
    """Collect every notification the user's current data calls for."""
    now = now or datetime.now(timezone.utc)

    revisions = list(
        (await db.execute(
            select(RevisionSchedule).where(
                RevisionSchedule.user_id == user.id,
                RevisionSchedule.completed.is_(False),
                RevisionSchedule.scheduled_at <= now + UPCOMING_WINDOW,
            )
        )).scalars()
    )
    note_titles: dict[UUID, str] = {}
    if revisions:
        rows = await db.execute(
            select(Note.id, Note.title).where(Note.id.in_({r.note_id for r in revisions}))
        )
        note_titles = {note_id: title for note_id, title in rows.all()}

    last_note_activity = func.max(Note.updated_at)
    activity_rows = await db.execute(
        select(Subject, last_note_activity)
        .outerjoin(Notebook, Notebook.subject_id == Subject.id)
        .outerjoin(Note, Note.notebook_id == Notebook.id)
        .where(Subject.user_id == user.id)
        .group_by(Subject.id)
    )
    last_activity = [
        (subject, last_seen or subject.created_at) for subject, last_seen in activity_rows.all()
    ]

    unlocked = await achievements.unlocked_for(db, user)

    return (
        revision_reminders(revisions, note_titles, now)
        + inactivity_nudges(last_activity, now)
        + achievement_notifications(unlocked, now)
    )


# =============================================================================
# FEED
# =============================================================================


class NotificationCenter:
    """Per-user feeds held in memory."""

    def __init__(self):
        self._feeds: dict[UUID, list[Notification]] = {}
        self._seen_keys: dict[UUID, set[str]] = {}

    def _feed(self, user_id: UUID) -> list[Notification]:
        if user_id not in self._feeds:
            first = welcome(datetime.now(timezone.utc))
            self._feeds[user_id] = [first]
            self._seen_keys[user_id] = {first.key}
        return self._feeds[user_id]

    def merge(self, user_id: UUID, candidates: Iterable[Notification]) -> list[Notification]:
        """Add candidates whose key has never been in this feed. Returns the ones added."""
        feed = self._feed(user_id)
        seen = self._seen_keys[user_id]
        added = []
        for notification in candidates:
            if notification.key in seen:
                continue
            seen.add(notification.key)
            feed.append(notification)
            added.append(notification)
        if added:
            logger.debug("Added %d notifications for user %s", len(added), user_id)
        return added

    def feed(self, user_id: UUID, filter_: str = "all") -> list[Notification]:
        """Newest first. 'system' also covers inactivity nudges."""
        items = self._feed(user_id)
        if filter_ == "unread":
            items = [n for n in items if not n.read]
        elif filter_ == "revision":
            items = [n for n in items if n.type == "revision_reminder"]
        elif filter_ == "system":
            items = [n for n in items if n.type in ("system", "inactivity_nudge")]
        return sorted(items, key=lambda n: n.timestamp, reverse=True)

    def _get(self, user_id: UUID, notification_id: str) -> Notification:
        for notification in self._feed(user_id):
            if notification.id == notification_id:
                return notification
        raise NotificationNotFound(notification_id)

    def mark_read(self, user_id: UUID, notification_id: str) -> Notification:
        notification = self._get(user_id, notification_id)
        notification.read = True
        return notification

    def mark_all_read(self, user_id: UUID) -> int:
        changed = 0
        for notification in self._feed(user_id):
            if not notification.read:
                notification.read = True
                changed += 1
        return changed

    def remove(self, user_id: UUID, notification_id: str) -> None:
        notification = self._get(user_id, notification_id)
        self._feeds[user_id].remove(notification)

    def unread_count(self, user_id: UUID) -> int:
        return sum(1 for n in self._feed(user_id) if not n.read)

    def reset(self) -> None:
        self._feeds.clear()
        self._seen_keys.clear()


# Singleton instance
notification_center = NotificationCenter()
