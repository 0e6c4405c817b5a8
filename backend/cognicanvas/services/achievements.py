"""Achievements and user stats derived from stored activity."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cognicanvas.db.models import ImportantSnippet, Note, RevisionSchedule, Subject, User


@dataclass
class UserStats:
    """Counters and streaks for one user."""

    current_streak: int
    longest_streak: int
    total_notes: int
    total_subjects: int
    total_important_snippets: int
    total_revisions: int
    join_date: datetime
    last_active: datetime | None


@dataclass(frozen=True)
class AchievementDef:
    id: str
    title: str
    description: str
    icon: str
    category: str
    rarity: str
    metric: str
    threshold: int


@dataclass
class Achievement:
    id: str
    title: str
    description: str
    icon: str
    category: str
    rarity: str
    unlocked: bool
    progress: int
    max_progress: int
    unlocked_at: datetime | None = None


CATALOG: tuple[AchievementDef, ...] = (
    # Streak
    AchievementDef("streak_3", "Getting Started", "Maintain a 3-day streak", "🔥", "streak", "common", "current_streak", 3),
    AchievementDef("streak_7", "Week Warrior", "Maintain a 7-day streak", "🗓️", "streak", "rare", "current_streak", 7),
    AchievementDef("streak_30", "Monthly Master", "Maintain a 30-day streak", "🌙", "streak", "epic", "current_streak", 30),
    AchievementDef("streak_100", "Century Club", "Maintain a 100-day streak", "💯", "streak", "legendary", "current_streak", 100),
    # Content
    AchievementDef("content_10_notes", "Note Taker", "Create 10 notes", "📝", "content", "common", "total_notes", 10),
    AchievementDef("content_50_notes", "Prolific Writer", "Create 50 notes", "📚", "content", "rare", "total_notes", 50),
    AchievementDef("content_5_subjects", "Subject Expert", "Create 5 subjects", "🎓", "content", "rare", "total_subjects", 5),
    # Engagement
    AchievementDef("engagement_10_important", "Highlight Master", "Mark 10 snippets as important", "⭐", "engagement", "common", "total_important_snippets", 10),
    AchievementDef("engagement_5_revisions", "Revision Regular", "Complete 5 revision sessions", "🔄", "engagement", "common", "total_revisions", 5),
    # Mastery
    AchievementDef("mastery_first_subject", "Subject Pioneer", "Create your first subject", "🚀", "mastery", "common", "total_subjects", 1),
    AchievementDef("mastery_first_note", "Note Creator", "Create your first note", "✨", "mastery", "common", "total_notes", 1),
)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def compute_streaks(active_days: set[date], today: date) -> tuple[int, int]:
    """
    Current and longest run of consecutive active days.

    The current streak counts back from today, or from yesterday when
    nothing has happened yet today.
    """
    if not active_days:
        return 0, 0

    longest = 0
    run = 0
    previous: date | None = None
    for day in sorted(active_days):
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        longest = max(longest, run)
        previous = day

    cursor = today if today in active_days else today - timedelta(days=1)
    current = 0
    while cursor in active_days:
        current += 1
        cursor -= timedelta(days=1)
    return current, longest


async def _count(db: AsyncSession, column, *criteria) -> int:
    result = await db.execute(select(func.count(column)).where(*criteria))
    return result.scalar() or 0


async def gather_stats(db: AsyncSession, user: User, now: datetime | None = None) -> UserStats:
    """
    Build UserStats from the store.

    A day counts as active if a note was created or updated, a snippet was
    created, or a revision was completed on it (UTC).
    """
    now = now or datetime.now(timezone.utc)

    timestamps: list[datetime] = []
    note_rows = await db.execute(
        select(Note.created_at, Note.updated_at).where(Note.user_id == user.id)
    )
    for created, updated in note_rows.all():
        timestamps.extend([created, updated])
    timestamps.extend(
        (await db.execute(
            select(ImportantSnippet.created_at).where(ImportantSnippet.user_id == user.id)
        )).scalars()
    )
    timestamps.extend(
        ts
        for ts in (await db.execute(
            select(RevisionSchedule.completed_at).where(
                RevisionSchedule.user_id == user.id, RevisionSchedule.completed.is_(True)
            )
        )).scalars()
        if ts is not None
    )

    timestamps = [_as_utc(ts) for ts in timestamps]
    active_days = {ts.date() for ts in timestamps}
    current, longest = compute_streaks(active_days, now.date())

    return UserStats(
        current_streak=current,
        longest_streak=longest,
        total_notes=await _count(db, Note.id, Note.user_id == user.id),
        total_subjects=await _count(db, Subject.id, Subject.user_id == user.id),
        total_important_snippets=await _count(
            db, ImportantSnippet.id, ImportantSnippet.user_id == user.id
        ),
        total_revisions=await _count(
            db,
            RevisionSchedule.id,
            RevisionSchedule.user_id == user.id,
            RevisionSchedule.completed.is_(True),
        ),
        join_date=_as_utc(user.created_at),
        last_active=max(timestamps) if timestamps else None,
    )


def evaluate(stats: UserStats) -> list[Achievement]:
    """Unlock state and progress for every achievement in the catalog."""
    achievements = []
    for definition in CATALOG:
        value = getattr(stats, definition.metric)
        unlocked = value >= definition.threshold
        achievements.append(
            Achievement(
                id=definition.id,
                title=definition.title,
                description=definition.description,
                icon=definition.icon,
                category=definition.category,
                rarity=definition.rarity,
                unlocked=unlocked,
                progress=min(value, definition.threshold),
                max_progress=definition.threshold,
                unlocked_at=stats.last_active if unlocked and definition.category == "streak" else None,
            )
        )
    return achievements


def filter_achievements(
    achievements: list[Achievement],
    category: str | None = None,
    unlocked_only: bool = False,
) -> list[Achievement]:
    return [
        a
        for a in achievements
        if (category in (None, "all") or a.category == category)
        and (not unlocked_only or a.unlocked)
    ]


def streak_message(streak: int) -> str:
    if streak == 0:
        return "Start your learning journey today!"
    if streak < 3:
        return "You're just getting started!"
    if streak < 7:
        return "Keep up the great work!"
    if streak < 14:
        return "You're on fire!"
    if streak < 30:
        return "Incredible consistency!"
    return "You're a true legend!"


async def unlocked_for(db: AsyncSession, user: User) -> list[Achievement]:
    """Convenience for the notification feed."""
    stats = await gather_stats(db, user)
    return [a for a in evaluate(stats) if a.unlocked]
