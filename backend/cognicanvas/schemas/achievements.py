"""Achievement and stats schemas."""

from pydantic import Field

from cognicanvas.schemas.base import BaseSchema, UtcDatetime


class AchievementRead(BaseSchema):
    id: str
    title: str
    description: str
    icon: str
    category: str
    rarity: str
    unlocked: bool
    progress: int
    max_progress: int
    unlocked_at: UtcDatetime | None = None


class AchievementList(BaseSchema):
    achievements: list[AchievementRead]
    unlocked_count: int
    total_count: int


class StatsRead(BaseSchema):
    """User stats with the encouragement line for the current streak."""

    current_streak: int = Field(..., ge=0)
    longest_streak: int = Field(..., ge=0)
    total_notes: int
    total_subjects: int
    total_important_snippets: int
    total_revisions: int
    join_date: UtcDatetime
    last_active: UtcDatetime | None = None
    streak_message: str
