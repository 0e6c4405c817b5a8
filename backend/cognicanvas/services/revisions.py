"""Revision scheduling suggestions."""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone

REVIEW_HOUR = 10


@dataclass(frozen=True)
class Suggestion:
    label: str
    days: int
    description: str


QUICK_SUGGESTIONS: tuple[Suggestion, ...] = (
    Suggestion("Tomorrow", 1, "Quick review to reinforce learning"),
    Suggestion("In 3 days", 3, "Short-term retention check"),
    Suggestion("In 1 week", 7, "Weekly review session"),
    Suggestion("In 2 weeks", 14, "Medium-term retention"),
    Suggestion("In 1 month", 30, "Long-term retention check"),
)


def smart_suggestion(study_count: int) -> Suggestion:
    """Spacing grows with the number of completed reviews of the note."""
    if study_count == 0:
        return Suggestion("First Review", 1, "Review tomorrow to reinforce initial learning")
    if study_count == 1:
        return Suggestion("Second Review", 3, "Review in 3 days for better retention")
    if study_count < 5:
        return Suggestion("Regular Review", 7, "Weekly review to maintain knowledge")
    return Suggestion("Master Review", 14, "Bi-weekly review for long-term mastery")


def suggested_time(days: int, now: datetime | None = None) -> datetime:
    """10:00 UTC, `days` calendar days after now."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    target = now.astimezone(timezone.utc).date() + timedelta(days=days)
    return datetime.combine(target, time(REVIEW_HOUR), tzinfo=timezone.utc)
