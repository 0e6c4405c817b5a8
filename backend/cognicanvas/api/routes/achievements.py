"""Achievements and stats routes."""

from dataclasses import asdict
from typing import Annotated, Literal

from fastapi import APIRouter, Query

from cognicanvas.api.deps import CurrentUser, DbSession
from cognicanvas.schemas.achievements import AchievementList, AchievementRead, StatsRead
from cognicanvas.services import achievements

router = APIRouter(tags=["achievements"])

Category = Literal["all", "streak", "content", "engagement", "mastery"]


@router.get("/achievements", response_model=AchievementList)
async def list_achievements(
    current_user: CurrentUser,
    db: DbSession,
    category: Category | None = None,
    unlocked_only: Annotated[bool, Query(alias="unlockedOnly")] = False,
) -> AchievementList:
    """The achievement catalog with unlock state and progress for the current user."""
    stats = await achievements.gather_stats(db, current_user)
    evaluated = achievements.evaluate(stats)
    shown = achievements.filter_achievements(evaluated, category, unlocked_only)
    return AchievementList(
        achievements=[AchievementRead.model_validate(a) for a in shown],
        unlocked_count=sum(1 for a in evaluated if a.unlocked),
        total_count=len(evaluated),
    )


@router.get("/stats", response_model=StatsRead)
async def get_stats(
    current_user: CurrentUser,
    db: DbSession,
) -> StatsRead:
    """Counters and streaks for the current user."""
    stats = await achievements.gather_stats(db, current_user)
    return StatsRead.model_validate(
        {**asdict(stats), "streak_message": achievements.streak_message(stats.current_streak)}
    )
