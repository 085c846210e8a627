"""Post activity endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from campus.activity.service import record_post_activity
from campus.database import get_session
from campus.identity.session import get_anon_session
from campus.streaks.schemas import StreakResponse
from campus.streaks.service import streak_tier

router = APIRouter(prefix="/api/v1/activity", tags=["Activity"])


class PostActivityResponse(BaseModel):
    transition: str
    streak: StreakResponse


@router.post("/posts", response_model=PostActivityResponse)
async def record_post_endpoint(
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Record that the caller just published a post."""
    streak, transition = await record_post_activity(db, session_id)
    await db.commit()
    return PostActivityResponse(
        transition=transition.value,
        streak=StreakResponse(
            current_streak=streak.current_streak,
            longest_streak=streak.longest_streak,
            total_posts=streak.total_posts,
            last_post_date=streak.last_post_date,
            tier=streak_tier(streak.current_streak),
        ),
    )
