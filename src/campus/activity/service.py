"""Post activity hook: the one call content features make after a successful post."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import UserStreak
from campus.leaderboard.periods import LeaderboardCategory
from campus.leaderboard.service import award_score
from campus.streaks.service import StreakTransition, record_post

logger = logging.getLogger(__name__)

POST_POINTS = 1
STREAK_POINTS = 1


async def record_post_activity(
    db: AsyncSession,
    session_id: str,
    now: datetime | None = None,
) -> tuple[UserStreak, StreakTransition]:
    """Update the streak and award leaderboard points for one post.

    Runs inside the caller's transaction so the streak and all score buckets
    commit together.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    streak, transition = await record_post(db, session_id, now)
    await award_score(db, session_id, LeaderboardCategory.TOP_POSTER, POST_POINTS, now)
    if transition is not StreakTransition.SAME_DAY:
        await award_score(db, session_id, LeaderboardCategory.STREAK_MASTER, STREAK_POINTS, now)

    logger.debug(
        "Post recorded for session %s…: %s, streak=%d", session_id[:8], transition.value, streak.current_streak,
    )
    return streak, transition
