"""Integration tests for the post activity hook."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from campus.activity.service import record_post_activity
from campus.leaderboard.periods import LeaderboardCategory, LeaderboardPeriod
from campus.leaderboard.service import get_my_rank
from campus.streaks.service import StreakTransition

WEDNESDAY = datetime(2024, 3, 13, 9, 0, tzinfo=timezone.utc)


async def _score(db: AsyncSession, category: LeaderboardCategory, now: datetime) -> float:
    data = await get_my_rank(db, category, LeaderboardPeriod.WEEKLY, "sess-a", now)
    return data["score"]


class TestRecordPostActivity:
    @pytest.mark.asyncio
    async def test_first_post_updates_streak_and_scores(self, db_session: AsyncSession):
        streak, transition = await record_post_activity(db_session, "sess-a", WEDNESDAY)
        await db_session.commit()

        assert transition is StreakTransition.STARTED
        assert streak.current_streak == 1
        assert await _score(db_session, LeaderboardCategory.TOP_POSTER, WEDNESDAY) == 1
        assert await _score(db_session, LeaderboardCategory.STREAK_MASTER, WEDNESDAY) == 1

    @pytest.mark.asyncio
    async def test_same_day_post_only_counts_as_post(self, db_session: AsyncSession):
        await record_post_activity(db_session, "sess-a", WEDNESDAY)
        _, transition = await record_post_activity(db_session, "sess-a", WEDNESDAY + timedelta(hours=3))
        await db_session.commit()

        assert transition is StreakTransition.SAME_DAY
        assert await _score(db_session, LeaderboardCategory.TOP_POSTER, WEDNESDAY) == 2
        assert await _score(db_session, LeaderboardCategory.STREAK_MASTER, WEDNESDAY) == 1

    @pytest.mark.asyncio
    async def test_next_day_earns_streak_point(self, db_session: AsyncSession):
        thursday = WEDNESDAY + timedelta(days=1)
        await record_post_activity(db_session, "sess-a", WEDNESDAY)
        streak, transition = await record_post_activity(db_session, "sess-a", thursday)
        await db_session.commit()

        assert transition is StreakTransition.CONTINUED
        assert streak.current_streak == 2
        assert await _score(db_session, LeaderboardCategory.TOP_POSTER, thursday) == 2
        assert await _score(db_session, LeaderboardCategory.STREAK_MASTER, thursday) == 2
