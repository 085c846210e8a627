"""Integration tests for the streak tracker."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import UserStreak
from campus.streaks.service import (
    StreakTransition,
    get_streak,
    get_top_streaks,
    record_post,
)

DAY_ONE = datetime(2024, 5, 10, 9, 0, tzinfo=timezone.utc)


def _day(n: int, hour: int = 9) -> datetime:
    return DAY_ONE.replace(hour=hour) + timedelta(days=n)


class TestRecordPost:
    @pytest.mark.asyncio
    async def test_first_post_starts_streak(self, db_session: AsyncSession):
        streak, transition = await record_post(db_session, "sess-a", DAY_ONE)
        await db_session.commit()

        assert transition is StreakTransition.STARTED
        assert streak.current_streak == 1
        assert streak.longest_streak == 1
        assert streak.total_posts == 1
        assert streak.last_post_date == date(2024, 5, 10)

    @pytest.mark.asyncio
    async def test_consecutive_days_extend_streak(self, db_session: AsyncSession):
        for n in range(4):
            streak, transition = await record_post(db_session, "sess-a", _day(n))
            await db_session.commit()

        assert transition is StreakTransition.CONTINUED
        assert streak.current_streak == 4
        assert streak.longest_streak == 4
        assert streak.total_posts == 4

    @pytest.mark.asyncio
    async def test_same_day_only_counts_post(self, db_session: AsyncSession):
        await record_post(db_session, "sess-a", _day(0))
        await record_post(db_session, "sess-a", _day(1))
        await db_session.commit()
        before = await get_streak(db_session, "sess-a")

        streak, transition = await record_post(db_session, "sess-a", _day(1, hour=22))
        await db_session.commit()

        assert transition is StreakTransition.SAME_DAY
        assert streak.total_posts == before.total_posts + 1
        assert streak.current_streak == before.current_streak
        assert streak.longest_streak == before.longest_streak
        assert streak.last_post_date == before.last_post_date

    @pytest.mark.asyncio
    async def test_gap_resets_but_keeps_longest(self, db_session: AsyncSession):
        for n in range(3):
            await record_post(db_session, "sess-a", _day(n))
        await db_session.commit()

        # Day 3 skipped
        streak, transition = await record_post(db_session, "sess-a", _day(4))
        await db_session.commit()

        assert transition is StreakTransition.RESET
        assert streak.current_streak == 1
        assert streak.longest_streak == 3
        assert streak.last_post_date == _day(4).date()

    @pytest.mark.asyncio
    async def test_longest_never_below_current(self, db_session: AsyncSession):
        offsets = [0, 1, 1, 2, 5, 6, 7, 8, 20, 21, 21, 40]
        for n in offsets:
            streak, _ = await record_post(db_session, "sess-a", _day(n))
            await db_session.commit()
            assert streak.longest_streak >= streak.current_streak

        assert streak.longest_streak == 4
        assert streak.total_posts == len(offsets)

    @pytest.mark.asyncio
    async def test_midnight_utc_is_the_day_boundary(self, db_session: AsyncSession):
        late = datetime(2024, 5, 10, 23, 59, tzinfo=timezone.utc)
        early = datetime(2024, 5, 11, 0, 1, tzinfo=timezone.utc)
        await record_post(db_session, "sess-a", late)
        streak, transition = await record_post(db_session, "sess-a", early)
        await db_session.commit()

        assert transition is StreakTransition.CONTINUED
        assert streak.current_streak == 2


class TestConcurrentFirstPost:
    """Another request creates the streak row between the lookup and the insert."""

    @pytest.mark.asyncio
    async def test_same_day_post_is_still_counted(self, db_session: AsyncSession, concurrent_write):
        concurrent_write(
            db_session,
            insert(UserStreak).values(
                session_id="sess-a",
                current_streak=1,
                longest_streak=1,
                last_post_date=DAY_ONE.date(),
                total_posts=1,
                created_at=DAY_ONE,
                updated_at=DAY_ONE,
            ),
        )

        streak, transition = await record_post(db_session, "sess-a", _day(0, hour=10))
        await db_session.commit()

        assert transition is StreakTransition.SAME_DAY
        assert streak.total_posts == 2
        assert streak.current_streak == 1
        state = await get_streak(db_session, "sess-a")
        assert state.total_posts == 2

    @pytest.mark.asyncio
    async def test_next_day_post_continues_winner_row(self, db_session: AsyncSession, concurrent_write):
        concurrent_write(
            db_session,
            insert(UserStreak).values(
                session_id="sess-a",
                current_streak=2,
                longest_streak=2,
                last_post_date=DAY_ONE.date(),
                total_posts=5,
                created_at=DAY_ONE,
                updated_at=DAY_ONE,
            ),
        )

        streak, transition = await record_post(db_session, "sess-a", _day(1))
        await db_session.commit()

        assert transition is StreakTransition.CONTINUED
        assert streak.current_streak == 3
        assert streak.longest_streak == 3
        assert streak.total_posts == 6


class TestGetStreak:
    @pytest.mark.asyncio
    async def test_unknown_session_is_zero(self, db_session: AsyncSession):
        state = await get_streak(db_session, "never-posted")
        assert state.current_streak == 0
        assert state.longest_streak == 0
        assert state.total_posts == 0
        assert state.last_post_date is None


class TestTopStreaks:
    @pytest.mark.asyncio
    async def test_ordered_by_current_streak_then_session(self, db_session: AsyncSession):
        for session_id, days in [("sess-c", 2), ("sess-a", 3), ("sess-b", 2), ("sess-d", 1)]:
            for n in range(days):
                await record_post(db_session, session_id, _day(n))
        await db_session.commit()

        top = await get_top_streaks(db_session, limit=3)
        assert [s.session_id for s in top] == ["sess-a", "sess-b", "sess-c"]

    @pytest.mark.asyncio
    async def test_empty(self, db_session: AsyncSession):
        assert await get_top_streaks(db_session) == []
