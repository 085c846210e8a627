"""Streak tracking: consecutive UTC days with at least one post.

Transitions on record_post, keyed on the gap between today and last_post_date:
1. No row yet: start at 1
2. Same day: only total_posts moves (multi-posting can't inflate the streak)
3. Yesterday: streak continues, longest catches up
4. Anything older: streak resets to 1, longest is preserved
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.base import upsert_insert
from campus.db.models import UserStreak

logger = logging.getLogger(__name__)

HOT_STREAK_DAYS = 7
WARM_STREAK_DAYS = 3


class StreakTransition(str, Enum):
    STARTED = "started"
    SAME_DAY = "same_day"
    CONTINUED = "continued"
    RESET = "reset"


@dataclass(frozen=True)
class StreakState:
    """Read-only streak snapshot; the zero state stands in for a missing row."""

    current_streak: int = 0
    longest_streak: int = 0
    last_post_date: date | None = None
    total_posts: int = 0

    @classmethod
    def from_row(cls, row: UserStreak) -> StreakState:
        return cls(
            current_streak=row.current_streak,
            longest_streak=row.longest_streak,
            last_post_date=row.last_post_date,
            total_posts=row.total_posts,
        )


def get_utc_day(now: datetime | None = None) -> date:
    """Truncate a timestamp to its UTC calendar day."""
    if now is None:
        now = datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date()


def streak_tier(current_streak: int) -> str:
    """Flame tier shown next to a streak: hot (7+), warm (3+), otherwise cold."""
    if current_streak >= HOT_STREAK_DAYS:
        return "hot"
    if current_streak >= WARM_STREAK_DAYS:
        return "warm"
    return "cold"


def classify_post(last_post_date: date | None, today: date) -> StreakTransition:
    """Decide how a post made today moves an existing streak."""
    if last_post_date == today:
        return StreakTransition.SAME_DAY
    if last_post_date == today - timedelta(days=1):
        return StreakTransition.CONTINUED
    return StreakTransition.RESET


async def _lock_streak(db: AsyncSession, session_id: str) -> UserStreak | None:
    result = await db.execute(
        select(UserStreak)
        .where(UserStreak.session_id == session_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def record_post(
    db: AsyncSession,
    session_id: str,
    now: datetime | None = None,
) -> tuple[UserStreak, StreakTransition]:
    """Apply one qualifying post to the session's streak.

    The row is locked for the read-modify-write; the caller commits.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    today = get_utc_day(now)

    streak = await _lock_streak(db, session_id)

    if streak is None:
        stmt = (
            upsert_insert(db, UserStreak)
            .values(
                session_id=session_id,
                current_streak=1,
                longest_streak=1,
                last_post_date=today,
                total_posts=1,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["session_id"])
            .returning(UserStreak.session_id)
        )
        created = (await db.execute(stmt)).scalar_one_or_none()

        # On conflict a concurrent first post created the row; apply this post to it
        streak = await _lock_streak(db, session_id)
        if streak is None:
            msg = f"Streak for session {session_id[:8]}… vanished after insert"
            raise RuntimeError(msg)
        if created is not None:
            return streak, StreakTransition.STARTED

    transition = classify_post(streak.last_post_date, today)

    if transition is StreakTransition.CONTINUED:
        streak.current_streak += 1
    elif transition is StreakTransition.RESET:
        if streak.current_streak > 1:
            logger.info(
                "Streak reset for session %s… after %d days", session_id[:8], streak.current_streak,
            )
        streak.current_streak = 1

    if transition is not StreakTransition.SAME_DAY:
        streak.longest_streak = max(streak.longest_streak, streak.current_streak)
        streak.last_post_date = today

    streak.total_posts += 1
    streak.updated_at = now
    await db.flush()
    return streak, transition


async def get_streak(db: AsyncSession, session_id: str) -> StreakState:
    """Current streak for a session, or the zero state if it never posted."""
    result = await db.execute(
        select(UserStreak).where(UserStreak.session_id == session_id)
    )
    row = result.scalar_one_or_none()
    if row is None:
        return StreakState()
    return StreakState.from_row(row)


async def get_top_streaks(db: AsyncSession, limit: int = 10) -> list[UserStreak]:
    """Longest running streaks; ties go to the lower session id."""
    result = await db.execute(
        select(UserStreak)
        .where(UserStreak.current_streak > 0)
        .order_by(UserStreak.current_streak.desc(), UserStreak.session_id.asc())
        .limit(limit)
    )
    return list(result.scalars().all())
