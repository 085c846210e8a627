"""Leaderboard service — per-session scores bucketed by category and period.

One award fans out to the weekly, monthly and all-time buckets. The three
upserts run in the caller's transaction, so an award is either applied to
every bucket or to none.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.base import upsert_insert
from campus.db.models import LeaderboardEntry
from campus.leaderboard.periods import (
    LeaderboardCategory,
    LeaderboardPeriod,
    get_all_period_starts,
    get_period_start,
)
from campus.personas.service import get_personas_batch, persona_display

logger = logging.getLogger(__name__)


async def award_score(
    db: AsyncSession,
    session_id: str,
    category: LeaderboardCategory,
    delta: float,
    now: datetime | None = None,
) -> None:
    """Add `delta` points in `category` to all three period buckets."""
    category = LeaderboardCategory(category)
    if now is None:
        now = datetime.now(timezone.utc)

    for period, period_start in get_all_period_starts(now):
        stmt = upsert_insert(db, LeaderboardEntry).values(
            session_id=session_id,
            category=category.value,
            period=period.value,
            period_start=period_start,
            score=delta,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["session_id", "category", "period", "period_start"],
            set_={
                "score": LeaderboardEntry.score + stmt.excluded.score,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await db.execute(stmt)

    logger.debug("Awarded %s %s points to session %s…", delta, category.value, session_id[:8])


async def _ranked_bucket(
    db: AsyncSession,
    category: LeaderboardCategory,
    period: LeaderboardPeriod,
    now: datetime | None,
    limit: int | None = None,
) -> list[LeaderboardEntry]:
    """Entries of the bucket containing now, best score first, ties by session id."""
    category = LeaderboardCategory(category)
    period = LeaderboardPeriod(period)
    query = (
        select(LeaderboardEntry)
        .where(
            LeaderboardEntry.category == category.value,
            LeaderboardEntry.period == period.value,
            LeaderboardEntry.period_start == get_period_start(period, now),
        )
        .order_by(LeaderboardEntry.score.desc(), LeaderboardEntry.session_id.asc())
        # Scores are bumped with Core upserts, bypassing the identity map
        .execution_options(populate_existing=True)
    )
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_leaderboard(
    db: AsyncSession,
    category: LeaderboardCategory,
    period: LeaderboardPeriod = LeaderboardPeriod.WEEKLY,
    limit: int = 10,
    now: datetime | None = None,
) -> list[dict]:
    """Top `limit` entries of the current bucket, joined with personas."""
    entries = await _ranked_bucket(db, category, period, now, limit)
    personas = await get_personas_batch(db, [e.session_id for e in entries])

    return [
        {
            "rank": index + 1,
            "score": entry.score,
            "persona": persona_display(personas.get(entry.session_id)),
        }
        for index, entry in enumerate(entries)
    ]


async def get_my_rank(
    db: AsyncSession,
    category: LeaderboardCategory,
    period: LeaderboardPeriod = LeaderboardPeriod.WEEKLY,
    session_id: str | None = None,
    now: datetime | None = None,
) -> dict:
    """Full ranked bucket plus, when a session is given, that session's position.

    `entries` is the raw ordered (session_id, score) set. `rank` is 1-based and
    0 when the session has no score in the bucket.
    """
    entries = await _ranked_bucket(db, category, period, now)
    ranked = [{"session_id": e.session_id, "score": e.score} for e in entries]

    rank = 0
    score = 0.0
    if session_id is not None:
        for index, entry in enumerate(ranked):
            if entry["session_id"] == session_id:
                rank = index + 1
                score = entry["score"]
                break

    return {
        "period": LeaderboardPeriod(period).value,
        "entries": ranked,
        "rank": rank,
        "score": score,
        "total": len(ranked),
    }
