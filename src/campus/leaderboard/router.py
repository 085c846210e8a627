"""Leaderboard API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus.config import get_settings
from campus.database import get_session
from campus.identity.session import get_anon_session
from campus.leaderboard.periods import LeaderboardCategory, LeaderboardPeriod
from campus.leaderboard.schemas import LeaderboardEntryResponse, LeaderboardResponse, MyRankResponse
from campus.leaderboard.service import get_leaderboard, get_my_rank

router = APIRouter(prefix="/api/v1/leaderboard", tags=["Leaderboard"])


@router.get("/{category}", response_model=LeaderboardResponse)
async def get_leaderboard_endpoint(
    category: LeaderboardCategory,
    period: LeaderboardPeriod = Query(LeaderboardPeriod.WEEKLY),
    limit: int | None = Query(None, ge=1),
    db: AsyncSession = Depends(get_session),
):
    """Top scorers of the current period bucket, shown by persona."""
    settings = get_settings()
    limit = min(limit or settings.leaderboard_default_limit, settings.leaderboard_max_limit)

    entries = await get_leaderboard(db, category, period, limit)
    return LeaderboardResponse(
        category=category.value,
        period=period.value,
        entries=[LeaderboardEntryResponse(**e) for e in entries],
    )


@router.get("/{category}/me", response_model=MyRankResponse)
async def get_my_rank_endpoint(
    category: LeaderboardCategory,
    period: LeaderboardPeriod = Query(LeaderboardPeriod.WEEKLY),
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """The caller's rank in the current bucket (0 if unranked)."""
    data = await get_my_rank(db, category, period, session_id)
    # Other sessions' ids stay server-side
    return MyRankResponse(
        category=category.value,
        period=data["period"],
        rank=data["rank"],
        score=data["score"],
        total=data["total"],
    )
