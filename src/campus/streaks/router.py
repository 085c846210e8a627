"""Streak API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus.database import get_session
from campus.identity.session import get_anon_session
from campus.personas.schemas import PersonaResponse
from campus.personas.service import get_personas_batch, persona_display
from campus.streaks.schemas import StreakResponse, TopStreakEntry, TopStreaksResponse
from campus.streaks.service import get_streak, get_top_streaks, streak_tier

router = APIRouter(prefix="/api/v1/streaks", tags=["Streaks"])


@router.get("/me", response_model=StreakResponse)
async def get_my_streak(
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Get the caller's posting streak (zeros if they never posted)."""
    state = await get_streak(db, session_id)
    return StreakResponse(
        current_streak=state.current_streak,
        longest_streak=state.longest_streak,
        total_posts=state.total_posts,
        last_post_date=state.last_post_date,
        tier=streak_tier(state.current_streak),
    )


@router.get("/top", response_model=TopStreaksResponse)
async def get_streak_leaders(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
):
    """Longest running streaks, shown by persona only."""
    rows = await get_top_streaks(db, limit)
    personas = await get_personas_batch(db, [r.session_id for r in rows])

    entries = [
        TopStreakEntry(
            rank=i + 1,
            current_streak=r.current_streak,
            longest_streak=r.longest_streak,
            total_posts=r.total_posts,
            persona=PersonaResponse(**persona_display(personas.get(r.session_id))),
        )
        for i, r in enumerate(rows)
    ]
    return TopStreaksResponse(entries=entries)
