"""Pydantic response models for leaderboard endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from campus.personas.schemas import PersonaResponse


class LeaderboardEntryResponse(BaseModel):
    rank: int
    score: float
    persona: PersonaResponse


class LeaderboardResponse(BaseModel):
    category: str
    period: str
    entries: list[LeaderboardEntryResponse]


class MyRankResponse(BaseModel):
    category: str
    period: str
    rank: int
    score: float
    total: int
