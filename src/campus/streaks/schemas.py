"""Pydantic response models for streak endpoints."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from campus.personas.schemas import PersonaResponse


class StreakResponse(BaseModel):
    current_streak: int
    longest_streak: int
    total_posts: int
    last_post_date: date | None = None
    tier: str


class TopStreakEntry(BaseModel):
    rank: int
    current_streak: int
    longest_streak: int
    total_posts: int
    persona: PersonaResponse


class TopStreaksResponse(BaseModel):
    entries: list[TopStreakEntry]
