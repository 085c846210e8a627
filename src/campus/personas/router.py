"""Persona API endpoints — 4 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campus.database import get_session
from campus.identity.session import get_anon_session
from campus.personas.schemas import PaletteResponse, PersonaResponse, UpdatePersonaRequest
from campus.personas.service import (
    AVATARS,
    COLORS,
    get_or_create_persona,
    persona_display,
    regenerate_persona,
    update_persona,
)

router = APIRouter(prefix="/api/v1/personas", tags=["Personas"])


@router.get("/palette", response_model=PaletteResponse)
async def get_palette():
    """Avatar glyphs and colors a visitor may pick from."""
    return PaletteResponse(avatars=list(AVATARS), colors=list(COLORS))


@router.get("/me", response_model=PersonaResponse)
async def get_my_persona(
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Get the caller's persona, creating a random one on first visit."""
    persona = await get_or_create_persona(db, session_id)
    await db.commit()
    return PersonaResponse(**persona_display(persona))


@router.patch("/me", response_model=PersonaResponse)
async def update_my_persona(
    body: UpdatePersonaRequest,
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Overwrite any of avatar, alias or color."""
    persona = await update_persona(db, session_id, body.avatar, body.alias, body.color)
    await db.commit()
    return PersonaResponse(**persona_display(persona))


@router.post("/me/regenerate", response_model=PersonaResponse)
async def regenerate_my_persona(
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Draw a brand new random persona."""
    persona = await regenerate_persona(db, session_id)
    await db.commit()
    return PersonaResponse(**persona_display(persona))
