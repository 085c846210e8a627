"""Persona registry: random anonymous display identities per session."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.base import upsert_insert
from campus.db.models import AnonymousPersona

logger = logging.getLogger(__name__)

AVATARS = ["🦊", "🐼", "🦄", "🐉", "🦋", "🐙", "🦁", "🐺", "🦅", "🐸", "🦉", "🐯", "🦈", "🐬", "🦩"]
ADJECTIVES = ["Mystic", "Shadow", "Cosmic", "Wild", "Silent", "Swift", "Brave", "Clever", "Dreamy", "Fierce"]
NOUNS = ["Panda", "Phoenix", "Dragon", "Wolf", "Tiger", "Falcon", "Viper", "Raven", "Fox", "Owl"]
COLORS = [
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7",
    "#DDA0DD", "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9",
]
ALIAS_SUFFIX_RANGE = 100

# Shown for leaderboard entries whose session never created a persona
DEFAULT_PERSONA = {"avatar": "👤", "alias": "Anonymous", "color": "#888"}


def random_avatar() -> str:
    return random.choice(AVATARS)  # noqa: S311


def random_color() -> str:
    return random.choice(COLORS)  # noqa: S311


def generate_alias() -> str:
    """Adjective + noun + 0..99, e.g. 'CosmicRaven42'. Collisions are allowed."""
    adjective = random.choice(ADJECTIVES)  # noqa: S311
    noun = random.choice(NOUNS)  # noqa: S311
    number = random.randrange(ALIAS_SUFFIX_RANGE)  # noqa: S311
    return f"{adjective}{noun}{number}"


async def get_persona(db: AsyncSession, session_id: str) -> AnonymousPersona | None:
    result = await db.execute(
        select(AnonymousPersona).where(AnonymousPersona.session_id == session_id)
    )
    return result.scalar_one_or_none()


async def _insert_persona(
    db: AsyncSession,
    session_id: str,
    avatar: str,
    alias: str,
    color: str,
) -> AnonymousPersona:
    """Insert a persona row, deferring to a concurrently created one on conflict."""
    now = datetime.now(timezone.utc)
    stmt = upsert_insert(db, AnonymousPersona).values(
        session_id=session_id,
        avatar=avatar,
        alias=alias,
        color=color,
        created_at=now,
        updated_at=now,
    )
    await db.execute(stmt.on_conflict_do_nothing(index_elements=["session_id"]))

    persona = await get_persona(db, session_id)
    if persona is None:
        msg = f"Persona for session {session_id[:8]}… vanished after insert"
        raise RuntimeError(msg)
    return persona


async def get_or_create_persona(db: AsyncSession, session_id: str) -> AnonymousPersona:
    """Return the session's persona, creating a random one on first access."""
    persona = await get_persona(db, session_id)
    if persona is not None:
        return persona

    return await _insert_persona(db, session_id, random_avatar(), generate_alias(), random_color())


async def update_persona(
    db: AsyncSession,
    session_id: str,
    avatar: str | None = None,
    alias: str | None = None,
    color: str | None = None,
) -> AnonymousPersona:
    """Overwrite the provided fields; a missing persona is created with random fill-ins."""
    persona = await get_persona(db, session_id)
    if persona is None:
        persona = await _insert_persona(
            db,
            session_id,
            avatar or random_avatar(),
            alias or generate_alias(),
            color or random_color(),
        )

    # Also covers a persona created concurrently between the read and the insert
    if avatar is not None:
        persona.avatar = avatar
    if alias is not None:
        persona.alias = alias
    if color is not None:
        persona.color = color
    persona.updated_at = datetime.now(timezone.utc)
    await db.flush()
    return persona


async def regenerate_persona(db: AsyncSession, session_id: str) -> AnonymousPersona:
    """Redraw avatar, alias and color, creating the persona if needed."""
    persona = await get_persona(db, session_id)
    if persona is None:
        return await get_or_create_persona(db, session_id)

    persona.avatar = random_avatar()
    persona.alias = generate_alias()
    persona.color = random_color()
    persona.updated_at = datetime.now(timezone.utc)
    await db.flush()

    logger.info("Persona regenerated for session %s… as %s", session_id[:8], persona.alias)
    return persona


async def get_personas_batch(
    db: AsyncSession, session_ids: list[str],
) -> dict[str, AnonymousPersona]:
    """Batch-load personas for ranking enrichment."""
    if not session_ids:
        return {}

    result = await db.execute(
        select(AnonymousPersona).where(AnonymousPersona.session_id.in_(session_ids))
    )
    return {p.session_id: p for p in result.scalars()}


def persona_display(persona: AnonymousPersona | None) -> dict[str, str]:
    """Public display fields for a persona, or the anonymous placeholder."""
    if persona is None:
        return dict(DEFAULT_PERSONA)
    return {"avatar": persona.avatar, "alias": persona.alias, "color": persona.color}
