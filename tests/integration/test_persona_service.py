"""Integration tests for the persona registry."""

from __future__ import annotations

import pytest
from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import AnonymousPersona
from campus.personas.service import (
    AVATARS,
    COLORS,
    get_or_create_persona,
    get_persona,
    get_personas_batch,
    regenerate_persona,
    update_persona,
)


async def _persona_count(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(AnonymousPersona))
    return result.scalar_one()


class TestGetOrCreatePersona:
    @pytest.mark.asyncio
    async def test_first_access_creates_random_persona(self, db_session: AsyncSession):
        persona = await get_or_create_persona(db_session, "sess-a")
        await db_session.commit()

        assert persona.session_id == "sess-a"
        assert persona.avatar in AVATARS
        assert persona.color in COLORS
        assert persona.alias

    @pytest.mark.asyncio
    async def test_second_access_returns_same_values(self, db_session: AsyncSession):
        first = await get_or_create_persona(db_session, "sess-a")
        await db_session.commit()
        snapshot = (first.avatar, first.alias, first.color)

        second = await get_or_create_persona(db_session, "sess-a")
        await db_session.commit()

        assert (second.avatar, second.alias, second.color) == snapshot
        assert await _persona_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_get_persona_missing(self, db_session: AsyncSession):
        assert await get_persona(db_session, "nobody") is None


    @pytest.mark.asyncio
    async def test_concurrent_create_returns_winner(self, db_session: AsyncSession, concurrent_write):
        concurrent_write(
            db_session,
            insert(AnonymousPersona).values(
                session_id="sess-a", avatar="🦉", alias="FirstTabWins7", color="#85C1E9",
            ),
        )

        persona = await get_or_create_persona(db_session, "sess-a")
        await db_session.commit()

        assert (persona.avatar, persona.alias, persona.color) == ("🦉", "FirstTabWins7", "#85C1E9")
        assert await _persona_count(db_session) == 1


class TestUpdatePersona:
    @pytest.mark.asyncio
    async def test_only_provided_fields_change(self, db_session: AsyncSession):
        original = await get_or_create_persona(db_session, "sess-a")
        await db_session.commit()
        avatar, color = original.avatar, original.color

        updated = await update_persona(db_session, "sess-a", alias="NightOwl")
        await db_session.commit()

        assert updated.alias == "NightOwl"
        assert updated.avatar == avatar
        assert updated.color == color

    @pytest.mark.asyncio
    async def test_update_without_persona_creates_one(self, db_session: AsyncSession):
        persona = await update_persona(db_session, "sess-new", avatar="🦊", color="#4ECDC4")
        await db_session.commit()

        assert persona.avatar == "🦊"
        assert persona.color == "#4ECDC4"
        assert persona.alias
        assert await _persona_count(db_session) == 1


    @pytest.mark.asyncio
    async def test_update_applies_over_concurrently_created_persona(
        self, db_session: AsyncSession, concurrent_write,
    ):
        concurrent_write(
            db_session,
            insert(AnonymousPersona).values(
                session_id="sess-a", avatar="🦉", alias="FirstTabWins7", color="#85C1E9",
            ),
        )

        persona = await update_persona(db_session, "sess-a", alias="SecondTab")
        await db_session.commit()

        assert persona.alias == "SecondTab"
        assert persona.avatar == "🦉"
        assert persona.color == "#85C1E9"
        assert await _persona_count(db_session) == 1


class TestRegeneratePersona:
    @pytest.mark.asyncio
    async def test_redraws_all_fields(self, db_session: AsyncSession, monkeypatch):
        await update_persona(db_session, "sess-a", avatar="🦊", alias="Before", color="#4ECDC4")
        await db_session.commit()

        monkeypatch.setattr("campus.personas.service.random_avatar", lambda: "🐼")
        monkeypatch.setattr("campus.personas.service.generate_alias", lambda: "CosmicRaven42")
        monkeypatch.setattr("campus.personas.service.random_color", lambda: "#FF6B6B")

        persona = await regenerate_persona(db_session, "sess-a")
        await db_session.commit()

        assert (persona.avatar, persona.alias, persona.color) == ("🐼", "CosmicRaven42", "#FF6B6B")
        assert await _persona_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_regenerate_creates_missing_persona(self, db_session: AsyncSession):
        persona = await regenerate_persona(db_session, "sess-b")
        await db_session.commit()
        assert persona.session_id == "sess-b"


class TestPersonasBatch:
    @pytest.mark.asyncio
    async def test_empty_input(self, db_session: AsyncSession):
        assert await get_personas_batch(db_session, []) == {}

    @pytest.mark.asyncio
    async def test_returns_only_existing(self, db_session: AsyncSession):
        await get_or_create_persona(db_session, "sess-a")
        await get_or_create_persona(db_session, "sess-b")
        await db_session.commit()

        batch = await get_personas_batch(db_session, ["sess-a", "sess-b", "sess-c"])
        assert set(batch) == {"sess-a", "sess-b"}
