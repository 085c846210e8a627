"""Bookmark endpoint tests."""

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.models import Confession, Crush, Poll


@pytest_asyncio.fixture
async def seeded_content(db_session: AsyncSession) -> None:
    db_session.add_all([
        Confession(id="conf-1", content="I never did the reading"),
        Crush(id="crush-1", content="Blue hoodie, third row"),
        Poll(id="poll-1", question="Pizza or tacos?"),
    ])
    await db_session.commit()


@pytest.mark.asyncio
async def test_toggle_on_and_off(client: AsyncClient, as_session, seeded_content) -> None:
    body = {"content_type": "confession", "content_id": "conf-1"}

    on = await client.post("/api/v1/bookmarks/toggle", json=body, headers=as_session("alice"))
    assert on.status_code == 200
    assert on.json() == {"success": True, "bookmarked": True}

    status = await client.get(
        "/api/v1/bookmarks/status", params=body, headers=as_session("alice"),
    )
    assert status.json() == {"bookmarked": True}

    off = await client.post("/api/v1/bookmarks/toggle", json=body, headers=as_session("alice"))
    assert off.json() == {"success": True, "bookmarked": False}

    status = await client.get(
        "/api/v1/bookmarks/status", params=body, headers=as_session("alice"),
    )
    assert status.json() == {"bookmarked": False}


@pytest.mark.asyncio
async def test_list_and_count(
    client: AsyncClient, as_session, seeded_content, db_session: AsyncSession,
) -> None:
    for content_type, content_id in [("confession", "conf-1"), ("crush", "crush-1"), ("poll", "poll-1")]:
        await client.post(
            "/api/v1/bookmarks/toggle",
            json={"content_type": content_type, "content_id": content_id},
            headers=as_session("alice"),
        )

    count = await client.get("/api/v1/bookmarks/count", headers=as_session("alice"))
    assert count.json() == {"count": 3}

    # The poll is taken down after being bookmarked
    await db_session.execute(delete(Poll).where(Poll.id == "poll-1"))
    await db_session.commit()

    response = await client.get("/api/v1/bookmarks", headers=as_session("alice"))
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["page"] == 1
    assert [b["content_id"] for b in data["bookmarks"]] == ["poll-1", "crush-1", "conf-1"]
    assert data["bookmarks"][0]["content"] is None
    assert data["bookmarks"][1]["content"]["text"] == "Blue hoodie, third row"


@pytest.mark.asyncio
async def test_per_page_is_capped(client: AsyncClient, as_session) -> None:
    response = await client.get(
        "/api/v1/bookmarks", params={"per_page": 500}, headers=as_session("alice"),
    )
    assert response.json()["per_page"] == 50


@pytest.mark.asyncio
async def test_bookmarks_are_per_session(client: AsyncClient, as_session, seeded_content) -> None:
    await client.post(
        "/api/v1/bookmarks/toggle",
        json={"content_type": "confession", "content_id": "conf-1"},
        headers=as_session("alice"),
    )
    count = await client.get("/api/v1/bookmarks/count", headers=as_session("bob"))
    assert count.json() == {"count": 0}


@pytest.mark.asyncio
async def test_unknown_content_type_rejected(client: AsyncClient, as_session) -> None:
    response = await client.post(
        "/api/v1/bookmarks/toggle",
        json={"content_type": "meme", "content_id": "m-1"},
        headers=as_session("alice"),
    )
    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "content_type"

    count = await client.get("/api/v1/bookmarks/count", headers=as_session("alice"))
    assert count.json() == {"count": 0}


@pytest.mark.asyncio
async def test_bookmarking_missing_content_is_404(client: AsyncClient, as_session, seeded_content) -> None:
    response = await client.post(
        "/api/v1/bookmarks/toggle",
        json={"content_type": "spotted", "content_id": "no-such-post"},
        headers=as_session("alice"),
    )
    assert response.status_code == 404
    assert response.json() == {"detail": "Content not found"}

    count = await client.get("/api/v1/bookmarks/count", headers=as_session("alice"))
    assert count.json() == {"count": 0}
