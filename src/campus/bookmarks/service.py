"""Bookmark store: per-session saved references to confessions, crushes, spotted posts and polls."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.content.service import ContentNotFoundError, content_exists, resolve_content_batch
from campus.content.types import ContentType
from campus.db.base import upsert_insert
from campus.db.models import Bookmark


async def _find_bookmark(
    db: AsyncSession,
    session_id: str,
    content_type: ContentType,
    content_id: str,
) -> Bookmark | None:
    result = await db.execute(
        select(Bookmark).where(
            Bookmark.session_id == session_id,
            Bookmark.content_type == ContentType(content_type).value,
            Bookmark.content_id == content_id,
        )
    )
    return result.scalar_one_or_none()


async def toggle_bookmark(
    db: AsyncSession,
    session_id: str,
    content_type: ContentType,
    content_id: str,
) -> bool:
    """Remove the bookmark if present, otherwise add it.

    Returns the new state: True if the content is now bookmarked. Creating a
    bookmark for content that does not exist raises ContentNotFoundError;
    removing one always succeeds.
    """
    content_type = ContentType(content_type)
    existing = await _find_bookmark(db, session_id, content_type, content_id)
    if existing is not None:
        await db.delete(existing)
        await db.flush()
        return False

    if not await content_exists(db, content_type, content_id):
        msg = f"No {content_type.value} with id {content_id}"
        raise ContentNotFoundError(msg)

    stmt = upsert_insert(db, Bookmark).values(
        session_id=session_id,
        content_type=content_type.value,
        content_id=content_id,
        created_at=datetime.now(timezone.utc),
    )
    # A concurrent toggle may have created the same bookmark first
    stmt = stmt.on_conflict_do_nothing(index_elements=["session_id", "content_type", "content_id"])
    await db.execute(stmt)
    return True


async def is_bookmarked(
    db: AsyncSession,
    session_id: str,
    content_type: ContentType,
    content_id: str,
) -> bool:
    return await _find_bookmark(db, session_id, content_type, content_id) is not None


async def list_bookmarks(
    db: AsyncSession,
    session_id: str,
    page: int = 1,
    per_page: int = 20,
) -> list[dict]:
    """Newest-first page of bookmarks, each resolved to its content summary.

    `content` is None when the referenced content has since been removed.
    """
    result = await db.execute(
        select(Bookmark)
        .where(Bookmark.session_id == session_id)
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    bookmarks = list(result.scalars().all())

    refs = [(ContentType(b.content_type), b.content_id) for b in bookmarks]
    contents = await resolve_content_batch(db, refs)

    return [
        {
            "id": b.id,
            "content_type": b.content_type,
            "content_id": b.content_id,
            "created_at": b.created_at,
            "content": contents.get(ref),
        }
        for b, ref in zip(bookmarks, refs)
    ]


async def count_bookmarks(db: AsyncSession, session_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(Bookmark).where(Bookmark.session_id == session_id)
    )
    return result.scalar_one()
