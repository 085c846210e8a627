"""Bookmark API endpoints — 4 routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus.bookmarks.schemas import (
    BookmarkCountResponse,
    BookmarkItem,
    BookmarkListResponse,
    BookmarkStatusResponse,
    ToggleBookmarkRequest,
    ToggleBookmarkResponse,
)
from campus.bookmarks.service import count_bookmarks, is_bookmarked, list_bookmarks, toggle_bookmark
from campus.config import get_settings
from campus.content.service import ContentNotFoundError
from campus.content.types import ContentType
from campus.database import get_session
from campus.identity.session import get_anon_session

router = APIRouter(prefix="/api/v1/bookmarks", tags=["Bookmarks"])


@router.post("/toggle", response_model=ToggleBookmarkResponse)
async def toggle_bookmark_endpoint(
    body: ToggleBookmarkRequest,
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Bookmark the content, or remove the bookmark if it already exists."""
    try:
        bookmarked = await toggle_bookmark(db, session_id, body.content_type, body.content_id)
    except ContentNotFoundError:
        raise HTTPException(status_code=404, detail="Content not found") from None
    await db.commit()
    return ToggleBookmarkResponse(bookmarked=bookmarked)


@router.get("/status", response_model=BookmarkStatusResponse)
async def bookmark_status(
    content_type: ContentType = Query(...),
    content_id: str = Query(..., min_length=1, max_length=64),
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Whether the caller has bookmarked this content."""
    return BookmarkStatusResponse(
        bookmarked=await is_bookmarked(db, session_id, content_type, content_id),
    )


@router.get("/count", response_model=BookmarkCountResponse)
async def bookmark_count(
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Total bookmarks saved by the caller."""
    return BookmarkCountResponse(count=await count_bookmarks(db, session_id))


@router.get("", response_model=BookmarkListResponse)
async def list_my_bookmarks(
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1),
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Caller's bookmarks, newest first, with the bookmarked content attached."""
    per_page = min(per_page, get_settings().bookmarks_per_page_max)
    items = await list_bookmarks(db, session_id, page, per_page)
    total = await count_bookmarks(db, session_id)
    return BookmarkListResponse(
        bookmarks=[BookmarkItem(**item) for item in items],
        total=total,
        page=page,
        per_page=per_page,
    )
