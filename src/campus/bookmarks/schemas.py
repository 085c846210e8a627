"""Pydantic schemas for bookmark endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from campus.content.types import ContentType


class ToggleBookmarkRequest(BaseModel):
    content_type: ContentType
    content_id: str = Field(..., min_length=1, max_length=64)


class ToggleBookmarkResponse(BaseModel):
    success: bool = True
    bookmarked: bool


class BookmarkStatusResponse(BaseModel):
    bookmarked: bool


class BookmarkCountResponse(BaseModel):
    count: int


class ContentSummary(BaseModel):
    id: str
    content_type: str
    text: str
    created_at: datetime | None = None


class BookmarkItem(BaseModel):
    id: int
    content_type: str
    content_id: str
    created_at: datetime | None = None
    content: ContentSummary | None = None


class BookmarkListResponse(BaseModel):
    bookmarks: list[BookmarkItem]
    total: int
    page: int
    per_page: int
