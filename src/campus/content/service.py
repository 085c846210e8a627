"""Resolve (content_type, content_id) references to content summaries."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.content.types import CONTENT_MODELS, ContentType
from campus.db.models import Poll


def _summarize(content_type: ContentType, row: Any) -> dict[str, Any]:  # noqa: ANN401
    """Flatten a content row into the shape the bookmark list returns."""
    text = row.question if isinstance(row, Poll) else row.content
    return {
        "id": row.id,
        "content_type": content_type.value,
        "text": text,
        "created_at": row.created_at,
    }


async def resolve_content_batch(
    db: AsyncSession,
    refs: Iterable[tuple[ContentType, str]],
) -> dict[tuple[ContentType, str], dict[str, Any]]:
    """Batch-load content summaries, one query per content kind.

    References whose content no longer exists are absent from the result.
    """
    ids_by_type: dict[ContentType, set[str]] = defaultdict(set)
    for content_type, content_id in refs:
        ids_by_type[content_type].add(content_id)

    resolved: dict[tuple[ContentType, str], dict[str, Any]] = {}
    for content_type, ids in ids_by_type.items():
        model = CONTENT_MODELS[content_type]
        result = await db.execute(select(model).where(model.id.in_(ids)))  # type: ignore[attr-defined]
        for row in result.scalars():
            resolved[(content_type, row.id)] = _summarize(content_type, row)
    return resolved


class ContentNotFoundError(ValueError):
    """Raised when a reference points at content that does not exist."""


async def content_exists(db: AsyncSession, content_type: ContentType, content_id: str) -> bool:
    model = CONTENT_MODELS[ContentType(content_type)]
    result = await db.execute(
        select(model.id).where(model.id == content_id)  # type: ignore[attr-defined]
    )
    return result.scalar_one_or_none() is not None
