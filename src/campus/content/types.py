"""Closed set of content kinds that engagement features can reference."""

from __future__ import annotations

from enum import Enum

from campus.db.models import Base, Confession, Crush, Poll, SpottedPost


class ContentType(str, Enum):
    CONFESSION = "confession"
    CRUSH = "crush"
    SPOTTED = "spotted"
    POLL = "poll"


# One table per kind; a reference is (kind, ref_id) into exactly one of these
CONTENT_MODELS: dict[ContentType, type[Base]] = {
    ContentType.CONFESSION: Confession,
    ContentType.CRUSH: Crush,
    ContentType.SPOTTED: SpottedPost,
    ContentType.POLL: Poll,
}
