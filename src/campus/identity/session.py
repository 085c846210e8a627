"""Anonymous session identity — resolves or mints the visitor's cookie id.

The id is an opaque string: it is never parsed, only length-checked, and
every engagement service receives it as an explicit argument.
"""

from __future__ import annotations

import uuid

from fastapi import HTTPException, Request, Response

from campus.config import get_settings
from campus.db.models import SESSION_ID_LENGTH


def resolve_session_id(cookie_value: str | None) -> tuple[str, bool]:
    """Return (session_id, minted). A missing or blank cookie mints a new UUID4.

    Any other value is used verbatim.
    """
    if cookie_value and not cookie_value.isspace():
        return cookie_value, False
    return str(uuid.uuid4()), True


async def get_anon_session(request: Request, response: Response) -> str:
    """FastAPI dependency: the caller's anonymous session id.

    A freshly minted id is written back as a long-lived cookie so the visitor
    keeps the same identity on later requests.
    """
    settings = get_settings()
    session_id, minted = resolve_session_id(request.cookies.get(settings.session_cookie_name))

    if len(session_id) > SESSION_ID_LENGTH:
        raise HTTPException(status_code=400, detail="Invalid session cookie")

    if minted:
        response.set_cookie(
            key=settings.session_cookie_name,
            value=session_id,
            max_age=settings.session_cookie_max_age_days * 24 * 3600,
            httponly=True,
            samesite="lax",
            secure=settings.session_cookie_secure,
        )
    return session_id
