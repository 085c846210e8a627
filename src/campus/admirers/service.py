"""Secret admirer ledger.

Rules:
- One admiration per (sender session, target code)
- The pending count only includes un-revealed admirers
- Listing never exposes the sender's session id
- Reveal is one-way and is the only way a target learns the sender
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus.db.base import upsert_insert
from campus.db.models import SecretAdmirer

logger = logging.getLogger(__name__)

ALREADY_SENT = "Already sent admiration"
NOT_FOUND = "Not found"


async def _find_admiration(
    db: AsyncSession, session_id: str, target_code: str,
) -> SecretAdmirer | None:
    result = await db.execute(
        select(SecretAdmirer).where(
            SecretAdmirer.session_id == session_id,
            SecretAdmirer.target_code == target_code,
        )
    )
    return result.scalar_one_or_none()


async def send_admiration(
    db: AsyncSession,
    session_id: str,
    target_code: str,
    message: str | None = None,
) -> dict:
    """Record an admiration. Returns {"success": bool, "error": str | None}."""
    if await _find_admiration(db, session_id, target_code) is not None:
        return {"success": False, "error": ALREADY_SENT}

    stmt = (
        upsert_insert(db, SecretAdmirer)
        .values(
            session_id=session_id,
            target_code=target_code,
            message=message,
            revealed=False,
            created_at=datetime.now(timezone.utc),
        )
        .on_conflict_do_nothing(index_elements=["session_id", "target_code"])
        .returning(SecretAdmirer.id)
    )
    result = await db.execute(stmt)
    if result.scalar_one_or_none() is None:
        # Lost a race with a concurrent send from the same session
        return {"success": False, "error": ALREADY_SENT}

    return {"success": True, "error": None}


async def has_admired(db: AsyncSession, session_id: str, target_code: str) -> bool:
    return await _find_admiration(db, session_id, target_code) is not None


async def count_admirers(db: AsyncSession, target_code: str) -> int:
    """Admirers still waiting to be revealed."""
    result = await db.execute(
        select(func.count())
        .select_from(SecretAdmirer)
        .where(SecretAdmirer.target_code == target_code, SecretAdmirer.revealed.is_(False))
    )
    return result.scalar_one()


async def list_admirers(db: AsyncSession, target_code: str) -> list[dict]:
    """All admirations for a target, newest first, without sender identity."""
    result = await db.execute(
        select(
            SecretAdmirer.id,
            SecretAdmirer.message,
            SecretAdmirer.revealed,
            SecretAdmirer.created_at,
        )
        .where(SecretAdmirer.target_code == target_code)
        .order_by(SecretAdmirer.created_at.desc(), SecretAdmirer.id.desc())
    )
    return [
        {
            "id": row.id,
            "message": row.message,
            "revealed": row.revealed,
            "created_at": row.created_at,
        }
        for row in result
    ]


async def reveal_admirer(db: AsyncSession, admirer_id: int, target_code: str) -> dict:
    """Reveal who sent an admiration. Returns {"success", "error", "session_id"}.

    Revealing an already revealed admirer is a no-op returning the same sender.
    """
    result = await db.execute(
        select(SecretAdmirer)
        .where(SecretAdmirer.id == admirer_id, SecretAdmirer.target_code == target_code)
        .with_for_update()
    )
    admirer = result.scalar_one_or_none()
    if admirer is None:
        return {"success": False, "error": NOT_FOUND, "session_id": None}

    if not admirer.revealed:
        admirer.revealed = True
        admirer.revealed_at = datetime.now(timezone.utc)
        await db.flush()
        logger.info("Admirer %d revealed to target %s", admirer.id, target_code)

    return {"success": True, "error": None, "session_id": admirer.session_id}
