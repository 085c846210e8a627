"""Secret admirer API endpoints — 5 routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.ext.asyncio import AsyncSession

from campus.admirers.schemas import (
    ActionResultResponse,
    AdmirerCountResponse,
    AdmirerItem,
    AdmirerListResponse,
    HasAdmiredResponse,
    RevealResponse,
    SendAdmirationRequest,
)
from campus.admirers.service import (
    count_admirers,
    has_admired,
    list_admirers,
    reveal_admirer,
    send_admiration,
)
from campus.database import get_session
from campus.identity.session import get_anon_session

router = APIRouter(prefix="/api/v1/admirers", tags=["Admirers"])

TargetCode = Annotated[str, Path(min_length=1, max_length=64)]


@router.post("", response_model=ActionResultResponse)
async def send_admiration_endpoint(
    body: SendAdmirationRequest,
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Send an anonymous admiration. A repeat send reports success=false."""
    result = await send_admiration(db, session_id, body.target_code, body.message)
    if result["success"]:
        await db.commit()
    return ActionResultResponse(**result)


@router.get("/{target_code}/count", response_model=AdmirerCountResponse)
async def admirer_count(
    target_code: TargetCode,
    db: AsyncSession = Depends(get_session),
):
    """How many admirers are still waiting to be revealed."""
    return AdmirerCountResponse(count=await count_admirers(db, target_code))


@router.get("/{target_code}/sent", response_model=HasAdmiredResponse)
async def has_admired_endpoint(
    target_code: TargetCode,
    session_id: str = Depends(get_anon_session),
    db: AsyncSession = Depends(get_session),
):
    """Whether the caller already admired this target."""
    return HasAdmiredResponse(sent=await has_admired(db, session_id, target_code))


@router.get("/{target_code}", response_model=AdmirerListResponse)
async def list_admirers_endpoint(
    target_code: TargetCode,
    db: AsyncSession = Depends(get_session),
):
    """Admirations received by a target, newest first. Senders stay hidden."""
    rows = await list_admirers(db, target_code)
    return AdmirerListResponse(admirers=[AdmirerItem(**row) for row in rows])


@router.post("/{target_code}/{admirer_id}/reveal", response_model=RevealResponse)
async def reveal_admirer_endpoint(
    admirer_id: int,
    target_code: TargetCode,
    db: AsyncSession = Depends(get_session),
):
    """Reveal the sender of one admiration (irreversible)."""
    result = await reveal_admirer(db, admirer_id, target_code)
    if not result["success"]:
        raise HTTPException(status_code=404, detail=result["error"])
    await db.commit()
    return RevealResponse(session_id=result["session_id"])
