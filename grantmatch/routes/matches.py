"""Match endpoints -- the caller's matches and status transitions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from grantmatch import storage
from grantmatch.auth import current_user
from grantmatch.database import get_session
from grantmatch.models import User
from grantmatch.schemas import MatchOut, MatchStatusUpdate, MatchWithGrant

router = APIRouter(prefix="/api/matches", tags=["matches"])


@router.get("", response_model=list[MatchWithGrant])
async def list_matches(
    user: User = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    company = await storage.get_company_for_user(session, user.id)
    if company is None:
        return []
    return await storage.list_matches(session, company.id)


@router.patch("/{match_id}", response_model=MatchOut)
async def update_match(
    match_id: int,
    req: MatchStatusUpdate,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    company = await storage.get_company_for_user(session, user.id)
    match = await storage.get_match_by_id(session, match_id)
    if match is None or company is None or match.company_id != company.id:
        raise HTTPException(status_code=404, detail="Match not found")

    return await storage.update_match_status(session, match_id, req.status)
