"""Grant endpoints -- listing with the caller's match attached, detail, create."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from grantmatch import storage
from grantmatch.auth import current_user
from grantmatch.database import get_session
from grantmatch.models import Grant, Match, User
from grantmatch.schemas import GrantCreate, GrantOut, GrantWithMatch, MatchOut

router = APIRouter(prefix="/api/grants", tags=["grants"])


def _with_match(grant: Grant, match: Optional[Match]) -> GrantWithMatch:
    return GrantWithMatch(
        **GrantOut.model_validate(grant).model_dump(),
        match=MatchOut.model_validate(match) if match else None,
    )


@router.get("", response_model=list[GrantWithMatch])
async def list_grants(
    search: Optional[str] = None,
    scope: Optional[str] = None,
    min_amount: Optional[float] = Query(default=None, ge=0),
    user: User = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    """
    Filtered grants. When the caller has a company each grant carries its
    match and the list is ordered by match score (unmatched grants count as 0).
    """
    grants = await storage.list_grants(session, search=search, scope=scope, min_amount=min_amount)

    company = await storage.get_company_for_user(session, user.id)
    if company is None:
        return [_with_match(g, None) for g in grants]

    match_map = {m.grant_id: m for m in await storage.list_matches(session, company.id)}
    results = [_with_match(g, match_map.get(g.id)) for g in grants]
    results.sort(key=lambda r: r.match.score if r.match else 0, reverse=True)
    return results


@router.get("/{grant_id}", response_model=GrantWithMatch)
async def get_grant(
    grant_id: int,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    grant = await storage.get_grant(session, grant_id)
    if grant is None:
        raise HTTPException(status_code=404, detail="Grant not found")

    match = None
    company = await storage.get_company_for_user(session, user.id)
    if company is not None:
        match = await storage.get_match(session, company.id, grant.id)

    return _with_match(grant, match)


@router.post("", response_model=GrantOut, status_code=201)
async def create_grant(
    req: GrantCreate,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    return await storage.create_grant(session, req.model_dump())
