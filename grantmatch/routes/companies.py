"""Company endpoints -- profile read / create / update (each write regenerates matches)."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from grantmatch import storage
from grantmatch.auth import current_user
from grantmatch.database import get_session
from grantmatch.models import User
from grantmatch.schemas import CompanyCreate, CompanyOut, CompanyUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/companies", tags=["companies"])


@router.get("/me", response_model=Optional[CompanyOut])
async def my_company(
    user: User = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    """The caller's company, or null before onboarding."""
    return await storage.get_company_for_user(session, user.id)


@router.post("", response_model=CompanyOut, status_code=201)
async def create_company(
    req: CompanyCreate,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    if await storage.get_company_for_user(session, user.id) is not None:
        raise HTTPException(status_code=409, detail="Company already exists for this user")

    company = await storage.create_company(session, user.id, req.model_dump())
    logger.info("Company %s created for user %s", company.id, user.id)
    return company


@router.put("/{company_id}", response_model=CompanyOut)
async def update_company(
    company_id: int,
    req: CompanyUpdate,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    # Only the owner's own company can be edited
    existing = await storage.get_company_for_user(session, user.id)
    if existing is None or existing.id != company_id:
        raise HTTPException(status_code=404, detail="Company not found or unauthorized")

    updates = req.model_dump(exclude_unset=True)
    # name and description are NOT NULL; an explicit null leaves them unchanged
    for key in ("name", "description"):
        if key in updates and updates[key] is None:
            updates.pop(key)

    return await storage.update_company(session, company_id, updates)
