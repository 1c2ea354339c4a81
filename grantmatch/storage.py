"""
Data access over an AsyncSession -- users, companies, grants, matches.

Route handlers and the match generator go through these helpers instead of
building queries themselves. Every write commits immediately; there is no
transaction spanning several calls.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from grantmatch.models import Company, Grant, Match, User

logger = logging.getLogger(__name__)

# Fields refreshed on an existing grant when it is re-ingested by external id
GRANT_UPSERT_FIELDS = ("title", "end_date", "budget", "raw_text")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

async def upsert_user(session: AsyncSession, user_id: str, **claims) -> User:
    """Create the user on first sight, otherwise refresh any provided claims."""
    user = await session.get(User, user_id)
    if user is None:
        user = User(id=user_id, **claims)
        session.add(user)
    else:
        changed = False
        for key, value in claims.items():
            if value is not None and getattr(user, key) != value:
                setattr(user, key, value)
                changed = True
        if not changed:
            return user
    await session.commit()
    await session.refresh(user)
    return user


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------

async def get_company(session: AsyncSession, company_id: int) -> Optional[Company]:
    return await session.get(Company, company_id)


async def get_company_for_user(session: AsyncSession, user_id: str) -> Optional[Company]:
    stmt = select(Company).where(Company.user_id == user_id).order_by(Company.id).limit(1)
    return (await session.execute(stmt)).scalars().first()


async def create_company(session: AsyncSession, user_id: str, data: dict) -> Company:
    """Insert a company and immediately generate its matches."""
    from grantmatch.matching import generate_matches_for_company

    company = Company(user_id=user_id, **data)
    session.add(company)
    await session.commit()
    await session.refresh(company)

    await generate_matches_for_company(session, company.id)
    return company


async def update_company(session: AsyncSession, company_id: int, updates: dict) -> Optional[Company]:
    """Apply a partial update and re-run match generation.

    Returns None when the company does not exist.
    """
    from grantmatch.matching import generate_matches_for_company

    company = await session.get(Company, company_id)
    if company is None:
        return None

    for key, value in updates.items():
        setattr(company, key, value)
    await session.commit()
    await session.refresh(company)

    await generate_matches_for_company(session, company.id)
    return company


# ---------------------------------------------------------------------------
# Grants
# ---------------------------------------------------------------------------

async def list_grants(
    session: AsyncSession,
    search: Optional[str] = None,
    scope: Optional[str] = None,
    min_amount: Optional[float] = None,
) -> list[Grant]:
    """Grants newest first, optionally filtered.

    ``search`` is a case-insensitive substring match on title or issuing body.
    """
    stmt = select(Grant)

    if search:
        like_pattern = f"%{search}%"
        stmt = stmt.where(Grant.title.ilike(like_pattern) | Grant.organismo.ilike(like_pattern))
    if scope:
        stmt = stmt.where(Grant.scope == scope)
    if min_amount:
        stmt = stmt.where(Grant.budget >= min_amount)

    stmt = stmt.order_by(Grant.created_at.desc(), Grant.id.desc())
    return list((await session.execute(stmt)).scalars().all())


async def get_grant(session: AsyncSession, grant_id: int) -> Optional[Grant]:
    return await session.get(Grant, grant_id)


async def create_grant(session: AsyncSession, data: dict) -> Grant:
    grant = Grant(**data)
    session.add(grant)
    await session.commit()
    await session.refresh(grant)
    return grant


async def upsert_grant(session: AsyncSession, data: dict) -> Grant:
    """Insert a grant, or update the mutable fields of the one with the same bdns_id."""
    bdns_id = data.get("bdns_id")
    if not bdns_id:
        return await create_grant(session, data)

    existing = (
        await session.execute(select(Grant).where(Grant.bdns_id == bdns_id))
    ).scalars().first()
    if existing is None:
        return await create_grant(session, data)

    for key in GRANT_UPSERT_FIELDS:
        if key in data:
            setattr(existing, key, data[key])
    await session.commit()
    await session.refresh(existing)
    logger.debug("Updated grant bdns_id=%s", bdns_id)
    return existing


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------

async def list_matches(session: AsyncSession, company_id: int) -> list[Match]:
    """A company's matches with their grant loaded, best score first."""
    stmt = (
        select(Match)
        .options(selectinload(Match.grant))
        .where(Match.company_id == company_id)
        .order_by(Match.score.desc(), Match.id)
    )
    return list((await session.execute(stmt)).scalars().all())


async def get_match(session: AsyncSession, company_id: int, grant_id: int) -> Optional[Match]:
    stmt = select(Match).where(Match.company_id == company_id, Match.grant_id == grant_id)
    return (await session.execute(stmt)).scalars().first()


async def get_match_by_id(session: AsyncSession, match_id: int) -> Optional[Match]:
    return await session.get(Match, match_id)


async def create_match(session: AsyncSession, data: dict) -> Match:
    match = Match(**data)
    session.add(match)
    await session.commit()
    await session.refresh(match)
    return match


async def update_match_status(session: AsyncSession, match_id: int, status: str) -> Optional[Match]:
    match = await session.get(Match, match_id)
    if match is None:
        return None
    match.status = status
    await session.commit()
    await session.refresh(match)
    return match


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

async def count_rows(session: AsyncSession, model) -> int:
    return (await session.execute(select(func.count(model.id)))).scalar() or 0


async def average_match_score(session: AsyncSession) -> float:
    avg = (await session.execute(select(func.avg(Match.score)))).scalar() or 0
    return round(float(avg), 2)
