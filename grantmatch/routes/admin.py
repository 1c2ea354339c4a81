"""Admin endpoints -- system statistics and on-demand grant ingestion."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from grantmatch import storage
from grantmatch.database import get_session
from grantmatch.models import Company, Grant, Match, User
from grantmatch.parsers.bdns import BDNSError, ingest_bdns
from grantmatch.schemas import IngestResponse, SystemStats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats", response_model=SystemStats)
async def system_stats(session: AsyncSession = Depends(get_session)):
    return SystemStats(
        total_users=await storage.count_rows(session, User),
        total_companies=await storage.count_rows(session, Company),
        total_grants=await storage.count_rows(session, Grant),
        total_matches=await storage.count_rows(session, Match),
        avg_match_score=await storage.average_match_score(session),
    )


@router.post("/ingest/bdns", response_model=IngestResponse)
async def ingest_from_bdns(session: AsyncSession = Depends(get_session)):
    """Fetch the BDNS listing now and upsert every call found."""
    try:
        fetched, upserted = await ingest_bdns(session)
    except BDNSError as e:
        logger.error("BDNS ingestion failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))
    return IngestResponse(source="bdns", fetched=fetched, upserted=upserted)
