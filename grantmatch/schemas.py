"""Pydantic schemas for FastAPI request / response models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

CompanySize = Literal["micro", "small", "medium", "large"]
MatchStatus = Literal["new", "viewed", "saved", "dismissed", "applied"]


# ---------------------------------------------------------------------------
# Company
# ---------------------------------------------------------------------------

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    cnae: Optional[str] = None
    location: Optional[str] = None
    size: Optional[CompanySize] = None
    description: str = Field(..., min_length=1)


class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    cnae: Optional[str] = None
    location: Optional[str] = None
    size: Optional[CompanySize] = None
    description: Optional[str] = Field(default=None, min_length=1)


class CompanyOut(BaseModel):
    id: int
    user_id: str
    name: str
    cnae: Optional[str] = None
    location: Optional[str] = None
    size: Optional[str] = None
    description: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------------------------------------------------------------------------
# Grant
# ---------------------------------------------------------------------------

class GrantCreate(BaseModel):
    bdns_id: Optional[str] = None
    title: str = Field(..., min_length=1)
    organismo: str = Field(..., min_length=1)
    scope: str = Field(..., min_length=1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[float] = Field(default=None, ge=0)
    raw_text: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class GrantOut(BaseModel):
    id: int
    bdns_id: Optional[str] = None
    title: str
    organismo: str
    scope: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[float] = None
    raw_text: Optional[str] = None
    tags: Optional[list[str]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------------------------------------------------------------------------
# Match
# ---------------------------------------------------------------------------

class AiAnalysis(BaseModel):
    summary: str
    expenses: list[str] = []  # eligible expenses
    requirements: list[str] = []  # hard requirements


class MatchOut(BaseModel):
    id: int
    company_id: int
    grant_id: int
    score: int
    status: str = "new"
    ai_analysis: Optional[AiAnalysis] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MatchWithGrant(MatchOut):
    grant: GrantOut


class GrantWithMatch(GrantOut):
    match: Optional[MatchOut] = None


class MatchStatusUpdate(BaseModel):
    status: MatchStatus


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------

class SystemStats(BaseModel):
    total_users: int = 0
    total_companies: int = 0
    total_grants: int = 0
    total_matches: int = 0
    avg_match_score: float = 0


class IngestResponse(BaseModel):
    source: str
    fetched: int = 0
    upserted: int = 0
