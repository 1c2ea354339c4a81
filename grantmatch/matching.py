"""
Match generation -- score every grant against a company profile.

Score components (additive, each capped on its own):
    sector   -- 30 if the company works on "digital" and so does the grant
    scope    -- 20 if the grant is national / EU-wide or its scope equals the
                company location
    keywords -- 10 per description token (len > 3) found in the grant title
                or body, capped at 50

A match row is written only when the total is above MIN_MATCH_SCORE. Pairs
that already have a match are left untouched, even if the profile changed.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from grantmatch import storage
from grantmatch.models import Company, Grant, Match

logger = logging.getLogger(__name__)

SECTOR_KEYWORD = "digital"
SECTOR_TAG = "Digitalizacion"
SECTOR_POINTS = 30

OPEN_SCOPES = ("Nacional", "Europeo")
SCOPE_POINTS = 20

KEYWORD_MIN_LENGTH = 3  # tokens must be strictly longer than this
KEYWORD_POINTS = 10
KEYWORD_CAP = 50

MIN_MATCH_SCORE = 10  # strictly greater than this creates a match

# Placeholder analysis; not derived from the grant text
SUMMARY_TEMPLATE = "Compatibilidad detectada basada en palabras clave: {keywords}"
PLACEHOLDER_EXPENSES = ["Personal", "Equipamiento", "Software"]
PLACEHOLDER_REQUIREMENTS = ["Estar al corriente con Hacienda", "PYME constituida"]


# ---------------------------------------------------------------------------
# signals
# ---------------------------------------------------------------------------

def _keywords(description: str) -> list[str]:
    return (description or "").lower().split()


def sector_signal(company: Company, grant: Grant) -> int:
    if SECTOR_KEYWORD not in (company.description or "").lower():
        return 0
    if SECTOR_KEYWORD in (grant.title or "").lower() or SECTOR_TAG in (grant.tags or []):
        return SECTOR_POINTS
    return 0


def scope_signal(company: Company, grant: Grant) -> int:
    if grant.scope in OPEN_SCOPES:
        return SCOPE_POINTS
    if company.location and company.location == grant.scope:
        return SCOPE_POINTS
    return 0


def keyword_signal(company: Company, grant: Grant) -> int:
    title = (grant.title or "").lower()
    body = (grant.raw_text or "").lower()

    hits = 0
    for word in _keywords(company.description):
        if len(word) > KEYWORD_MIN_LENGTH and (word in title or word in body):
            hits += 1
    return min(KEYWORD_CAP, hits * KEYWORD_POINTS)


def score_grant(company: Company, grant: Grant) -> int:
    """Compatibility score (0-100) of one grant for one company."""
    return (
        sector_signal(company, grant)
        + scope_signal(company, grant)
        + keyword_signal(company, grant)
    )


def build_analysis(company: Company) -> dict:
    keywords = _keywords(company.description)[:3]
    return {
        "summary": SUMMARY_TEMPLATE.format(keywords=", ".join(keywords)),
        "expenses": list(PLACEHOLDER_EXPENSES),
        "requirements": list(PLACEHOLDER_REQUIREMENTS),
    }


# ---------------------------------------------------------------------------
# generation pass
# ---------------------------------------------------------------------------

async def generate_matches_for_company(session: AsyncSession, company_id: int) -> list[Match]:
    """Create matches for every not-yet-matched grant scoring above the threshold.

    Returns the newly created matches. A missing company yields an empty list.
    Each match is committed on its own; a storage error aborts the pass and
    keeps whatever was written before it.
    """
    company = await storage.get_company(session, company_id)
    if company is None:
        return []

    created: list[Match] = []
    for grant in await storage.list_grants(session):
        if await storage.get_match(session, company.id, grant.id) is not None:
            continue

        score = score_grant(company, grant)
        if score <= MIN_MATCH_SCORE:
            continue

        match = await storage.create_match(session, {
            "company_id": company.id,
            "grant_id": grant.id,
            "score": score,
            "status": "new",
            "ai_analysis": build_analysis(company),
        })
        created.append(match)

    logger.info("Generated %d new matches for company %s", len(created), company.id)
    return created
