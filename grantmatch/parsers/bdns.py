"""
BDNS (Base de Datos Nacional de Subvenciones) grant ingestion.

Downloads the public listing of calls ("convocatorias") and upserts each one
as a Grant keyed by its BDNS id.

Data retrieved per call:
    - BDNS id
    - Title
    - Issuing body
    - Amount (EUR)
    - Closing date
    - Description, when the listing includes it

Note: this parses the HTML results table and may break if the site changes.
It runs only on demand (admin endpoint); there is no background schedule.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime
from typing import Optional

import aiohttp
from bs4 import BeautifulSoup
from sqlalchemy.ext.asyncio import AsyncSession

from grantmatch import config, storage

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml",
    "Accept-Language": "es-ES,es;q=0.9,en-US;q=0.8,en;q=0.7",
}

# Header text fragment -> field name
COLUMN_KEYWORDS = [
    ("bdns", "bdns_id"),
    ("título", "titulo"),
    ("titulo", "titulo"),
    ("órgano", "organismo"),
    ("organo", "organismo"),
    ("organismo", "organismo"),
    ("administración", "organismo"),
    ("importe", "importe"),
    ("presupuesto", "importe"),
    ("descripción", "descripcion"),
    ("descripcion", "descripcion"),
    ("fecha fin", "fecha_fin"),
    ("fecha de fin", "fecha_fin"),
    ("fecha de finalización", "fecha_fin"),
    ("fin de plazo", "fecha_fin"),
]

# Used when the table has no header row
DEFAULT_COLUMNS = ["bdns_id", "titulo", "organismo", "importe", "fecha_fin"]

DATE_FORMATS = ("%d/%m/%Y", "%Y-%m-%d", "%d-%m-%Y")


class BDNSError(Exception):
    """The BDNS listing could not be downloaded."""


async def fetch_convocatorias(url: str = None, timeout: int = None) -> str:
    """Download the BDNS listing page and return its HTML."""
    url = url or config.BDNS_URL
    timeout = timeout or config.BDNS_TIMEOUT

    try:
        async with aiohttp.ClientSession(headers=HEADERS) as session:
            async with session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=timeout),
                allow_redirects=True,
            ) as resp:
                if resp.status != 200:
                    raise BDNSError(f"BDNS returned HTTP {resp.status}")
                return await resp.text()
    except asyncio.TimeoutError as e:
        raise BDNSError(f"BDNS request timed out after {timeout}s") from e
    except aiohttp.ClientError as e:
        raise BDNSError(f"BDNS request failed: {e}") from e


def parse_convocatorias(html: str) -> list[dict]:
    """Parse the results table into dicts with keys
    bdns_id, titulo, organismo, importe, fecha_fin, descripcion.
    """
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        return []

    rows = table.find_all("tr")
    columns = DEFAULT_COLUMNS
    header_cells = rows[0].find_all("th") if rows else []
    if header_cells:
        columns = [_column_for_header(th.get_text(strip=True)) for th in header_cells]
        rows = rows[1:]

    results = []
    for row in rows:
        cells = row.find_all("td")
        if not cells:
            continue
        raw = {}
        for column, cell in zip(columns, cells):
            if column and column not in raw:
                raw[column] = cell.get_text(" ", strip=True)

        if not raw.get("bdns_id") or not raw.get("titulo"):
            logger.debug("Skipping BDNS row without id or title: %s", raw)
            continue

        results.append({
            "bdns_id": raw["bdns_id"],
            "titulo": raw["titulo"],
            "organismo": raw.get("organismo") or "",
            "importe": parse_amount(raw.get("importe", "")),
            "fecha_fin": parse_date(raw.get("fecha_fin", "")),
            "descripcion": raw.get("descripcion") or raw["titulo"],
        })
    return results


def to_grant(conv: dict) -> dict:
    """Map a parsed call onto Grant fields."""
    return {
        "bdns_id": conv["bdns_id"],
        "title": conv["titulo"],
        "organismo": conv["organismo"] or "Desconocido",
        "scope": "Nacional",
        "end_date": conv["fecha_fin"],
        "budget": conv["importe"],
        "raw_text": conv["descripcion"],
        "tags": [],
    }


async def ingest_bdns(session: AsyncSession, url: str = None) -> tuple[int, int]:
    """Fetch, parse and upsert. Returns (calls fetched, grants upserted)."""
    html = await fetch_convocatorias(url)
    convocatorias = parse_convocatorias(html)

    upserted = 0
    for conv in convocatorias:
        await storage.upsert_grant(session, to_grant(conv))
        upserted += 1

    logger.info("BDNS ingestion: %d calls parsed, %d grants upserted", len(convocatorias), upserted)
    return len(convocatorias), upserted


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

def _column_for_header(text: str) -> Optional[str]:
    text = text.lower()
    for keyword, column in COLUMN_KEYWORDS:
        if keyword in text:
            return column
    return None


def parse_amount(text: str) -> Optional[float]:
    """Parse European-formatted amounts like '1.234.567,89 €'."""
    if not text:
        return None
    cleaned = re.sub(r"[^\d.,\-]", "", text)
    if not cleaned or cleaned == "-":
        return None
    cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_date(text: str) -> Optional[datetime]:
    text = (text or "").strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
