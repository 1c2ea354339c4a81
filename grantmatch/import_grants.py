"""
Import script: grants CSV -> database.

Usage:
    python -m grantmatch.import_grants --csv grants.csv
    python -m grantmatch.import_grants --csv grants.csv --sep ";"

Expected columns: bdns_id, title, organismo, scope, start_date, end_date,
budget, raw_text, tags (tags separated by ';'). Rows missing title,
organismo or scope are skipped.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional

import pandas as pd

from grantmatch import storage
from grantmatch.database import async_session, init_db

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("title", "organismo", "scope")


def _parse_budget(raw) -> Optional[float]:
    s = str(raw).replace(" ", "").replace(",", ".").strip()
    if s in ("", "-", "nan"):
        return None
    try:
        return float(s)
    except ValueError:
        return None


def _parse_date(raw):
    s = str(raw).strip()
    if not s:
        return None
    ts = pd.to_datetime(s, errors="coerce", dayfirst=True)
    return None if pd.isna(ts) else ts.to_pydatetime()


def _parse_tags(raw) -> list[str]:
    return [t.strip() for t in str(raw).split(";") if t.strip()]


def row_to_grant(row) -> Optional[dict]:
    """Map a CSV row onto Grant fields, or None if it lacks a required column."""
    if any(not str(row.get(col, "")).strip() for col in REQUIRED_COLUMNS):
        return None
    return {
        "bdns_id": str(row.get("bdns_id", "")).strip() or None,
        "title": str(row["title"]).strip(),
        "organismo": str(row["organismo"]).strip(),
        "scope": str(row["scope"]).strip(),
        "start_date": _parse_date(row.get("start_date", "")),
        "end_date": _parse_date(row.get("end_date", "")),
        "budget": _parse_budget(row.get("budget", "")),
        "raw_text": str(row.get("raw_text", "")).strip() or None,
        "tags": _parse_tags(row.get("tags", "")),
    }


def read_grants_csv(csv_path: str, sep: str = ",") -> list[dict]:
    raw = pd.read_csv(csv_path, encoding="utf-8", dtype=str, sep=sep).fillna("")
    raw.columns = [c.strip().lower() for c in raw.columns]

    grants = []
    for idx, row in raw.iterrows():
        grant = row_to_grant(row)
        if grant is None:
            logger.warning("Row %d skipped: missing one of %s", idx, ", ".join(REQUIRED_COLUMNS))
            continue
        grants.append(grant)
    return grants


async def import_grants(csv_path: str, sep: str = ",") -> int:
    print("Initialising database schema ...")
    await init_db()

    grants = read_grants_csv(csv_path, sep=sep)
    print(f"Importing {len(grants)} grants ...")

    async with async_session() as session:
        for data in grants:
            await storage.upsert_grant(session, data)

    print(f"Done: {len(grants)} grants imported.")
    return len(grants)


def main():
    parser = argparse.ArgumentParser(description="Import grants from a CSV file")
    parser.add_argument("--csv", required=True, help="Path to the grants CSV")
    parser.add_argument("--sep", default=",", help="Column separator (default ',')")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(import_grants(args.csv, sep=args.sep))


if __name__ == "__main__":
    main()
