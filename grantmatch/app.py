"""
FastAPI application -- grant matching API server.

Run locally:
    uvicorn grantmatch.app:app --reload --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grantmatch import config
from grantmatch.database import async_session, init_db
from grantmatch.routes import admin, companies, grants, matches
from grantmatch.seed import seed_grants

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialise database schema
    await init_db()

    if config.SEED_GRANTS:
        async with async_session() as session:
            inserted = await seed_grants(session)
        if inserted:
            logger.info("Seeded %d demo grants", inserted)

    yield


app = FastAPI(
    title="GrantMatch API",
    version="1.0.0",
    description="Company profiles, public grants and heuristic company <-> grant matches",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(companies.router)
app.include_router(grants.router)
app.include_router(matches.router)
app.include_router(admin.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}
