"""
FastAPI application -- StartupLink API server.

Run locally:
    uvicorn backend.app:app --reload --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend import models  # noqa: F401  (registers tables on Base.metadata)
from backend.database import init_db
from backend.routes import analytics, auth, investments, payments, recommendations, startups, users
from config_env import LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialise database schema
    await init_db()
    logger.info("Database schema ready")
    yield


app = FastAPI(
    title="StartupLink API",
    version="1.0.0",
    description="Startup funding marketplace -- listings, investments and AI match scoring",
    lifespan=lifespan,
)

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(startups.router)
app.include_router(investments.router)
app.include_router(payments.router)
app.include_router(analytics.router)
app.include_router(recommendations.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "startuplink",
    }
