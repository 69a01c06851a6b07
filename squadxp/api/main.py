"""
squadxp.api.main — FastAPI application entry point
=====================================================

Run with::

    uvicorn squadxp.api.main:app --reload --port 8000

or ``python -m squadxp.api`` to use the port from ``config.yaml``.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from squadxp.api.deps import get_config, get_engine  # noqa: E402
from squadxp.api.routes.gamification import router as gamification_router  # noqa: E402
from squadxp.database.engine import run_db  # noqa: E402
from squadxp.engine.gamification import Gamification  # noqa: E402
from squadxp.services.profile_sync_service import sync_profile  # noqa: E402
from squadxp.services.snapshot_service import hydrate, persist, storage_key  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env with safe defaults.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Two-phase boot: construct defaults, then hydrate and sync."""
    cfg = get_config()
    engine = get_engine()
    key = storage_key(cfg.storage_namespace, cfg.profile_id)

    gamification = Gamification()
    app.state.gamification = gamification

    if await run_db(hydrate, gamification, engine, key):
        logger.info("Gamification state hydrated from %s", key)
    else:
        logger.warning("Snapshot store unavailable; serving defaults (hydrated=False)")

    if cfg.sync_on_startup and await run_db(sync_profile, gamification, engine, cfg.profile_id):
        await run_db(persist, gamification, engine, key)

    logger.info(
        "%s API started — profile %s at level %d",
        cfg.app_name, cfg.profile_id, gamification.level,
    )
    yield
    await run_db(persist, gamification, engine, key)
    logger.info("%s API shutting down", cfg.app_name)


app = FastAPI(
    title="squadxp Gamification API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(gamification_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
