"""
squadxp.api.__main__ — Entry point for ``python -m squadxp.api``
==================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (port, profile, storage namespace).
3. Create the SQLAlchemy engine and ensure tables exist.
4. Start uvicorn; the app lifespan constructs and hydrates the engine.
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from squadxp.config import load_config
from squadxp.database.engine import create_db_engine, init_db

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("squadxp")


def main() -> None:
    """Bootstrap and serve the squadxp API."""

    # 1. Environment variables (secrets).
    load_dotenv()

    # 2. Soft configuration.
    try:
        cfg = load_config()
    except (FileNotFoundError, KeyError) as exc:
        logger.critical("Invalid configuration: %s", exc)
        sys.exit(1)
    logger.info("Config loaded — %s (profile %s)", cfg.app_name, cfg.profile_id)

    # 3. Database.
    try:
        engine = create_db_engine()
    except RuntimeError as exc:
        logger.critical("%s", exc)
        sys.exit(1)
    init_db(engine)
    engine.dispose()

    # 4. Serve (blocks until Ctrl+C or SIGTERM).
    logger.info("Starting squadxp API on port %d…", cfg.api_port)
    uvicorn.run("squadxp.api.main:app", host="0.0.0.0", port=cfg.api_port, log_config=None)


if __name__ == "__main__":
    main()
