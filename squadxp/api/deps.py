"""
squadxp.api.deps — FastAPI dependency injection
=================================================
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy import Engine

from squadxp.config import SquadXPConfig, load_config
from squadxp.database.engine import create_db_engine
from squadxp.engine.gamification import Gamification
from squadxp.services.snapshot_service import storage_key


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return create_db_engine()


@lru_cache(maxsize=1)
def get_config() -> SquadXPConfig:
    return load_config()


def get_gamification(request: Request) -> Gamification:
    """The engine constructed by the app lifespan."""
    return request.app.state.gamification


def get_storage_key(config: SquadXPConfig = Depends(get_config)) -> str:
    return storage_key(config.storage_namespace, config.profile_id)
