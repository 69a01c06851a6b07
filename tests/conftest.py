"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from squadxp.config import SquadXPConfig
from squadxp.database.models import Base
from squadxp.engine.gamification import Gamification, GamificationState
from squadxp.engine.stats import GamificationStats

TEST_PROFILE_ID = "11111111-2222-3333-4444-555555555555"

TEST_CONFIG = SquadXPConfig(
    app_name="Squad Planner XP (tests)",
    profile_id=TEST_PROFILE_ID,
)


def make_gamification(*, xp: int = 0, level: int = 1, **stats) -> Gamification:
    """Engine pre-seeded with *xp*, *level* and counter values.

    ``stats.level`` mirrors *level* unless given explicitly.
    """
    stats.setdefault("level", level)
    return Gamification(
        GamificationState(xp=xp, level=level, stats=GamificationStats(**stats))
    )


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with all squadxp tables.

    Uses StaticPool so every thread (background tasks, ``run_db``) shares
    the same in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def bare_engine() -> Engine:
    """In-memory SQLite engine WITHOUT tables — every query fails."""
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def gamification() -> Gamification:
    return Gamification()


@pytest.fixture
def client(db_engine, gamification):
    """FastAPI TestClient bound to the SQLite engine and a fresh engine state.

    The lifespan is not run; the fixture installs the state it would build.
    """
    from fastapi.testclient import TestClient

    from squadxp.api.deps import get_config, get_engine
    from squadxp.api.main import app

    app.dependency_overrides[get_engine] = lambda: db_engine
    app.dependency_overrides[get_config] = lambda: TEST_CONFIG
    app.state.gamification = gamification
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
