"""
squadxp.api.routes.gamification — Progress views & engine operations
======================================================================

Read views consumed by the XP bar and celebration overlays, plus the
inbound operations.  Every mutating route schedules a snapshot save as a
background task; the response reflects the in-memory state regardless of
whether that save succeeds.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy import Engine

from squadxp.api.deps import get_config, get_engine, get_gamification, get_storage_key
from squadxp.config import SquadXPConfig
from squadxp.engine.achievements import ACHIEVEMENTS
from squadxp.engine.actions import XP_REWARDS
from squadxp.engine.gamification import Gamification, XPAward
from squadxp.services.profile_sync_service import sync_profile
from squadxp.services.snapshot_service import persist

router = APIRouter(prefix="/gamification", tags=["gamification"])


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------
class XPRequest(BaseModel):
    action: str = Field(..., min_length=1, max_length=50)


class StatRequest(BaseModel):
    stat: str = Field(..., min_length=1, max_length=50)
    amount: int = 1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _pending_dict(g: Gamification) -> dict:
    level_up = g.pending_level_up
    achievement = g.pending_achievement
    return {
        "state": g.notification_state.value,
        "level_up": level_up.to_dict() if level_up else None,
        "achievement": achievement.to_dict() if achievement else None,
    }


def _award_dict(award: XPAward, g: Gamification) -> dict:
    return {
        "action": award.action,
        "xp_awarded": award.xp,
        "bonus_xp": award.bonus_xp,
        "leveled_up": award.leveled_up,
        "old_level": award.old_level,
        "new_level": award.new_level,
        "achievement": award.achievement.to_dict() if award.achievement else None,
        "xp": g.xp,
        "level": g.level,
    }


# ---------------------------------------------------------------------------
# GET /gamification
# ---------------------------------------------------------------------------
@router.get("")
def get_state(g: Gamification = Depends(get_gamification)):
    """Everything the profile header needs in one call."""
    snapshot = g.snapshot()
    return {
        "xp": snapshot["xp"],
        "level": snapshot["level"],
        "title": g.get_level_title(),
        "progress": g.get_progress().to_dict(),
        "stats": snapshot["stats"],
        "unlocked_achievements": snapshot["unlocked_achievements"],
        "pending": _pending_dict(g),
        "hydrated": g.hydrated,
    }


@router.get("/progress")
def get_progress(g: Gamification = Depends(get_gamification)):
    return g.get_progress().to_dict()


@router.get("/title")
def get_title(g: Gamification = Depends(get_gamification)):
    return {"level": g.level, "title": g.get_level_title()}


@router.get("/pending")
def get_pending(g: Gamification = Depends(get_gamification)):
    return _pending_dict(g)


@router.get("/achievements")
def list_achievements(g: Gamification = Depends(get_gamification)):
    """The fixed registry, in declaration order, with unlock flags."""
    unlocked = set(g.unlocked_achievements)
    return [
        {**a.to_dict(), "unlocked": a.id in unlocked}
        for a in ACHIEVEMENTS
    ]


@router.get("/actions")
def list_actions():
    return {str(action): xp for action, xp in XP_REWARDS.items()}


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------
@router.post("/xp")
def add_xp(
    body: XPRequest,
    background_tasks: BackgroundTasks,
    g: Gamification = Depends(get_gamification),
    engine: Engine = Depends(get_engine),
    key: str = Depends(get_storage_key),
):
    award = g.add_xp(body.action)
    if award is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"Unknown action: {body.action}")
    background_tasks.add_task(persist, g, engine, key)
    return _award_dict(award, g)


@router.post("/stats")
def increment_stat(
    body: StatRequest,
    background_tasks: BackgroundTasks,
    g: Gamification = Depends(get_gamification),
    engine: Engine = Depends(get_engine),
    key: str = Depends(get_storage_key),
):
    if not g.increment_stat(body.stat, body.amount):
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"Unknown stat: {body.stat}")
    background_tasks.add_task(persist, g, engine, key)
    return {"stat": body.stat, "value": getattr(g.stats, body.stat)}


@router.post("/dismiss/level-up")
def dismiss_level_up(g: Gamification = Depends(get_gamification)):
    g.dismiss_level_up()
    return _pending_dict(g)


@router.post("/dismiss/achievement")
def dismiss_achievement(g: Gamification = Depends(get_gamification)):
    g.dismiss_achievement()
    return _pending_dict(g)


@router.post("/sync")
def sync_from_profile(
    background_tasks: BackgroundTasks,
    g: Gamification = Depends(get_gamification),
    engine: Engine = Depends(get_engine),
    config: SquadXPConfig = Depends(get_config),
    key: str = Depends(get_storage_key),
):
    """Ratchet-merge the remote profile into local progress."""
    adopted = sync_profile(g, engine, config.profile_id)
    if adopted:
        background_tasks.add_task(persist, g, engine, key)
    return {"adopted": adopted, "xp": g.xp, "level": g.level}
