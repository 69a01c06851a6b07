"""
squadxp.services.profile_sync_service — Remote Profile Reconciliation
=======================================================================

Fetches the authoritative ``profiles`` row and folds it into the local
engine through the ratchet merge in
:meth:`~squadxp.engine.gamification.Gamification.sync_from_db`.

Fetch failures are caught here; the engine never sees them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from squadxp.database.models import Profile

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from squadxp.engine.gamification import Gamification

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProfileSnapshot:
    """The slice of a remote profile the engine cares about."""

    profile_id: str
    xp: int | None = None
    level: int | None = None

    def to_dict(self) -> dict[str, int | None]:
        return {"xp": self.xp, "level": self.level}


def fetch_profile(engine: Engine, profile_id: str) -> ProfileSnapshot | None:
    """Read ``xp`` / ``level`` for *profile_id*.

    Returns ``None`` when the row does not exist or the query fails.
    """
    try:
        with Session(engine) as session:
            row = session.execute(
                select(Profile.xp, Profile.level).where(Profile.id == profile_id)
            ).first()
    except SQLAlchemyError:
        logger.exception("Failed to fetch profile %s", profile_id)
        return None

    if row is None:
        logger.info("Profile %s not found; nothing to sync", profile_id)
        return None
    return ProfileSnapshot(profile_id=profile_id, xp=row.xp, level=row.level)


def sync_profile(gamification: Gamification, engine: Engine, profile_id: str) -> bool:
    """Fetch the remote profile and ratchet-merge it into *gamification*.

    Returns True if the remote values were adopted.
    """
    remote = fetch_profile(engine, profile_id)
    if remote is None:
        return False

    adopted = gamification.sync_from_db(remote.to_dict())
    if not adopted:
        logger.debug(
            "Kept local progress for %s (remote xp=%s is not ahead)",
            profile_id, remote.xp,
        )
    return adopted
