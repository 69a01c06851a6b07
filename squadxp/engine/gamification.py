"""
squadxp.engine.gamification — XP Ledger, Notification Queue & DB Ratchet
==========================================================================

:class:`Gamification` owns one profile's in-memory progress and is the only
way to mutate it.  It is constructed explicitly (no module-level instance)
and handed to whoever needs it — the API stores it on ``app.state``.

Boot is two-phase:

    1. ``Gamification()`` — synchronous defaults, ``hydrated=False``.
    2. ``load(snapshot)`` — once the durable-storage read completes;
       sets ``hydrated=True`` so the UI can skip the zero-XP flash.

Every public method runs as one atomic read-modify-write under a single
lock, because FastAPI executes sync routes on a thread pool.  Nothing in
here performs I/O; persistence lives in :mod:`squadxp.services`.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from squadxp.constants import level_title, resolve_level
from squadxp.engine.achievements import Achievement, evaluate_achievements
from squadxp.engine.actions import reward_for
from squadxp.engine.progress import Progress, calculate_progress
from squadxp.engine.stats import GamificationStats, increment, stats_from_dict

logger = logging.getLogger(__name__)

__all__ = [
    "Gamification",
    "GamificationState",
    "LevelUp",
    "NotificationState",
    "XPAward",
]


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class LevelUp:
    """Pending level-up celebration."""

    from_level: int
    to_level: int

    def to_dict(self) -> dict[str, int]:
        return {"from": self.from_level, "to": self.to_level}


@dataclass(frozen=True, slots=True)
class XPAward:
    """Outcome of one :meth:`Gamification.add_xp` call."""

    action: str
    xp: int
    bonus_xp: int = 0
    leveled_up: bool = False
    old_level: int = 1
    new_level: int = 1
    achievement: Achievement | None = None

    @property
    def total_xp(self) -> int:
        return self.xp + self.bonus_xp


class NotificationState(enum.StrEnum):
    """Occupancy of the two independent pending slots."""
    IDLE = "idle"
    LEVEL_UP_PENDING = "level_up_pending"
    ACHIEVEMENT_PENDING = "achievement_pending"
    BOTH_PENDING = "both_pending"


@dataclass(slots=True)
class GamificationState:
    """Mutable state record.  Only :class:`Gamification` writes to it."""

    xp: int = 0
    level: int = 1
    stats: GamificationStats = field(default_factory=GamificationStats)
    unlocked_achievements: list[str] = field(default_factory=list)
    pending_level_up: LevelUp | None = None
    pending_achievement: Achievement | None = None
    hydrated: bool = False


def _coerce_non_negative(value: Any) -> int:
    """Integer >= 0 from untrusted input; anything else becomes 0.

    Integral floats (``500.0``, as some drivers return numerics) count.
    """
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return max(value, 0)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class Gamification:
    """One profile's XP, level, counters, achievements and pending slots."""

    def __init__(self, state: GamificationState | None = None) -> None:
        self._state = state if state is not None else GamificationState()
        self._lock = threading.Lock()

    # -- read-only views ---------------------------------------------------
    @property
    def xp(self) -> int:
        with self._lock:
            return self._state.xp

    @property
    def level(self) -> int:
        with self._lock:
            return self._state.level

    @property
    def stats(self) -> GamificationStats:
        with self._lock:
            return self._state.stats

    @property
    def unlocked_achievements(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._state.unlocked_achievements)

    @property
    def pending_level_up(self) -> LevelUp | None:
        with self._lock:
            return self._state.pending_level_up

    @property
    def pending_achievement(self) -> Achievement | None:
        with self._lock:
            return self._state.pending_achievement

    @property
    def hydrated(self) -> bool:
        with self._lock:
            return self._state.hydrated

    @property
    def notification_state(self) -> NotificationState:
        with self._lock:
            level_up = self._state.pending_level_up is not None
            achievement = self._state.pending_achievement is not None
        if level_up and achievement:
            return NotificationState.BOTH_PENDING
        if level_up:
            return NotificationState.LEVEL_UP_PENDING
        if achievement:
            return NotificationState.ACHIEVEMENT_PENDING
        return NotificationState.IDLE

    def get_progress(self) -> Progress:
        with self._lock:
            return calculate_progress(self._state.xp, self._state.level)

    def get_level_title(self) -> str:
        with self._lock:
            return level_title(self._state.level)

    # -- XP ledger -----------------------------------------------------------
    def add_xp(self, action: str) -> XPAward | None:
        """Apply the reward for *action*.

        Unknown actions are ignored and return ``None``.  At most one level
        crossing is detected and at most one achievement unlocks per call;
        the achievement bonus is added after the level has been resolved.
        """
        reward = reward_for(action)
        if not reward:
            logger.debug("Ignoring unknown XP action %r", action)
            return None

        with self._lock:
            state = self._state
            old_level = state.level

            new_xp = state.xp + reward
            new_level = resolve_level(new_xp)
            leveled_up = new_level > old_level

            new_stats = replace(state.stats, level=new_level)
            achievement = evaluate_achievements(new_stats, state.unlocked_achievements)
            bonus = achievement.xp_bonus if achievement is not None else 0

            state.xp = new_xp + bonus
            state.level = new_level
            state.stats = new_stats
            if leveled_up:
                state.pending_level_up = LevelUp(old_level, new_level)
            if achievement is not None:
                state.unlocked_achievements.append(achievement.id)
                state.pending_achievement = achievement

        if leveled_up:
            logger.info("Level up: %d → %d (action=%s)", old_level, new_level, action)
        if achievement is not None:
            logger.info(
                "Achievement unlocked: %s (+%d XP bonus)", achievement.id, bonus,
            )

        return XPAward(
            action=str(action),
            xp=reward,
            bonus_xp=bonus,
            leveled_up=leveled_up,
            old_level=old_level,
            new_level=new_level,
            achievement=achievement,
        )

    # -- stats tracker -------------------------------------------------------
    def increment_stat(self, name: str, amount: int = 1) -> bool:
        """Add *amount* to counter *name*.  Returns False if ignored."""
        with self._lock:
            updated = increment(self._state.stats, name, amount)
            if updated is None:
                return False
            self._state.stats = updated
        return True

    # -- notification queue --------------------------------------------------
    def dismiss_level_up(self) -> None:
        with self._lock:
            self._state.pending_level_up = None

    def dismiss_achievement(self) -> None:
        with self._lock:
            self._state.pending_achievement = None

    # -- DB reconciliation ---------------------------------------------------
    def sync_from_db(self, remote: Mapping[str, Any] | None) -> bool:
        """Ratchet-merge an authoritative remote ``{xp, level}`` snapshot.

        The remote values are adopted only when they are ahead of local XP,
        or when local XP is still at its default of 0.  A stale remote read
        never overwrites more advanced unsynced local progress.  Unlocked
        achievements, pending slots and counters other than ``level`` are
        never touched.

        Returns True when the remote snapshot was adopted.
        """
        remote = remote or {}
        remote_xp = _coerce_non_negative(remote.get("xp"))
        remote_level = _coerce_non_negative(remote.get("level"))

        with self._lock:
            state = self._state
            if not (remote_xp > state.xp or state.xp == 0):
                return False

            level = remote_level if remote_level > 0 else resolve_level(remote_xp)
            state.xp = remote_xp
            state.level = level
            state.stats = replace(state.stats, level=level)

        logger.info("Adopted remote progress: xp=%d level=%d", remote_xp, level)
        return True

    # -- persistence boundary ------------------------------------------------
    def snapshot(self) -> dict[str, Any]:
        """Plain, JSON-serialisable snapshot for the storage adapter."""
        with self._lock:
            state = self._state
            return {
                "xp": state.xp,
                "level": state.level,
                "stats": state.stats.to_dict(),
                "unlocked_achievements": list(state.unlocked_achievements),
            }

    def load(self, snapshot: Mapping[str, Any] | None) -> None:
        """Overlay a persisted *snapshot* and mark the state as hydrated.

        ``None`` means storage held nothing: the defaults are confirmed as a
        fresh profile.  Calling this twice with the same snapshot yields the
        same state.  Pending slots are not persisted and are left as they are.
        """
        if snapshot is None:
            with self._lock:
                self._state.hydrated = True
            logger.info("No persisted snapshot; starting fresh")
            return

        xp = _coerce_non_negative(snapshot.get("xp"))
        level = _coerce_non_negative(snapshot.get("level")) or resolve_level(xp)
        raw_stats = snapshot.get("stats")
        stats = stats_from_dict(raw_stats if isinstance(raw_stats, Mapping) else None, level=level)

        raw_unlocked = snapshot.get("unlocked_achievements")
        if not isinstance(raw_unlocked, (list, tuple)):
            raw_unlocked = ()

        unlocked: list[str] = []
        for achievement_id in raw_unlocked:
            if isinstance(achievement_id, str) and achievement_id not in unlocked:
                unlocked.append(achievement_id)

        with self._lock:
            state = self._state
            state.xp = xp
            state.level = level
            state.stats = stats
            state.unlocked_achievements = unlocked
            state.hydrated = True

        logger.info(
            "Restored snapshot: xp=%d level=%d achievements=%d",
            xp, level, len(unlocked),
        )
