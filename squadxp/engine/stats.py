"""
squadxp.engine.stats — Activity Counters
==========================================

Cumulative per-profile counters read by the achievement conditions.
Incrementing a counter never grants XP on its own; call sites that want
XP for the same activity call :meth:`Gamification.add_xp` separately.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass, fields, replace

logger = logging.getLogger(__name__)

__all__ = ["GamificationStats", "Stat", "COUNTER_FIELDS", "increment", "stats_from_dict"]


class Stat(enum.StrEnum):
    """Counter names accepted by ``increment_stat``."""
    SESSIONS_CREATED = "sessions_created"
    SESSIONS_ATTENDED = "sessions_attended"
    SQUADS_CREATED = "squads_created"
    SQUADS_JOINED = "squads_joined"
    MESSAGES_SENT = "messages_sent"
    VOICE_MINUTES = "voice_minutes"
    NIGHT_SESSIONS = "night_sessions"
    CONSECUTIVE_ATTENDED = "consecutive_attended"
    CURRENT_STREAK = "current_streak"
    BEST_STREAK = "best_streak"
    REFERRALS = "referrals"
    INVITES_SENT = "invites_sent"


# ``level`` is mirrored from the engine, not counted
COUNTER_FIELDS: frozenset[str] = frozenset(s.value for s in Stat)


@dataclass(frozen=True, slots=True)
class GamificationStats:
    """Immutable snapshot of a profile's activity counters.

    ``level`` mirrors the engine level so achievement conditions can gate
    on it.  Invariant: ``best_streak >= current_streak``.
    """

    sessions_created: int = 0
    sessions_attended: int = 0
    squads_created: int = 0
    squads_joined: int = 0
    messages_sent: int = 0
    voice_minutes: int = 0
    night_sessions: int = 0
    consecutive_attended: int = 0
    current_streak: int = 0
    best_streak: int = 0
    referrals: int = 0
    invites_sent: int = 0
    level: int = 1

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def increment(stats: GamificationStats, name: str, amount: int = 1) -> GamificationStats | None:
    """Return *stats* with counter *name* raised by *amount*.

    Returns ``None`` when the counter name or amount is not acceptable;
    the caller treats that as a no-op.  ``best_streak`` is a high-water
    mark and cannot be lowered.
    """
    if not isinstance(name, str) or name not in COUNTER_FIELDS:
        logger.debug("Ignoring increment of unknown stat %r", name)
        return None
    if isinstance(amount, bool) or not isinstance(amount, int):
        logger.debug("Ignoring non-integer increment %r for %s", amount, name)
        return None
    if name == Stat.BEST_STREAK and amount < 0:
        logger.debug("Ignoring decrement of best_streak by %d", amount)
        return None

    field_name = str(name)
    updated = replace(stats, **{field_name: getattr(stats, field_name) + amount})

    if field_name == Stat.CURRENT_STREAK and updated.current_streak > updated.best_streak:
        updated = replace(updated, best_streak=updated.current_streak)
    return updated


def stats_from_dict(raw: dict | None, *, level: int = 1) -> GamificationStats:
    """Build stats from a persisted dict, ignoring unknown or invalid keys."""
    values: dict[str, int] = {}
    for f in fields(GamificationStats):
        value = (raw or {}).get(f.name)
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            values[f.name] = value
    values["level"] = level
    stats = GamificationStats(**values)
    if stats.best_streak < stats.current_streak:
        stats = replace(stats, best_streak=stats.current_streak)
    return stats
