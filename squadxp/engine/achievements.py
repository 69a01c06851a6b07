"""
squadxp.engine.achievements — Achievement Registry & Evaluator
================================================================

Fixed, compiled-in achievement table.  Each entry pairs display data with
a pure condition function over a :class:`GamificationStats` snapshot.

Declaration order is significant: :func:`evaluate_achievements` returns
only the *first* newly eligible entry, so when several conditions become
true in the same update the earlier one surfaces first and the rest are
picked up on later calls.

This module is pure calculation — no database I/O, no HTTP I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass, field

from squadxp.engine.stats import GamificationStats

logger = logging.getLogger(__name__)

__all__ = [
    "ACHIEVEMENTS",
    "ACHIEVEMENTS_BY_ID",
    "Achievement",
    "evaluate_achievements",
    "get_achievement",
]


@dataclass(frozen=True, slots=True)
class Achievement:
    """One-time milestone; unlocking grants ``xp_bonus`` once per profile."""

    id: str
    name: str
    description: str
    icon: str
    xp_bonus: int
    condition: Callable[[GamificationStats], bool] = field(repr=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "xp_bonus": self.xp_bonus,
        }


# ---------------------------------------------------------------------------
# Conditions — pure functions (stats) → bool
# ---------------------------------------------------------------------------

def _first_session(s: GamificationStats) -> bool:
    return s.sessions_created >= 1


def _squad_leader(s: GamificationStats) -> bool:
    return s.squads_created >= 3


def _social_butterfly(s: GamificationStats) -> bool:
    return s.messages_sent >= 100


def _night_owl(s: GamificationStats) -> bool:
    return s.night_sessions >= 5


def _reliable(s: GamificationStats) -> bool:
    return s.consecutive_attended >= 10


def _voice_veteran(s: GamificationStats) -> bool:
    # 5 hours
    return s.voice_minutes >= 300


def _week_warrior(s: GamificationStats) -> bool:
    return s.current_streak >= 7


def _centurion(s: GamificationStats) -> bool:
    return s.level >= 10


def _ambassador(s: GamificationStats) -> bool:
    return s.referrals >= 5


def _marathon(s: GamificationStats) -> bool:
    return s.sessions_attended >= 50


# ---------------------------------------------------------------------------
# Registry — do not reorder
# ---------------------------------------------------------------------------
ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement(
        id="first-session",
        name="Première session",
        description="Crée ta première session de jeu",
        icon="\U0001f3ae",  # 🎮
        xp_bonus=50,
        condition=_first_session,
    ),
    Achievement(
        id="squad-leader",
        name="Leader né",
        description="Crée 3 squads",
        icon="\U0001f451",  # 👑
        xp_bonus=100,
        condition=_squad_leader,
    ),
    Achievement(
        id="social-butterfly",
        name="Papillon social",
        description="Envoie 100 messages",
        icon="\U0001f98b",  # 🦋
        xp_bonus=75,
        condition=_social_butterfly,
    ),
    Achievement(
        id="night-owl",
        name="Oiseau de nuit",
        description="Participe à 5 sessions après 22h",
        icon="\U0001f989",  # 🦉
        xp_bonus=60,
        condition=_night_owl,
    ),
    Achievement(
        id="reliable",
        name="Fiable à 100%",
        description="Participe à 10 sessions consécutives confirmées",
        icon="\U0001f48e",  # 💎
        xp_bonus=150,
        condition=_reliable,
    ),
    Achievement(
        id="voice-veteran",
        name="Vétéran vocal",
        description="Passe 5h en appel vocal",
        icon="\U0001f399️",  # 🎙️
        xp_bonus=100,
        condition=_voice_veteran,
    ),
    Achievement(
        id="week-warrior",
        name="Guerrier de la semaine",
        description="Joue 7 jours consécutifs",
        icon="⚔️",  # ⚔️
        xp_bonus=75,
        condition=_week_warrior,
    ),
    Achievement(
        id="centurion",
        name="Centurion",
        description="Atteins le niveau 10",
        icon="\U0001f3db️",  # 🏛️
        xp_bonus=200,
        condition=_centurion,
    ),
    Achievement(
        id="ambassador",
        name="Ambassadeur",
        description="Invite 5 amis qui rejoignent",
        icon="\U0001f31f",  # 🌟
        xp_bonus=250,
        condition=_ambassador,
    ),
    Achievement(
        id="marathon",
        name="Marathonien",
        description="Participe à 50 sessions",
        icon="\U0001f3c3",  # 🏃
        xp_bonus=200,
        condition=_marathon,
    ),
)

ACHIEVEMENTS_BY_ID: dict[str, Achievement] = {a.id: a for a in ACHIEVEMENTS}


def get_achievement(achievement_id: str) -> Achievement | None:
    """Look up a registry entry by its stable id."""
    return ACHIEVEMENTS_BY_ID.get(achievement_id)


# ---------------------------------------------------------------------------
# Main check function
# ---------------------------------------------------------------------------
def evaluate_achievements(
    stats: GamificationStats,
    unlocked_ids: Collection[str],
) -> Achievement | None:
    """Return the first newly earned achievement, or ``None``.

    Parameters
    ----------
    stats : Counter snapshot (with ``level`` already updated for this call).
    unlocked_ids : Ids the profile has already unlocked.  These are always
        skipped, so an achievement can never be awarded twice.
    """
    for achievement in ACHIEVEMENTS:
        if achievement.id in unlocked_ids:
            continue
        if achievement.condition(stats):
            logger.debug("Achievement condition met: %s", achievement.id)
            return achievement
    return None
