"""
squadxp.constants — Level Table, Titles & Resolver
====================================================

Single source of truth for the leveling curve.  Import from here instead
of duplicating thresholds in services or the API layer.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# XP thresholds per level — index n-1 is the XP needed for level n
# ---------------------------------------------------------------------------
LEVEL_THRESHOLDS: tuple[int, ...] = (
    0,      # Level 1
    100,    # Level 2
    250,    # Level 3
    500,    # Level 4
    850,    # Level 5
    1300,   # Level 6
    1900,   # Level 7
    2600,   # Level 8
    3500,   # Level 9
    4600,   # Level 10
    6000,   # Level 11
    7700,   # Level 12
    9800,   # Level 13
    12300,  # Level 14
    15300,  # Level 15
    18800,  # Level 16
    23000,  # Level 17
    28000,  # Level 18
    34000,  # Level 19
    41000,  # Level 20 (max)
)

MAX_LEVEL: int = len(LEVEL_THRESHOLDS)

LEVEL_TITLES: tuple[str, ...] = (
    "Recrue",        # 1
    "Soldat",        # 2
    "Caporal",       # 3
    "Sergent",       # 4
    "Lieutenant",    # 5
    "Capitaine",     # 6
    "Commandant",    # 7
    "Colonel",       # 8
    "Général",       # 9
    "Maréchal",      # 10
    "Légende",       # 11
    "Mythique",      # 12
    "Immortel",      # 13
    "Divin",         # 14
    "Transcendant",  # 15
    "Cosmique",      # 16
    "Éternel",       # 17
    "Absolu",        # 18
    "Suprême",       # 19
    "Ultime",        # 20
)

# Namespace under which the persisted snapshot is stored
DEFAULT_STORAGE_NAMESPACE = "squadplanner-gamification"


# ---------------------------------------------------------------------------
# Leveling — THE single canonical implementation
# ---------------------------------------------------------------------------
def resolve_level(xp: int) -> int:
    """Level reached with *xp* cumulative XP.

    Returns the largest ``i + 1`` such that ``xp >= LEVEL_THRESHOLDS[i]``.
    XP beyond the last threshold stays at :data:`MAX_LEVEL`.
    """
    for i in range(MAX_LEVEL - 1, -1, -1):
        if xp >= LEVEL_THRESHOLDS[i]:
            return i + 1
    return 1


def level_threshold(level: int) -> int:
    """XP at which *level* starts (clamped into the table)."""
    index = min(max(level, 1), MAX_LEVEL) - 1
    return LEVEL_THRESHOLDS[index]


def level_title(level: int) -> str:
    """Human-readable title for *level*.

    Levels past the end of the table keep the final title.
    """
    index = max(min(level - 1, len(LEVEL_TITLES) - 1), 0)
    return LEVEL_TITLES[index]
