"""
squadxp.engine.progress — Within-Level Progress
=================================================

Pure read view used by XP bars: how far the profile is between the
threshold of its current level and the next one.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

from squadxp.constants import MAX_LEVEL, level_threshold

__all__ = ["Progress", "calculate_progress"]


@dataclass(frozen=True, slots=True)
class Progress:
    """XP earned inside the current level and XP the level spans."""

    current: int
    needed: int
    percent: float

    def to_dict(self) -> dict:
        return asdict(self)


def calculate_progress(xp: int, level: int) -> Progress:
    """Progress of *xp* through *level*.

    At the max level the span is zero and ``percent`` is pinned to 100.
    ``percent`` is always clamped to ``[0, 100]``.
    """
    clamped = min(max(level, 1), MAX_LEVEL)
    current_threshold = level_threshold(clamped)
    # level_threshold clamps, so the max level's "next" is its own threshold
    next_threshold = level_threshold(clamped + 1)

    current = xp - current_threshold
    needed = next_threshold - current_threshold

    if needed > 0:
        percent = min(max(current / needed * 100, 0.0), 100.0)
    else:
        percent = 100.0
    return Progress(current=current, needed=needed, percent=percent)
