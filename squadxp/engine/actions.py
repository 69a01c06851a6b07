"""
squadxp.engine.actions — XPAction and the reward table
========================================================

Every XP-granting call site in the application names one of these action
keys.  Economy tuning depends on the exact values below; change them only
together with the frontend copy.
"""

from __future__ import annotations

import enum
from types import MappingProxyType

__all__ = ["XPAction", "XP_REWARDS", "reward_for"]


class XPAction(enum.StrEnum):
    """All actions that grant XP through the ledger."""
    SESSION_CREATE = "session.create"
    SESSION_RSVP = "session.rsvp"
    SESSION_ATTEND = "session.attend"
    SESSION_COMPLETE = "session.complete"
    SQUAD_CREATE = "squad.create"
    SQUAD_JOIN = "squad.join"
    SQUAD_INVITE = "squad.invite"
    MESSAGE_SEND = "message.send"
    MESSAGE_FIRST_OF_DAY = "message.first_of_day"
    VOICE_JOIN = "voice.join"
    VOICE_10MIN = "voice.10min"
    PROFILE_COMPLETE = "profile.complete"
    PROFILE_AVATAR = "profile.avatar"
    STREAK_DAY = "streak.day"
    STREAK_WEEK = "streak.week"
    REFERRAL_SUCCESS = "referral.success"
    DISCOVER_BROWSE = "discover.browse"
    INVITE_SEND = "invite.send"


# ---------------------------------------------------------------------------
# XP per action
# ---------------------------------------------------------------------------
XP_REWARDS: MappingProxyType[str, int] = MappingProxyType({
    XPAction.SESSION_CREATE: 25,
    XPAction.SESSION_RSVP: 15,
    XPAction.SESSION_ATTEND: 30,
    XPAction.SESSION_COMPLETE: 20,
    XPAction.SQUAD_CREATE: 50,
    XPAction.SQUAD_JOIN: 20,
    XPAction.SQUAD_INVITE: 10,
    XPAction.MESSAGE_SEND: 2,       # lowest
    XPAction.MESSAGE_FIRST_OF_DAY: 10,
    XPAction.VOICE_JOIN: 15,
    XPAction.VOICE_10MIN: 25,
    XPAction.PROFILE_COMPLETE: 50,
    XPAction.PROFILE_AVATAR: 20,
    XPAction.STREAK_DAY: 15,
    XPAction.STREAK_WEEK: 50,
    XPAction.REFERRAL_SUCCESS: 100,  # highest non-bonus reward
    XPAction.DISCOVER_BROWSE: 5,
    XPAction.INVITE_SEND: 5,
})


def reward_for(action: str) -> int | None:
    """XP granted by *action*, or ``None`` for an unknown key."""
    if not isinstance(action, str):
        return None
    return XP_REWARDS.get(action)
