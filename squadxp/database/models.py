"""
squadxp.database.models — SQLAlchemy 2.0 Data Models
======================================================

Tables:
- profiles               — Authoritative remote profile (xp, level)
- gamification_snapshots — Durable copy of the in-memory engine state
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all squadxp ORM models."""


# ---------------------------------------------------------------------------
# Profiles — one row per member, written by the rest of the application
# ---------------------------------------------------------------------------
class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    xp: Mapped[int | None] = mapped_column(Integer, default=0)
    level: Mapped[int | None] = mapped_column(Integer, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("ix_profiles_xp_desc", "xp"),
    )

    def __repr__(self) -> str:
        return f"<Profile id={self.id} name={self.username!r} lvl={self.level}>"


# ---------------------------------------------------------------------------
# Gamification snapshots — key/value store for the engine state
# ---------------------------------------------------------------------------
class GamificationSnapshot(Base):
    """Persisted engine state under a ``<namespace>:<profile_id>`` key.

    ``payload_json`` holds ``{"xp", "level", "stats",
    "unlocked_achievements"}`` as produced by
    :meth:`~squadxp.engine.gamification.Gamification.snapshot`.
    """
    __tablename__ = "gamification_snapshots"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    payload_json: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<GamificationSnapshot key={self.key!r}>"
