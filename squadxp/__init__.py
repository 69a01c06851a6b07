"""
squadxp — Gamification Engine for Squad Planner
=================================================
Awards an XP economy, derives levels from cumulative XP, tracks activity
counters, unlocks one-time achievements and reconciles local progress with
the authoritative remote profile without ever regressing it.

Package layout::

    squadxp/
    ├── config.py          # YAML → typed Python config
    ├── constants.py       # Level table, titles, resolve_level()
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # profiles, gamification_snapshots
    ├── engine/
    │   ├── actions.py     # XPAction + XP reward table
    │   ├── stats.py       # Activity counters + streak rule
    │   ├── achievements.py # Achievement registry + evaluator
    │   ├── progress.py    # Within-level progress
    │   └── gamification.py # Ledger, notification slots, DB ratchet
    ├── services/
    │   ├── snapshot_service.py      # Durable snapshot store
    │   └── profile_sync_service.py  # Remote profile → sync_from_db
    └── api/
        ├── main.py        # FastAPI app
        └── routes/        # Progress views + engine operations
"""

__version__ = "0.1.0"
