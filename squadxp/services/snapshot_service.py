"""
squadxp.services.snapshot_service — Durable Snapshot Store
============================================================

Storage adapter between :class:`~squadxp.engine.gamification.Gamification`
and the ``gamification_snapshots`` table.

The in-memory engine is authoritative for the running process.  Writes are
fire-and-forget: a failed save is logged and reported as ``False`` but never
rolls back a mutation that has already been applied in memory.  Read
failures leave the engine un-hydrated so the UI keeps waiting instead of
showing a fresh zero-XP profile.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from squadxp.database.engine import get_session
from squadxp.database.models import GamificationSnapshot

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from squadxp.engine.gamification import Gamification

logger = logging.getLogger(__name__)

# Sentinel distinguishing "storage read failed" from "nothing stored"
_READ_FAILED = object()


def storage_key(namespace: str, profile_id: str) -> str:
    """Row key for one profile's snapshot within *namespace*."""
    return f"{namespace}:{profile_id}"


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
def _read(engine: Engine, key: str) -> Any:
    try:
        with Session(engine) as session:
            row = session.get(GamificationSnapshot, key)
            if row is None:
                return None
            raw = row.payload_json
    except SQLAlchemyError:
        logger.exception("Failed to read snapshot %s", key)
        return _READ_FAILED

    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Snapshot %s holds invalid JSON; ignoring it", key)
        return _READ_FAILED
    if not isinstance(payload, dict):
        logger.warning("Snapshot %s is not an object; ignoring it", key)
        return _READ_FAILED
    return payload


def load_snapshot(engine: Engine, key: str) -> dict | None:
    """Return the stored snapshot dict, or ``None`` if absent or unreadable."""
    payload = _read(engine, key)
    return None if payload is _READ_FAILED else payload


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------
_write_locks: dict[str, threading.Lock] = {}
_write_locks_guard = threading.Lock()


def _write_lock(key: str) -> threading.Lock:
    with _write_locks_guard:
        return _write_locks.setdefault(key, threading.Lock())


def _write(engine: Engine, key: str, snapshot: dict) -> bool:
    # Caller holds _write_lock(key)
    try:
        payload = json.dumps(snapshot, ensure_ascii=False)
    except (TypeError, ValueError):
        logger.exception("Snapshot %s is not JSON-serialisable", key)
        return False

    try:
        with get_session(engine) as session:
            session.merge(GamificationSnapshot(key=key, payload_json=payload))
    except SQLAlchemyError:
        logger.exception("Failed to persist snapshot %s", key)
        return False

    logger.debug("Snapshot %s persisted", key)
    return True


def save_snapshot(engine: Engine, key: str, snapshot: dict) -> bool:
    """Upsert *snapshot* under *key*.  Returns False on failure.

    Writes to the same key are serialised within the process.
    """
    with _write_lock(key):
        return _write(engine, key, snapshot)


# ---------------------------------------------------------------------------
# Engine wiring
# ---------------------------------------------------------------------------
def hydrate(gamification: Gamification, engine: Engine, key: str) -> bool:
    """Second boot phase: restore *gamification* from storage.

    Returns True once the engine is hydrated (restored or confirmed fresh).
    On a storage failure the engine keeps its defaults with
    ``hydrated=False`` and False is returned.
    """
    payload = _read(engine, key)
    if payload is _READ_FAILED:
        return False
    gamification.load(payload)
    return True


def persist(gamification: Gamification, engine: Engine, key: str) -> bool:
    """Save the current engine state; never raises.

    The snapshot is taken while holding the key's write lock, so the last
    persist to finish always stores the newest state.
    """
    with _write_lock(key):
        return _write(engine, key, gamification.snapshot())
