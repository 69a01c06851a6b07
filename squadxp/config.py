"""
squadxp.config — YAML Configuration Loader
============================================

Reads ``config.yaml`` for process-level settings (which profile this
process tracks, where its snapshot is stored, which port the API binds).
Secrets such as ``DATABASE_URL`` come from ``.env``.  The XP economy
itself is compiled in and is not configurable here.

Usage::

    from squadxp.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.profile_id)        # "4f1c…"
    print(cfg.storage_namespace) # "squadplanner-gamification"
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from squadxp.constants import DEFAULT_STORAGE_NAMESPACE


@dataclass(frozen=True, slots=True)
class SquadXPConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    app_name: str
    profile_id: str  # Profile whose progress this process owns

    api_port: int = 8000
    storage_namespace: str = DEFAULT_STORAGE_NAMESPACE
    sync_on_startup: bool = True  # Ratchet-merge the remote profile at boot


def default_config_path() -> Path:
    """``$SQUADXP_CONFIG`` if set, else ``./config.yaml``."""
    return Path(os.getenv("SQUADXP_CONFIG", "config.yaml"))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path | None = None) -> SquadXPConfig:
    """Read *path* and return a :class:`SquadXPConfig` instance.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return SquadXPConfig(
        app_name=raw["app_name"],
        profile_id=str(raw["profile_id"]),
        api_port=int(raw.get("api_port", 8000)),
        storage_namespace=raw.get("storage_namespace") or DEFAULT_STORAGE_NAMESPACE,
        sync_on_startup=bool(raw.get("sync_on_startup", True)),
    )
