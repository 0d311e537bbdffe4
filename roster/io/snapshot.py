"""Load, save and auto-persist store snapshots through the snapshot table."""

from __future__ import annotations

from sqlalchemy.orm import Session

from roster.config import RosterConfig
from roster.domain.colors import ColorMeaningRegistry
from roster.domain.repositories import DEFAULT_KEY, SnapshotRepository
from roster.domain.store import RosterStore

from .migrations import migrate_snapshot


def new_store(cfg: RosterConfig | None = None) -> RosterStore:
    """Empty store seeded with the configured color meanings."""
    cfg = cfg or RosterConfig()
    registry = ColorMeaningRegistry.from_list(cfg.default_color_meanings, fallback_color=cfg.fallback_color)
    return RosterStore(registry=registry)


def store_from_payload(payload: dict, cfg: RosterConfig | None = None) -> RosterStore:
    """Migrate a raw snapshot and build a store from it."""
    cfg = cfg or RosterConfig()
    migrated = migrate_snapshot(payload)
    if not isinstance(migrated, dict):
        print("[WARN] Unusable snapshot; starting from an empty roster")
        return new_store(cfg)
    store = RosterStore.from_snapshot(migrated, fallback_color=cfg.fallback_color)
    if "colorMeanings" not in migrated:
        store.registry = ColorMeaningRegistry.from_list(cfg.default_color_meanings, fallback_color=cfg.fallback_color)
    return store


def load_store(session: Session, cfg: RosterConfig | None = None, key: str = DEFAULT_KEY) -> RosterStore:
    """
    Read the persisted snapshot once and build a store from it.

    Args:
        session: Database session
        cfg: RosterConfig for defaults (fallback color, initial color meanings)
        key: Snapshot key

    Returns:
        RosterStore (empty, seeded from config, when nothing is stored)
    """
    payload = SnapshotRepository.load_payload(session, key)
    if payload is None:
        print(f"[INFO] No snapshot stored under '{key}'; starting from an empty roster")
        return new_store(cfg)
    return store_from_payload(payload, cfg)


def save_store(session: Session, store: RosterStore, key: str = DEFAULT_KEY) -> None:
    SnapshotRepository.save(session, store.snapshot(), key)


class SqlSnapshotSink:
    """Store listener that writes every committed snapshot to the database."""

    def __init__(self, session: Session, key: str = DEFAULT_KEY):
        self.session = session
        self.key = key

    def __call__(self, snapshot: dict) -> None:
        try:
            SnapshotRepository.save(self.session, snapshot, self.key)
        except Exception:
            self.session.rollback()
            raise

    def __repr__(self) -> str:
        return f"<SqlSnapshotSink(key='{self.key}')>"
