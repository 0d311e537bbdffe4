"""Engines and sessions for the snapshot database."""

from __future__ import annotations

from typing import Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

DEFAULT_DB_URL = "sqlite:///roster.db"

_engines: Dict[str, Engine] = {}


def _is_memory_url(db_url: str) -> bool:
    return db_url in ("sqlite://", "sqlite:///:memory:")


def create_db_engine(db_url: str = DEFAULT_DB_URL, echo: bool = False) -> Engine:
    """
    Engine for a database URL, reused across calls.

    An in-memory SQLite database lives as long as its single connection, so
    it is pinned to one StaticPool connection; every session opened on the
    same URL then sees the same roster.
    """
    engine = _engines.get(db_url)
    if engine is None:
        if _is_memory_url(db_url):
            engine = create_engine(
                db_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(db_url, echo=echo)
        _engines[db_url] = engine
    return engine


def dispose_engines() -> None:
    """Close every cached engine (in-memory databases are discarded)."""
    for engine in _engines.values():
        engine.dispose()
    _engines.clear()


def init_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Create the snapshot table if it does not exist."""
    Base.metadata.create_all(create_db_engine(db_url))
    print(f"[INFO] Database initialized: {db_url}")


def get_session(db_url: str = DEFAULT_DB_URL) -> Session:
    """Open a session on the snapshot database, creating missing tables first."""
    engine = create_db_engine(db_url)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)()


def reset_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Drop and recreate the snapshot table (WARNING: deletes the stored roster!)."""
    engine = create_db_engine(db_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    print(f"[WARN] Database reset: {db_url}")
