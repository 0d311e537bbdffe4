"""Repository classes for snapshot data access."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .models import SnapshotRecord

DEFAULT_KEY = "default"


class SnapshotRepository:
    """Repository for persisted store snapshots."""

    @staticmethod
    def get(session: Session, key: str = DEFAULT_KEY) -> Optional[SnapshotRecord]:
        """Get the snapshot row stored under a key."""
        return session.query(SnapshotRecord).filter(SnapshotRecord.key == key).first()

    @staticmethod
    def load_payload(session: Session, key: str = DEFAULT_KEY) -> Optional[dict]:
        """Decode the stored snapshot, or None if nothing was saved yet."""
        record = SnapshotRepository.get(session, key)
        if record is None:
            return None
        return json.loads(record.payload)

    @staticmethod
    def save(session: Session, payload: dict, key: str = DEFAULT_KEY) -> SnapshotRecord:
        """Create or overwrite the snapshot stored under a key."""
        record = SnapshotRepository.get(session, key)
        if record is None:
            record = SnapshotRecord(key=key)
            session.add(record)
        record.schema_version = int(payload.get("schemaVersion", 0))
        record.payload = json.dumps(payload, ensure_ascii=False)
        record.saved_at = datetime.utcnow()
        session.commit()
        return record

    @staticmethod
    def delete(session: Session, key: str = DEFAULT_KEY) -> bool:
        """Delete a stored snapshot. Returns True if a row was removed."""
        count = (
            session.query(SnapshotRecord)
            .filter(SnapshotRecord.key == key)
            .delete(synchronize_session=False)
        )
        session.commit()
        return count > 0
