"""
SnapshotStore - durable key-value storage for the whole domain snapshot.

One SQLite table, one row per storage key, the value being the camelCase
JSON document.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from .. import config, paths
from ..models import Snapshot
from ..models.base import iso, utc_now
from ..seed import initial_snapshot
from .errors import PersistenceError

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


class SnapshotStore:
    """Load and save the snapshot document under one key."""

    def __init__(self, db_path: str | Path | None = None, key: str | None = None):
        self.db_path = str(db_path or paths.db_path())
        self.key = key or config.STORAGE_KEY
        with self._get_conn() as conn:
            conn.execute(SCHEMA)
        logger.debug("SnapshotStore ready, DB path: %s", self.db_path)

    @contextmanager
    def _get_conn(self):
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open {self.db_path}: {e}") from e
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Snapshot storage failed: {e}") from e
        finally:
            conn.close()

    def load_document(self) -> dict | None:
        """The raw stored document, or None when missing or unparsable."""
        with self._get_conn() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (self.key,)).fetchone()
        if row is None:
            return None
        try:
            doc = json.loads(row[0])
        except json.JSONDecodeError as e:
            logger.error("Failed to parse stored snapshot %s: %s", self.key, e)
            return None
        return doc if isinstance(doc, dict) else None

    def load(self) -> Snapshot:
        """The stored snapshot, or the default seed when nothing usable is stored."""
        doc = self.load_document()
        if doc is None:
            logger.info("No stored snapshot under %s, starting from seed data", self.key)
            return initial_snapshot()
        return Snapshot.from_dict(doc)

    def save(self, snapshot: Snapshot, now: datetime | None = None) -> Snapshot:
        """
        Write the snapshot, stamping settings.lastUpdated.

        Returns the stamped snapshot. Raises PersistenceError on failure.
        """
        stamp = iso(now or utc_now())
        stamped = snapshot.with_(settings=replace(snapshot.settings, last_updated=stamp))
        payload = json.dumps(stamped.to_dict())
        with self._get_conn() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                (self.key, payload, stamp),
            )
        return stamped
