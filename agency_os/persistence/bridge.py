"""
PersistenceBridge - connects the State Container to durable storage.

Startup: local load, then a shallow merge of the remote partial snapshot
(remote wins wholesale per collection). After every transition the
container calls ``save``; failures are logged and never propagate.
"""

import logging

from ..models import Snapshot
from ..seed import initial_snapshot
from .errors import PersistenceError
from .remote import RemoteStore
from .snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class PersistenceBridge:
    def __init__(self, local: SnapshotStore | None = None, remote: RemoteStore | None = None):
        self.local = local or SnapshotStore()
        self.remote = remote
        self.online = True

    def load(self) -> Snapshot:
        try:
            return self.local.load()
        except PersistenceError as e:
            logger.error("Local snapshot load failed, starting from seed data: %s", e)
            self.online = False
            return initial_snapshot()

    def remote_fetch(self) -> dict | None:
        if self.remote is None:
            return None
        return self.remote.fetch()

    def startup(self) -> Snapshot:
        snapshot = self.load()
        partial = self.remote_fetch()
        if not partial:
            return snapshot
        merged = snapshot.to_dict()
        merged.update(partial)
        logger.info("Merged remote snapshot over local (%s)", ", ".join(sorted(partial)))
        return Snapshot.from_dict(merged)

    def save(self, snapshot: Snapshot) -> None:
        """Durable write. Errors are logged and swallowed; the caller's state stands."""
        try:
            self.local.save(snapshot)
            self.online = True
        except PersistenceError as e:
            self.online = False
            logger.error("Snapshot save failed, continuing in memory: %s", e)
