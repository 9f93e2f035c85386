"""Persistence bridge: local snapshot store and optional remote read."""

from .bridge import PersistenceBridge
from .errors import PersistenceError
from .remote import TABLES, RemoteStore
from .snapshot_store import SnapshotStore

__all__ = ["PersistenceBridge", "PersistenceError", "RemoteStore", "SnapshotStore", "TABLES"]
