"""Workspace access settings."""

import logging
from dataclasses import replace
from datetime import datetime

from ..models import AccessPhraseHashes, Snapshot
from ..models.base import iso
from .commands import InitializeAccess
from .common import TransitionResult

logger = logging.getLogger(__name__)


def initialize_access(snapshot: Snapshot, cmd: InitializeAccess, now: datetime) -> TransitionResult:
    settings = replace(
        snapshot.settings,
        initialized=True,
        access_phrase_hashes=AccessPhraseHashes(
            elevated=cmd.elevated_hash, standard=cmd.standard_hash
        ),
        last_updated=iso(now),
    )
    logger.info("Access phrases initialized")
    return TransitionResult(snapshot.with_(settings=settings))
