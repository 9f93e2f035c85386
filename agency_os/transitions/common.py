"""
Shared plumbing for transitions: results, patch merging, activity and
timeline helpers.

Every helper is pure. ``now`` is always passed in.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from functools import cache
from typing import Any, get_args, get_type_hints

from ..ids import next_id
from ..models import ActivityEntry, ActivityType, Client, EventKind, OperatorLevel, Snapshot, TimelineEvent
from ..models.base import camel, iso, plain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransitionResult:
    """Next snapshot plus the ids of any records a create-style command made."""

    snapshot: Snapshot
    created_ids: tuple[int, ...] = field(default=())

    @property
    def created_id(self) -> int | None:
        return self.created_ids[0] if self.created_ids else None


def unchanged(snapshot: Snapshot) -> TransitionResult:
    return TransitionResult(snapshot)


@cache
def nullable_keys(record_type) -> frozenset[str]:
    """Document keys of the fields typed ``X | None``."""
    hints = get_type_hints(record_type)
    return frozenset(
        f.metadata.get("key") or camel(f.name)
        for f in fields(record_type)
        if type(None) in get_args(hints[f.name])
    )


def merge_patch(record, patch: dict[str, Any], protected: frozenset[str], now: datetime):
    """
    Merge a camelCase or snake_case patch into a record and bump updatedAt.

    Unknown keys, ``protected`` fields and nulls for fields that cannot
    be empty are dropped with a warning.
    """
    doc = record.to_dict()
    nullable = nullable_keys(type(record))
    for key, value in patch.items():
        doc_key = camel(key)
        if doc_key not in doc or doc_key in protected or (value is None and doc_key not in nullable):
            logger.warning(
                "Ignoring patch field %r on %s %s", key, type(record).__name__, record.id
            )
            continue
        doc[doc_key] = plain(value)
    doc["updatedAt"] = iso(now)
    return type(record).from_dict(doc)


def replace_in(records: tuple, updated) -> tuple:
    """Swap the record with ``updated.id``, keeping collection order."""
    return tuple(updated if r.id == updated.id else r for r in records)


def activity(
    now: datetime,
    kind: ActivityType,
    text: str,
    author: OperatorLevel,
    from_stage: str | None = None,
    to_stage: str | None = None,
) -> ActivityEntry:
    return ActivityEntry(
        timestamp=iso(now),
        type=kind,
        from_stage=from_stage,
        to_stage=to_stage,
        text=text,
        author=author,
    )


def prepend_events(client: Client, texts: list[str], now: datetime, kind: EventKind = EventKind.SYSTEM) -> Client:
    """
    Prepend events in the order given; the last text ends up newest.

    Ids continue from the client's current max.
    """
    timeline = client.timeline
    for text in texts:
        event = TimelineEvent(id=next_id(timeline), date=iso(now), event=text, type=kind)
        timeline = (event, *timeline)
    return replace(client, timeline=timeline)


def with_client_events(
    snapshot: Snapshot, client_id: int, texts: list[str], now: datetime, **client_changes
) -> Snapshot:
    """Append timeline events to one client inside a snapshot; no-op if absent."""
    client = snapshot.client(client_id)
    if client is None:
        logger.warning("Timeline event for unknown client %s dropped", client_id)
        return snapshot
    client = prepend_events(client, texts, now)
    if client_changes:
        client = replace(client, **client_changes)
    return snapshot.with_(clients=replace_in(snapshot.clients, client))


def stage_activity(
    pipeline: tuple[str, ...],
    current: str,
    target: str,
    author: OperatorLevel,
    note: str | None,
    now: datetime,
) -> ActivityEntry | None:
    """
    Log entry for a stage move, or None when ``target`` is not in the pipeline.

    Any pipeline member is accepted. A note makes it a ``note`` entry;
    otherwise moving backwards is ``stage_regress``.
    """
    if target not in pipeline:
        return None
    if note:
        kind = ActivityType.NOTE
    elif current in pipeline and pipeline.index(target) < pipeline.index(current):
        kind = ActivityType.STAGE_REGRESS
    else:
        kind = ActivityType.STAGE_ADVANCE
    verb = "Moved back" if kind == ActivityType.STAGE_REGRESS else "Advanced"
    text = note or f"{verb} from {current} to {target}"
    return activity(now, kind, text, author, from_stage=current, to_stage=target)
