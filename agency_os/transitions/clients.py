"""
Client lifecycle transitions.

A status change fires exactly one side effect, chosen by the new status.
The status field itself may move in any direction.
"""

import logging
from dataclasses import replace
from datetime import datetime

from ..ids import next_id
from ..models import (
    Client,
    ClientStatus,
    KnowledgeCategory,
    Snapshot,
    TaskStatus,
    TimelineEvent,
    generate_onboarding_protocol,
)
from ..models.base import day, iso, pick
from .commands import AddClient, AddTimelineEvent, DeleteClient, UpdateClient
from .common import TransitionResult, merge_patch, prepend_events, replace_in, unchanged

logger = logging.getLogger(__name__)

PROTECTED = frozenset(("id", "createdAt", "timeline"))
STATUSES = frozenset(s.value for s in ClientStatus)


def add_client(snapshot: Snapshot, cmd: AddClient, now: datetime) -> TransitionResult:
    client_id = next_id(snapshot.clients)
    doc = {k: v for k, v in cmd.draft.items() if k not in ("id", "createdAt", "created_at", "updatedAt", "updated_at")}
    client = replace(
        Client.from_dict(doc),
        id=client_id,
        created_at=iso(now),
        updated_at=iso(now),
    )
    if not client.timeline:
        client = replace(
            client,
            timeline=(
                TimelineEvent(
                    id=1, date=iso(now), event=f"Client installed via revenue gate on {day(now)}"
                ),
            ),
        )

    onboardings = snapshot.onboardings
    if client.status == ClientStatus.ACTIVE_SPRINT:
        onboardings = (*onboardings, generate_onboarding_protocol(client_id, now))

    logger.info(
        "Installed client %s (%s) as %s", client_id, client.name, client.status.value,
        extra={"client_id": client_id},
    )
    return TransitionResult(
        snapshot.with_(clients=(*snapshot.clients, client), onboardings=onboardings),
        (client_id,),
    )


def update_client(snapshot: Snapshot, cmd: UpdateClient, now: datetime) -> TransitionResult:
    old = snapshot.client(cmd.client_id)
    if old is None:
        logger.warning("update_client: client %s not found", cmd.client_id)
        return unchanged(snapshot)

    patch = dict(cmd.patch)
    new_status = pick(patch, "status")
    if new_status is not None:
        if new_status not in STATUSES:
            logger.warning("update_client: unknown status %r ignored", new_status)
            patch = {k: v for k, v in patch.items() if k != "status"}
            new_status = None
        else:
            new_status = ClientStatus(new_status)

    client = merge_patch(old, patch, PROTECTED, now)
    tasks = snapshot.tasks
    onboardings = snapshot.onboardings

    if new_status is not None and new_status != old.status:
        today = day(now)
        event = None
        if new_status == ClientStatus.ACTIVE_SPRINT:
            if snapshot.onboarding_for(old.id) is None:
                onboardings = (*onboardings, generate_onboarding_protocol(old.id, now))
                logger.info("Onboarding protocol created for client %s", old.id)
            event = f"Sprint activated on {today}"
        elif new_status == ClientStatus.RETAINER:
            event = f"Converted to retainer on {today}"
            tasks = _archive_tasks(tasks, old.id, TaskStatus.DEPLOYED)
        elif new_status == ClientStatus.CLOSED:
            event = f"Account closed on {today}"
            tasks = _archive_tasks(tasks, old.id, TaskStatus.CANCELLED)
        elif new_status == ClientStatus.DISCOVERY:
            event = f"Discovery phase started on {today}"

        if event:
            client = prepend_events(client, [event], now)
        logger.info(
            "Client %s moved %s -> %s", old.id, old.status.value, new_status.value,
            extra={"client_id": old.id},
        )

    return TransitionResult(
        snapshot.with_(
            clients=replace_in(snapshot.clients, client), tasks=tasks, onboardings=onboardings
        )
    )


def _archive_tasks(tasks, client_id: int, status: TaskStatus):
    """Set the status of a client's active tasks. Stages are left alone."""
    return tuple(
        replace(t, status=status) if t.client_id == client_id and t.status == TaskStatus.ACTIVE else t
        for t in tasks
    )


def delete_client(snapshot: Snapshot, cmd: DeleteClient, now: datetime) -> TransitionResult:
    cid = cmd.client_id
    if snapshot.client(cid) is None:
        logger.warning("delete_client: client %s not found", cid)
        return unchanged(snapshot)

    logger.info("Deleting client %s and everything it owns", cid, extra={"client_id": cid})
    return TransitionResult(
        snapshot.with_(
            clients=tuple(c for c in snapshot.clients if c.id != cid),
            tasks=tuple(t for t in snapshot.tasks if t.client_id != cid),
            posts=tuple(p for p in snapshot.posts if p.client_id != cid),
            onboardings=tuple(o for o in snapshot.onboardings if o.client_id != cid),
            protocols=tuple(
                e
                for e in snapshot.protocols
                if not (
                    e.category == KnowledgeCategory.CLIENT_KNOWLEDGE_BASE
                    and e.linked_client_id == cid
                )
            ),
        )
    )


def add_timeline_event(snapshot: Snapshot, cmd: AddTimelineEvent, now: datetime) -> TransitionResult:
    client = snapshot.client(cmd.client_id)
    if client is None:
        logger.warning("add_timeline_event: client %s not found", cmd.client_id)
        return unchanged(snapshot)
    client = replace(prepend_events(client, [cmd.text], now, cmd.kind), updated_at=iso(now))
    return TransitionResult(snapshot.with_(clients=replace_in(snapshot.clients, client)))
