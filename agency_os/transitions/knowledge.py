"""Knowledge vault transitions."""

import logging
from dataclasses import replace
from datetime import datetime

from ..ids import next_id
from ..knowledge.search import extract_prompt_variables
from ..models import KnowledgeCategory, KnowledgeEntry, Snapshot
from ..models.base import iso
from .commands import AddProtocol, DeleteProtocol, RecordPromptUsage, UpdateProtocol
from .common import TransitionResult, merge_patch, replace_in, unchanged

logger = logging.getLogger(__name__)

PROTECTED = frozenset(("id", "createdAt", "copyCount"))


def _with_variables(entry: KnowledgeEntry) -> KnowledgeEntry:
    """Fill promptVariables from [[...]] placeholders on prompts that list none."""
    if entry.category != KnowledgeCategory.AI_PROMPT or entry.prompt_variables:
        return entry
    return replace(entry, prompt_variables=extract_prompt_variables(entry.content))


def add_protocol(snapshot: Snapshot, cmd: AddProtocol, now: datetime) -> TransitionResult:
    entry_id = next_id(snapshot.protocols)
    doc = {
        k: v
        for k, v in cmd.draft.items()
        if k not in ("id", "createdAt", "created_at", "copyCount", "copy_count")
    }
    entry = replace(
        KnowledgeEntry.from_dict(doc),
        id=entry_id,
        created_at=iso(now),
        updated_at=iso(now),
        copy_count=0,
    )
    entry = _with_variables(entry)
    logger.info("Knowledge entry %s added: %s", entry_id, entry.title, extra={"entry_id": entry_id})
    return TransitionResult(snapshot.with_(protocols=(*snapshot.protocols, entry)), (entry_id,))


def update_protocol(snapshot: Snapshot, cmd: UpdateProtocol, now: datetime) -> TransitionResult:
    entry = snapshot.protocol(cmd.entry_id)
    if entry is None:
        logger.warning("update_protocol: entry %s not found", cmd.entry_id)
        return unchanged(snapshot)
    entry = _with_variables(merge_patch(entry, cmd.patch, PROTECTED, now))
    return TransitionResult(snapshot.with_(protocols=replace_in(snapshot.protocols, entry)))


def delete_protocol(snapshot: Snapshot, cmd: DeleteProtocol, now: datetime) -> TransitionResult:
    if snapshot.protocol(cmd.entry_id) is None:
        logger.warning("delete_protocol: entry %s not found", cmd.entry_id)
        return unchanged(snapshot)
    # relatedProtocolIds pointing here are left dangling; readers skip them
    return TransitionResult(
        snapshot.with_(protocols=tuple(e for e in snapshot.protocols if e.id != cmd.entry_id))
    )


def record_prompt_usage(snapshot: Snapshot, cmd: RecordPromptUsage, now: datetime) -> TransitionResult:
    entry = snapshot.protocol(cmd.entry_id)
    if entry is None:
        logger.warning("record_prompt_usage: entry %s not found", cmd.entry_id)
        return unchanged(snapshot)
    entry = replace(entry, copy_count=entry.copy_count + 1)
    return TransitionResult(snapshot.with_(protocols=replace_in(snapshot.protocols, entry)))
