"""
Knowledge vault lookups.

SOP references and related-entry ids are soft links. Every resolver here
returns None or skips the id when the target is gone instead of raising.
"""

import re
from collections.abc import Iterable

from ..models import EntryStatus, KnowledgeCategory, KnowledgeEntry

PROMPT_VARIABLE = re.compile(r"\[\[(.*?)\]\]")


def extract_prompt_variables(content: str) -> tuple[str, ...]:
    """Ordered, de-duplicated ``[[VARIABLE]]`` names in a prompt body."""
    seen: dict[str, None] = {}
    for name in PROMPT_VARIABLE.findall(content or ""):
        name = name.strip()
        if name:
            seen.setdefault(name, None)
    return tuple(seen)


def find_sop(entries: Iterable[KnowledgeEntry], task_category: str) -> KnowledgeEntry | None:
    """First active SOP linked to a task category, in collection order."""
    for entry in entries:
        if (
            entry.category == KnowledgeCategory.SOP
            and entry.status == EntryStatus.ACTIVE
            and task_category in entry.linked_task_types
        ):
            return entry
    return None


def search_entries(
    entries: Iterable[KnowledgeEntry],
    query: str = "",
    category: str | None = None,
    pillar: str | None = None,
    client_id: int | None = None,
) -> list[KnowledgeEntry]:
    """
    Filter the vault. All given filters must match.

    ``query`` is a case-insensitive substring of the title or content.
    """
    needle = (query or "").strip().lower()
    results = []
    for entry in entries:
        if category and entry.category != category:
            continue
        if pillar and entry.pillar != pillar:
            continue
        if client_id is not None and entry.linked_client_id != client_id:
            continue
        if needle and needle not in entry.title.lower() and needle not in entry.content.lower():
            continue
        results.append(entry)
    return results


def resolve_sop(entries: Iterable[KnowledgeEntry], title: str | None) -> KnowledgeEntry | None:
    if not title:
        return None
    return next((e for e in entries if e.title == title), None)


def related_entries(entries: Iterable[KnowledgeEntry], entry: KnowledgeEntry) -> list[KnowledgeEntry]:
    """Entries named in relatedProtocolIds, in that order; dangling ids are skipped."""
    by_id = {e.id: e for e in entries}
    return [by_id[i] for i in entry.related_protocol_ids if i in by_id and i != entry.id]


def client_knowledge(entries: Iterable[KnowledgeEntry], client_id: int) -> list[KnowledgeEntry]:
    """Brand standards and knowledge-base entries linked to one client."""
    kinds = (KnowledgeCategory.CLIENT_KNOWLEDGE_BASE, KnowledgeCategory.BRAND_STANDARD)
    return [e for e in entries if e.category in kinds and e.linked_client_id == client_id]
