"""Knowledge vault entries: SOPs, AI prompts, brand standards, client notes."""

from dataclasses import dataclass
from enum import StrEnum

from .base import Record, as_tuple, coerce_enum, pick


class KnowledgeCategory(StrEnum):
    SOP = "sop"
    AI_PROMPT = "ai-prompt"
    CLIENT_KNOWLEDGE_BASE = "client-knowledge-base"
    BRAND_STANDARD = "brand-standard"


class EntryStatus(StrEnum):
    ACTIVE = "active"
    DRAFT = "draft"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class KnowledgeEntry(Record):
    """
    A reusable document.

    ``linked_client_id`` and ``related_protocol_ids`` are soft links;
    readers must tolerate ids that no longer resolve.
    """

    id: int = 0
    title: str = ""
    category: KnowledgeCategory = KnowledgeCategory.SOP
    pillar: str = ""
    tags: tuple[str, ...] = ()
    status: EntryStatus = EntryStatus.ACTIVE
    content: str = ""
    prompt_tool: str | None = None
    prompt_variables: tuple[str, ...] = ()
    usage_notes: str | None = None
    example_output: str | None = None
    linked_task_types: tuple[str, ...] = ()
    linked_client_id: int | None = None
    related_protocol_ids: tuple[int, ...] = ()
    external_references: tuple[str, ...] = ()
    created_at: str = ""
    updated_at: str = ""
    copy_count: int = 0

    @classmethod
    def from_dict(cls, row: dict) -> "KnowledgeEntry":
        return cls(
            id=int(pick(row, "id", 0)),
            title=pick(row, "title", ""),
            category=coerce_enum(KnowledgeCategory, pick(row, "category"), KnowledgeCategory.SOP),
            pillar=pick(row, "pillar", ""),
            tags=as_tuple(pick(row, "tags")),
            status=coerce_enum(EntryStatus, pick(row, "status"), EntryStatus.ACTIVE),
            content=pick(row, "content", ""),
            prompt_tool=pick(row, "prompt_tool"),
            prompt_variables=as_tuple(pick(row, "prompt_variables")),
            usage_notes=pick(row, "usage_notes"),
            example_output=pick(row, "example_output"),
            linked_task_types=as_tuple(pick(row, "linked_task_types")),
            linked_client_id=pick(row, "linked_client_id"),
            related_protocol_ids=tuple(int(i) for i in pick(row, "related_protocol_ids", [])),
            external_references=as_tuple(pick(row, "external_references")),
            created_at=pick(row, "created_at", ""),
            updated_at=pick(row, "updated_at", ""),
            copy_count=int(pick(row, "copy_count", 0)),
        )
