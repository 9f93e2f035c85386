"""Knowledge vault search and soft-link resolution."""

from .search import (
    PROMPT_VARIABLE,
    client_knowledge,
    extract_prompt_variables,
    find_sop,
    related_entries,
    resolve_sop,
    search_entries,
)

__all__ = [
    "PROMPT_VARIABLE",
    "client_knowledge",
    "extract_prompt_variables",
    "find_sop",
    "related_entries",
    "resolve_sop",
    "search_entries",
]
