"""
Identifier allocation.

Ids are ``max(existing) + 1`` at the moment a record is materialized.
Nothing is reserved ahead of time, so creates must be serialized
(the StateStore lock does that).
"""

from collections.abc import Iterable


def next_id(records: Iterable) -> int:
    """Next integer id for a collection of records (or bare ids)."""
    return max((_id_of(r) for r in records), default=0) + 1


def allocate_ids(records: Iterable, count: int) -> list[int]:
    """
    A contiguous block of ``count`` ids for a bulk create.

    The max is read once, so the whole batch is allocated against the
    same view of the collection.
    """
    start = next_id(records)
    return list(range(start, start + count))


def _id_of(record) -> int:
    if isinstance(record, int):
        return record
    return int(record.id)
