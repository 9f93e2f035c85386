"""Activity log entries shared by tasks and posts."""

from dataclasses import dataclass, field
from enum import StrEnum

from .base import OperatorLevel, Record, coerce_enum, pick


class ActivityType(StrEnum):
    CREATED = "created"
    STAGE_ADVANCE = "stage_advance"
    STAGE_REGRESS = "stage_regress"
    NOTE = "note"
    EDITED = "edited"


@dataclass(frozen=True)
class ActivityEntry(Record):
    """One oldest-first log line: a transition or a note."""

    timestamp: str
    type: ActivityType
    from_stage: str | None = field(default=None, metadata={"key": "from"})
    to_stage: str | None = field(default=None, metadata={"key": "to"})
    text: str = ""
    author: OperatorLevel = OperatorLevel.STANDARD

    @classmethod
    def from_dict(cls, row: dict) -> "ActivityEntry":
        return cls(
            timestamp=pick(row, "timestamp", ""),
            type=coerce_enum(ActivityType, pick(row, "type"), ActivityType.CREATED),
            from_stage=row.get("from", row.get("from_stage")),
            to_stage=row.get("to", row.get("to_stage")),
            text=pick(row, "text", ""),
            author=coerce_enum(OperatorLevel, pick(row, "author"), OperatorLevel.STANDARD),
        )


def parse_log(rows) -> tuple[ActivityEntry, ...]:
    return tuple(ActivityEntry.from_dict(r) for r in rows or ())
