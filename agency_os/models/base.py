"""
Agency OS - Base Models

Common enums, the Record serialization mixin and time helpers shared by
every domain record.

Records are frozen dataclasses. Collections are tuples so a snapshot can
be handed to any reader without it being able to mutate shared state.
Serialization produces the camelCase document persisted as the snapshot;
parsing accepts camelCase or snake_case keys (the remote store speaks
snake_case).
"""

import logging
from dataclasses import fields
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


# =============================================================================
# COMMON ENUMS
# =============================================================================


class ClientStatus(StrEnum):
    """Client lifecycle position."""

    LEAD = "Lead"
    DISCOVERY = "Discovery"
    ACTIVE_SPRINT = "Active Sprint"
    RETAINER = "Retainer"
    CLOSED = "Closed"


class HealthStatus(StrEnum):
    """Relationship health, ordered from best to worst."""

    HEALTHY = "healthy"
    AT_RISK = "at-risk"
    CRITICAL = "critical"


class OnboardingStatus(StrEnum):
    """Client-level onboarding flag."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class EventKind(StrEnum):
    """Who wrote a timeline event."""

    SYSTEM = "system"
    MANUAL = "manual"


class OperatorLevel(StrEnum):
    """Two-tier capability level. Also recorded as the author of log entries."""

    ELEVATED = "ceo"
    STANDARD = "team"


# =============================================================================
# RECORD MIXIN
# =============================================================================


def camel(name: str) -> str:
    """snake_case -> camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def plain(value: Any) -> Any:
    """Record, enum or tuple -> JSON-ready value."""
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, tuple | list):
        return [plain(v) for v in value]
    if isinstance(value, StrEnum):
        return value.value
    return value


class Record:
    """
    Serialization mixin for frozen dataclass records.

    A field may override its document key with ``metadata={"key": ...}``.
    """

    def to_dict(self) -> dict[str, Any]:
        out = {}
        for f in fields(self):
            key = f.metadata.get("key") or camel(f.name)
            out[key] = plain(getattr(self, f.name))
        return out


def pick(row: dict, name: str, default: Any = None) -> Any:
    """Read a field from a camelCase or snake_case row; None counts as missing."""
    for key in (camel(name), name):
        value = row.get(key)
        if value is not None:
            return value
    return default


def as_tuple(value: Any) -> tuple:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def coerce_enum(enum_cls: type[StrEnum], value: Any, default: StrEnum) -> StrEnum:
    """Parse an enum value, falling back to default for unknown input."""
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Unknown %s value %r, using %s", enum_cls.__name__, value, default.value)
        return default


# =============================================================================
# TIME HELPERS
# =============================================================================


UTC_MIN = datetime.min.replace(tzinfo=UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


def iso(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and Z suffix."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def day(moment: datetime) -> str:
    """Calendar date (YYYY-MM-DD) of a moment in UTC."""
    return moment.astimezone(UTC).date().isoformat()


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO timestamp or bare date into an aware UTC datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def parse_date(value: str | None) -> date | None:
    """Parse the date part of a deadline-style string."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None
