"""Client records and their append-only timeline."""

from dataclasses import dataclass

from .base import (
    ClientStatus,
    EventKind,
    HealthStatus,
    OnboardingStatus,
    Record,
    as_tuple,
    coerce_enum,
    pick,
)


@dataclass(frozen=True)
class TimelineEvent(Record):
    """One dated event on a client timeline. Ids are scoped to the owning client."""

    id: int
    date: str
    event: str
    type: EventKind = EventKind.SYSTEM

    @classmethod
    def from_dict(cls, row: dict) -> "TimelineEvent":
        return cls(
            id=int(pick(row, "id", 0)),
            date=pick(row, "date", ""),
            event=pick(row, "event", ""),
            type=coerce_enum(EventKind, pick(row, "type"), EventKind.SYSTEM),
        )


@dataclass(frozen=True)
class Client(Record):
    """
    A business relationship.

    ``timeline`` is newest-first. ``relationship_health`` is the manually
    set value; the computed one comes from client_truth.health_calculator.
    """

    id: int = 0
    name: str = ""
    status: ClientStatus = ClientStatus.LEAD
    revenue_gate: str = ""
    tier: str = ""
    ltv: float = 0
    contract_value: float = 0
    phone: str = ""
    email: str = ""
    contact_name: str = ""
    niche: str = ""
    start_date: str = ""
    shadow_avatar: str = ""
    bleeding_neck: str = ""
    content_pillars: tuple[str, ...] = ()
    relationship_health: HealthStatus = HealthStatus.HEALTHY
    onboarding_status: OnboardingStatus = OnboardingStatus.NOT_STARTED
    notes: str = ""
    timeline: tuple[TimelineEvent, ...] = ()
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, row: dict) -> "Client":
        return cls(
            id=int(pick(row, "id", 0)),
            name=pick(row, "name", ""),
            status=coerce_enum(ClientStatus, pick(row, "status"), ClientStatus.LEAD),
            revenue_gate=pick(row, "revenue_gate", ""),
            tier=pick(row, "tier", ""),
            ltv=pick(row, "ltv", 0),
            contract_value=pick(row, "contract_value", 0),
            phone=pick(row, "phone", ""),
            email=pick(row, "email", ""),
            contact_name=pick(row, "contact_name", ""),
            niche=pick(row, "niche", ""),
            start_date=pick(row, "start_date", ""),
            shadow_avatar=pick(row, "shadow_avatar", ""),
            bleeding_neck=pick(row, "bleeding_neck", ""),
            content_pillars=as_tuple(pick(row, "content_pillars")),
            relationship_health=coerce_enum(
                HealthStatus, pick(row, "relationship_health"), HealthStatus.HEALTHY
            ),
            onboarding_status=coerce_enum(
                OnboardingStatus, pick(row, "onboarding_status"), OnboardingStatus.NOT_STARTED
            ),
            notes=pick(row, "notes", ""),
            timeline=tuple(TimelineEvent.from_dict(e) for e in pick(row, "timeline", [])),
            created_at=pick(row, "created_at", ""),
            updated_at=pick(row, "updated_at", ""),
        )
