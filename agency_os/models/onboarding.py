"""
Agency OS - Onboarding Protocol

The fixed 10-step checklist a client works through once a sprint is
activated. Steps owned by the CEO can only be completed by an elevated
operator; that rule lives in security.access, not here.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..contracts import ONBOARDING_PROGRESS_MAX
from .base import Record, coerce_enum, iso, pick


class StepOwner(StrEnum):
    CEO = "CEO"
    TEAM = "Team"


class OnboardingState(StrEnum):
    ON_TRACK = "on-track"
    BLOCKED = "blocked"
    COMPLETED = "completed"


@dataclass(frozen=True)
class OnboardingStep(Record):
    id: str
    label: str
    owner: StepOwner = StepOwner.TEAM
    completed: bool = False
    details: str = ""
    completed_at: str | None = None

    @classmethod
    def from_dict(cls, row: dict) -> "OnboardingStep":
        return cls(
            id=str(pick(row, "id", "")),
            label=pick(row, "label", ""),
            owner=coerce_enum(StepOwner, pick(row, "owner"), StepOwner.TEAM),
            completed=bool(pick(row, "completed", False)),
            details=pick(row, "details", ""),
            completed_at=pick(row, "completed_at"),
        )


@dataclass(frozen=True)
class OnboardingProtocol(Record):
    id: str
    client_id: int
    steps: tuple[OnboardingStep, ...] = ()
    progress: int = 0
    status: OnboardingState = OnboardingState.ON_TRACK
    last_updated: str = ""

    @property
    def is_complete(self) -> bool:
        return self.progress >= ONBOARDING_PROGRESS_MAX

    def step(self, step_id: str) -> OnboardingStep | None:
        for s in self.steps:
            if s.id == step_id:
                return s
        return None

    @classmethod
    def from_dict(cls, row: dict) -> "OnboardingProtocol":
        return cls(
            id=str(pick(row, "id", "")),
            client_id=int(pick(row, "client_id", 0)),
            steps=tuple(OnboardingStep.from_dict(s) for s in pick(row, "steps", [])),
            progress=int(pick(row, "progress", 0)),
            status=coerce_enum(OnboardingState, pick(row, "status"), OnboardingState.ON_TRACK),
            last_updated=pick(row, "last_updated", ""),
        )


# (id, label, owner, details)
ONBOARDING_STEPS: tuple[tuple[str, str, StepOwner, str], ...] = (
    (
        "1",
        "Revenue Gate Qualified",
        StepOwner.CEO,
        "Client has passed the Revenue Gate. Annual revenue verified "
        "(T1: <1M, T2: 1M-5M, T3: >5M PKR). Tier assignment confirmed.",
    ),
    (
        "2",
        "Contract Signed & Invoice Paid",
        StepOwner.TEAM,
        "Digital contract executed. First invoice generated and payment received.",
    ),
    (
        "3",
        "Intake Form Received",
        StepOwner.TEAM,
        "Standard intake form sent. Client fills brand assets, competitor URLs, "
        "target audience, content examples they admire and access credentials.",
    ),
    (
        "4",
        "Client Workspace Created",
        StepOwner.TEAM,
        "Client group chat created with client and team. Shared drive folder "
        "initialized with /Brand Assets, /Deliverables, /Approvals, /Reports.",
    ),
    (
        "5",
        "Kickoff Call Completed",
        StepOwner.CEO,
        "CEO runs the kickoff call to extract the Shadow Avatar and Bleeding Neck. "
        "Record call for transcript. Duration: 45-60 min.",
    ),
    (
        "6",
        "Shadow Avatar & Bleeding Neck Extracted",
        StepOwner.CEO,
        "From kickoff transcript: identify the Surface Want vs. Shadow Fear. "
        "Document the Bleeding Neck and update the client profile.",
    ),
    (
        "7",
        "Strategy Brief Drafted",
        StepOwner.TEAM,
        "Team drafts the Strategy Brief within 48h of kickoff: positioning, "
        "content pillars, competitor gaps, 60-day milestone roadmap.",
    ),
    (
        "8",
        "Strategy Brief Approved (CEO Gate)",
        StepOwner.CEO,
        "CEO reviews and approves the Strategy Brief. Hard gate: no production "
        "starts until this is signed off.",
    ),
    (
        "9",
        "Content Calendar Generated",
        StepOwner.TEAM,
        "Generate 30-day content calendar. Assign post types across pillars, "
        "schedule dates and assign to Art Director / Video Editor.",
    ),
    (
        "10",
        "Sprint Board Initialized & First Batch in Production",
        StepOwner.TEAM,
        "Create the 7 Phase 1 sprint tasks. Art Director begins template "
        "generation. First batch of 4-6 posts enters production.",
    ),
)


def onboarding_progress(steps) -> int:
    """Completed steps on a 0..10 scale, rounded half up. 0 when there are no steps."""
    steps = tuple(steps)
    if not steps:
        return 0
    done = sum(1 for s in steps if s.completed)
    return int(done * ONBOARDING_PROGRESS_MAX / len(steps) + 0.5)


def generate_onboarding_protocol(client_id: int, now: datetime) -> OnboardingProtocol:
    """A fresh, all-incomplete protocol for a client entering Active Sprint."""
    return OnboardingProtocol(
        id=f"obs-{client_id}-{int(now.timestamp() * 1000)}",
        client_id=client_id,
        steps=tuple(
            OnboardingStep(id=step_id, label=label, owner=owner, details=details)
            for step_id, label, owner, details in ONBOARDING_STEPS
        ),
        progress=0,
        status=OnboardingState.ON_TRACK,
        last_updated=iso(now),
    )
