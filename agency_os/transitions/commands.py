"""
Command types for the transition engine.

Commands are the only way to change a Snapshot. Each is a frozen value
applied by ``reducer.apply``. Drafts and patches are plain mappings with
camelCase or snake_case keys, matching the persisted document.
"""

from dataclasses import dataclass, field
from typing import Any

from ..models import EventKind, OperatorLevel


@dataclass(frozen=True)
class PlannedPostRow:
    """One row of a monthly content plan."""

    platform: str
    post_type: str
    hook_idea: str
    date: str
    assigned_to: str
    pillar: str = "Other"


# -----------------------------------------------------------------------------
# Clients
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class AddClient:
    draft: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateClient:
    client_id: int
    patch: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteClient:
    client_id: int


@dataclass(frozen=True)
class AddTimelineEvent:
    client_id: int
    text: str
    kind: EventKind = EventKind.SYSTEM


# -----------------------------------------------------------------------------
# Tasks
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class AddTask:
    draft: dict[str, Any] = field(default_factory=dict)
    author: OperatorLevel = OperatorLevel.STANDARD


@dataclass(frozen=True)
class UpdateTask:
    task_id: int
    patch: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AdvanceTaskStage:
    task_id: int
    stage: str
    author: OperatorLevel
    note: str | None = None


@dataclass(frozen=True)
class GenerateSprintTasks:
    client_id: int


# -----------------------------------------------------------------------------
# Posts
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class AddPost:
    draft: dict[str, Any] = field(default_factory=dict)
    author: OperatorLevel = OperatorLevel.STANDARD


@dataclass(frozen=True)
class UpdatePost:
    post_id: int
    patch: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AdvancePostStage:
    post_id: int
    stage: str
    author: OperatorLevel
    note: str | None = None


@dataclass(frozen=True)
class GenerateMonthlyPosts:
    client_id: int
    rows: tuple[PlannedPostRow, ...] = ()


# -----------------------------------------------------------------------------
# Knowledge vault
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class AddProtocol:
    draft: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateProtocol:
    entry_id: int
    patch: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeleteProtocol:
    entry_id: int


@dataclass(frozen=True)
class RecordPromptUsage:
    entry_id: int


# -----------------------------------------------------------------------------
# Onboarding and settings
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class UpdateOnboardingStep:
    protocol_id: str
    step_id: str
    completed: bool


@dataclass(frozen=True)
class SetOnboardingBlocked:
    """External signal; the engine never derives ``blocked`` on its own."""

    protocol_id: str
    blocked: bool = True


@dataclass(frozen=True)
class InitializeAccess:
    """Store both passphrase hashes and mark the workspace initialized."""

    elevated_hash: str
    standard_hash: str


Command = (
    AddClient
    | UpdateClient
    | DeleteClient
    | AddTimelineEvent
    | AddTask
    | UpdateTask
    | AdvanceTaskStage
    | GenerateSprintTasks
    | AddPost
    | UpdatePost
    | AdvancePostStage
    | GenerateMonthlyPosts
    | AddProtocol
    | UpdateProtocol
    | DeleteProtocol
    | RecordPromptUsage
    | UpdateOnboardingStep
    | SetOnboardingBlocked
    | InitializeAccess
)
