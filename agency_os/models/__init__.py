"""Agency OS domain model."""

from .activity import ActivityEntry, ActivityType
from .base import (
    ClientStatus,
    EventKind,
    HealthStatus,
    OnboardingStatus,
    OperatorLevel,
    day,
    iso,
    parse_date,
    parse_timestamp,
    utc_now,
)
from .client import Client, TimelineEvent
from .knowledge import EntryStatus, KnowledgeCategory, KnowledgeEntry
from .onboarding import (
    ONBOARDING_STEPS,
    OnboardingProtocol,
    OnboardingState,
    OnboardingStep,
    StepOwner,
    generate_onboarding_protocol,
    onboarding_progress,
)
from .post import POST_PIPELINE, PUBLISHED, PerformanceLog, Post
from .snapshot import COLLECTIONS, AccessPhraseHashes, Settings, Snapshot
from .task import TASK_PIPELINE, Task, TaskStatus

__all__ = [
    "AccessPhraseHashes",
    "ActivityEntry",
    "ActivityType",
    "COLLECTIONS",
    "Client",
    "ClientStatus",
    "EntryStatus",
    "EventKind",
    "HealthStatus",
    "KnowledgeCategory",
    "KnowledgeEntry",
    "ONBOARDING_STEPS",
    "OnboardingProtocol",
    "OnboardingState",
    "OnboardingStatus",
    "OnboardingStep",
    "OperatorLevel",
    "POST_PIPELINE",
    "PUBLISHED",
    "PerformanceLog",
    "Post",
    "Settings",
    "Snapshot",
    "StepOwner",
    "TASK_PIPELINE",
    "Task",
    "TaskStatus",
    "TimelineEvent",
    "day",
    "generate_onboarding_protocol",
    "iso",
    "onboarding_progress",
    "parse_date",
    "parse_timestamp",
    "utc_now",
]
