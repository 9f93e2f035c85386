"""Transition engine: commands and the pure reducer that applies them."""

from .commands import (
    AddClient,
    AddPost,
    AddProtocol,
    AddTask,
    AddTimelineEvent,
    AdvancePostStage,
    AdvanceTaskStage,
    Command,
    DeleteClient,
    DeleteProtocol,
    GenerateMonthlyPosts,
    GenerateSprintTasks,
    InitializeAccess,
    PlannedPostRow,
    RecordPromptUsage,
    SetOnboardingBlocked,
    UpdateClient,
    UpdateOnboardingStep,
    UpdatePost,
    UpdateProtocol,
    UpdateTask,
)
from .common import TransitionResult
from .reducer import apply
from .tasks import SPRINT_TEMPLATE

__all__ = [
    "AddClient",
    "AddPost",
    "AddProtocol",
    "AddTask",
    "AddTimelineEvent",
    "AdvancePostStage",
    "AdvanceTaskStage",
    "Command",
    "DeleteClient",
    "DeleteProtocol",
    "GenerateMonthlyPosts",
    "GenerateSprintTasks",
    "InitializeAccess",
    "PlannedPostRow",
    "RecordPromptUsage",
    "SPRINT_TEMPLATE",
    "SetOnboardingBlocked",
    "TransitionResult",
    "UpdateClient",
    "UpdateOnboardingStep",
    "UpdatePost",
    "UpdateProtocol",
    "UpdateTask",
    "apply",
]
