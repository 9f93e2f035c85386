"""
The reducer: ``apply(snapshot, command) -> TransitionResult``.

Pure. The clock and thresholds are injected so a transition is fully
determined by its arguments.
"""

from datetime import datetime
from functools import partial

from ..contracts import THRESHOLDS
from ..models import Snapshot
from ..models.base import utc_now
from . import access, clients, knowledge, onboarding, posts, tasks
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
    RecordPromptUsage,
    SetOnboardingBlocked,
    UpdateClient,
    UpdateOnboardingStep,
    UpdatePost,
    UpdateProtocol,
    UpdateTask,
)
from .common import TransitionResult

_HANDLERS = {
    AddClient: clients.add_client,
    UpdateClient: clients.update_client,
    DeleteClient: clients.delete_client,
    AddTimelineEvent: clients.add_timeline_event,
    AddTask: tasks.add_task,
    UpdateTask: tasks.update_task,
    AdvanceTaskStage: tasks.advance_task_stage,
    GenerateSprintTasks: tasks.generate_sprint_tasks,
    AddPost: posts.add_post,
    AdvancePostStage: posts.advance_post_stage,
    GenerateMonthlyPosts: posts.generate_monthly_posts,
    AddProtocol: knowledge.add_protocol,
    UpdateProtocol: knowledge.update_protocol,
    DeleteProtocol: knowledge.delete_protocol,
    RecordPromptUsage: knowledge.record_prompt_usage,
    UpdateOnboardingStep: onboarding.update_onboarding_step,
    SetOnboardingBlocked: onboarding.set_onboarding_blocked,
    InitializeAccess: access.initialize_access,
}


def apply(
    snapshot: Snapshot,
    command: Command,
    now: datetime | None = None,
    thresholds: dict[str, float] | None = None,
) -> TransitionResult:
    """
    Apply one command.

    Raises:
        TypeError: for an object that is not a known command. Domain
            conditions (missing ids, repeated triggers) never raise.
    """
    now = now or utc_now()
    if isinstance(command, UpdatePost):
        handler = partial(posts.update_post, thresholds=thresholds or THRESHOLDS)
    else:
        handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unknown command: {type(command).__name__}")
    return handler(snapshot, command, now)
