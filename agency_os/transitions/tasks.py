"""
Fulfillment task transitions: creation, pipeline advance and the
Phase 1 sprint template.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta

from ..ids import allocate_ids, next_id
from ..knowledge.search import find_sop
from ..models import ActivityType, OperatorLevel, Snapshot, Task, TaskStatus
from ..models.base import day, iso, parse_date
from .commands import AddTask, AdvanceTaskStage, GenerateSprintTasks, UpdateTask
from .common import (
    TransitionResult,
    activity,
    merge_patch,
    replace_in,
    stage_activity,
    unchanged,
    with_client_events,
)

logger = logging.getLogger(__name__)

PROTECTED = frozenset(("id", "createdAt", "currentStage", "activityLog"))

# (name, category, assigned node, priority, days after start, brief)
SPRINT_TEMPLATE: tuple[tuple[str, str, str, str, int, str], ...] = (
    (
        "Brand & Positioning Audit",
        "Strategy",
        "Art Director",
        "high",
        3,
        "Audit current brand: logo, colors, voice, content pillars. "
        "Document what exists vs. what's needed.",
    ),
    (
        "Competitor Analysis",
        "Strategy",
        "Art Director",
        "normal",
        4,
        "Identify 3 direct competitors. Analyze content strategy, offer structure "
        "and positioning. Surface the gap.",
    ),
    (
        "Website Critique",
        "Website",
        "Operations Builder",
        "normal",
        5,
        "Full UX audit. Identify friction points, H1 clarity, CTA quality, "
        "mobile experience and load speed.",
    ),
    (
        "Shadow Avatar Refinement",
        "Strategy",
        "Art Director",
        "high",
        6,
        "Based on kickoff call notes, refine and finalize the Shadow Avatar and "
        "Bleeding Neck. Update client profile.",
    ),
    (
        "Content Pillars & First Month Plan",
        "Content Production",
        "Art Director",
        "critical",
        10,
        "Define 4-5 content pillars. Map first month: 16 posts minimum. "
        "Specify format per post (Reel/Static/Carousel).",
    ),
    (
        "Brand Visual Direction",
        "Brand Design",
        "Art Director",
        "normal",
        12,
        "Define visual direction for the client's digital content: color palette, "
        "font choices, mood board.",
    ),
    (
        "Phase 1 Delivery + CEO Review",
        "Client Communication",
        "CEO",
        "critical",
        14,
        "Review all Phase 1 deliverables. Present strategy to client. Lock scope for Phase 2.",
    ),
)


def add_task(snapshot: Snapshot, cmd: AddTask, now: datetime) -> TransitionResult:
    task_id = next_id(snapshot.tasks)
    doc = {
        k: v
        for k, v in cmd.draft.items()
        if k not in ("id", "createdAt", "created_at", "activityLog", "activity_log")
    }
    task = Task.from_dict(doc)

    sop = task.sop_reference
    if not sop:
        match = find_sop(snapshot.protocols, task.category)
        sop = match.title if match else None

    text = f"Task created and assigned to {task.assigned_node}"
    if sop:
        text += f" - [ PROTOCOL DETECTED ] {sop}"

    task = replace(
        task,
        id=task_id,
        sop_reference=sop,
        activity_log=(activity(now, ActivityType.CREATED, text, cmd.author),),
        created_at=iso(now),
        updated_at=iso(now),
    )
    logger.info(
        "Task %s created for client %s", task_id, task.client_id,
        extra={"task_id": task_id, "sop": sop},
    )
    return TransitionResult(snapshot.with_(tasks=(*snapshot.tasks, task)), (task_id,))


def update_task(snapshot: Snapshot, cmd: UpdateTask, now: datetime) -> TransitionResult:
    task = snapshot.task(cmd.task_id)
    if task is None:
        logger.warning("update_task: task %s not found", cmd.task_id)
        return unchanged(snapshot)
    task = merge_patch(task, cmd.patch, PROTECTED, now)
    return TransitionResult(snapshot.with_(tasks=replace_in(snapshot.tasks, task)))


def advance_task_stage(snapshot: Snapshot, cmd: AdvanceTaskStage, now: datetime) -> TransitionResult:
    task = snapshot.task(cmd.task_id)
    if task is None:
        logger.warning("advance_task_stage: task %s not found", cmd.task_id)
        return unchanged(snapshot)

    entry = stage_activity(
        task.stage_pipeline, task.current_stage, cmd.stage, cmd.author, cmd.note, now
    )
    if entry is None:
        logger.warning(
            "advance_task_stage: %r is not in the pipeline of task %s", cmd.stage, task.id
        )
        return unchanged(snapshot)

    deploying = cmd.stage == task.terminal_stage and task.current_stage != task.terminal_stage
    updated = replace(
        task,
        current_stage=cmd.stage,
        activity_log=(*task.activity_log, entry),
        status=TaskStatus.DEPLOYED if deploying else task.status,
        updated_at=iso(now),
    )
    snapshot = snapshot.with_(tasks=replace_in(snapshot.tasks, updated))
    if deploying:
        snapshot = with_client_events(
            snapshot, task.client_id, [f"Task '{task.name}' deployed on {day(now)}"], now
        )
        logger.info("Task %s deployed", task.id, extra={"task_id": task.id})
    return TransitionResult(snapshot)


def generate_sprint_tasks(snapshot: Snapshot, cmd: GenerateSprintTasks, now: datetime) -> TransitionResult:
    client = snapshot.client(cmd.client_id)
    if client is None:
        logger.warning("generate_sprint_tasks: client %s not found", cmd.client_id)
        return unchanged(snapshot)

    start = parse_date(client.start_date) or now.date()
    ids = allocate_ids(snapshot.tasks, len(SPRINT_TEMPLATE))
    created = []
    for task_id, (name, category, node, priority, offset, brief) in zip(ids, SPRINT_TEMPLATE):
        created.append(
            Task(
                id=task_id,
                client_id=client.id,
                name=name,
                category=category,
                phase="phase1",
                assigned_node=node,
                priority=priority,
                deadline=(start + timedelta(days=offset)).isoformat(),
                brief=brief,
                activity_log=(
                    activity(
                        now,
                        ActivityType.CREATED,
                        f"Auto-generated Sprint Task assigned to {node}",
                        OperatorLevel.ELEVATED,
                    ),
                ),
                created_at=iso(now),
                updated_at=iso(now),
            )
        )

    logger.info(
        "Generated %d sprint tasks for client %s", len(created), client.id,
        extra={"client_id": client.id, "task_ids": ids},
    )
    return TransitionResult(snapshot.with_(tasks=(*snapshot.tasks, *created)), tuple(ids))
