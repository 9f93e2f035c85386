"""Query helpers for common access patterns."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .models import Snapshot, Task, TaskStatus
from .models.base import UTC_MIN, parse_date, parse_timestamp, utc_now

MAX_UPCOMING = 5
MAX_COMPLETED = 5


@dataclass
class TaskBuckets:
    overdue: list[Task] = field(default_factory=list)
    due_today: list[Task] = field(default_factory=list)
    due_this_week: list[Task] = field(default_factory=list)
    upcoming: list[Task] = field(default_factory=list)
    completed: list[Task] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "overdue": [t.to_dict() for t in self.overdue],
            "dueToday": [t.to_dict() for t in self.due_today],
            "dueThisWeek": [t.to_dict() for t in self.due_this_week],
            "upcoming": [t.to_dict() for t in self.upcoming],
            "completed": [t.to_dict() for t in self.completed],
        }


def is_done(task: Task) -> bool:
    return task.status == TaskStatus.DEPLOYED or task.current_stage == task.terminal_stage


def is_open(task: Task) -> bool:
    return task.status == TaskStatus.ACTIVE and task.current_stage != task.terminal_stage


def tasks_for_node(snapshot: Snapshot, node: str) -> list[Task]:
    """Tasks assigned to a role, e.g. 'Art Director'."""
    return [t for t in snapshot.tasks if t.assigned_node == node]


def for_client(snapshot: Snapshot, client_id: int) -> list[Task]:
    """All open tasks for a client."""
    return [t for t in snapshot.tasks if t.client_id == client_id and is_open(t)]


def overdue(snapshot: Snapshot, today: date) -> list[Task]:
    """Open tasks past their deadline."""
    return [
        t for t in snapshot.tasks
        if is_open(t) and (d := parse_date(t.deadline)) is not None and d < today
    ]


def week_end(today: date) -> date:
    """Sunday closing the Monday-based week that contains ``today``."""
    return today + timedelta(days=6 - today.weekday())


def my_tasks(snapshot: Snapshot, node: str, now: datetime | None = None) -> TaskBuckets:
    """
    Bucket a role's tasks by deadline.

    Open tasks without a parseable deadline fall in no bucket.
    ``upcoming`` and ``completed`` are capped at five each.
    """
    today = (now or utc_now()).date()
    end = week_end(today)
    buckets = TaskBuckets()

    mine = tasks_for_node(snapshot, node)
    for task in sorted(mine, key=lambda t: t.deadline or ""):
        if is_done(task):
            continue
        if task.status != TaskStatus.ACTIVE:
            continue
        deadline = parse_date(task.deadline)
        if deadline is None:
            continue
        if deadline < today:
            buckets.overdue.append(task)
        elif deadline == today:
            buckets.due_today.append(task)
        elif deadline <= end:
            buckets.due_this_week.append(task)
        elif len(buckets.upcoming) < MAX_UPCOMING:
            buckets.upcoming.append(task)

    done = [t for t in mine if is_done(t)]
    done.sort(key=_updated, reverse=True)
    buckets.completed = done[:MAX_COMPLETED]
    return buckets


def _updated(task: Task) -> datetime:
    return parse_timestamp(task.updated_at) or UTC_MIN
