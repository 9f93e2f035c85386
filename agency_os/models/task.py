"""Fulfillment tasks and their approval pipeline."""

import logging
from dataclasses import dataclass
from enum import StrEnum

from .activity import ActivityEntry, parse_log
from .base import Record, as_tuple, coerce_enum, pick

logger = logging.getLogger(__name__)


class TaskStatus(StrEnum):
    ACTIVE = "active"
    DEPLOYED = "deployed"
    CANCELLED = "cancelled"


TASK_PIPELINE: tuple[str, ...] = (
    "BRIEFED",
    "IN PRODUCTION",
    "REVIEW",
    "CEO APPROVAL",
    "CLIENT APPROVAL",
    "DEPLOYED",
)


@dataclass(frozen=True)
class Task(Record):
    """
    A unit of fulfillment work bound to one client.

    ``current_stage`` is always a member of ``stage_pipeline``; the last
    pipeline entry is the terminal stage. ``sop_reference`` is a soft
    link by title and may dangle after the SOP is renamed or deleted.
    """

    id: int = 0
    client_id: int = 0
    name: str = ""
    category: str = "Other"
    phase: str = "phase1"
    stage_pipeline: tuple[str, ...] = TASK_PIPELINE
    current_stage: str = TASK_PIPELINE[0]
    assigned_node: str = ""
    priority: str = "normal"
    status: TaskStatus = TaskStatus.ACTIVE
    deadline: str = ""
    estimated_hours: float | None = None
    brief: str = ""
    asset_links: tuple[str, ...] = ()
    sop_reference: str | None = None
    activity_log: tuple[ActivityEntry, ...] = ()
    notes: str = ""
    delivered_on_time: bool | None = None
    linked_post_id: int | None = None
    created_at: str = ""
    updated_at: str = ""

    @property
    def terminal_stage(self) -> str:
        return self.stage_pipeline[-1] if self.stage_pipeline else ""

    @property
    def is_terminal(self) -> bool:
        return self.status != TaskStatus.ACTIVE or self.current_stage == self.terminal_stage

    @classmethod
    def from_dict(cls, row: dict) -> "Task":
        pipeline = as_tuple(pick(row, "stage_pipeline")) or TASK_PIPELINE
        stage = pick(row, "current_stage", pipeline[0])
        if stage not in pipeline:
            logger.warning(
                "Task %s stage %r not in its pipeline, reset to %s",
                row.get("id"),
                stage,
                pipeline[0],
            )
            stage = pipeline[0]
        return cls(
            id=int(pick(row, "id", 0)),
            client_id=int(pick(row, "client_id", 0)),
            name=pick(row, "name", ""),
            category=pick(row, "category", "Other"),
            phase=pick(row, "phase", "phase1"),
            stage_pipeline=pipeline,
            current_stage=stage,
            assigned_node=pick(row, "assigned_node", ""),
            priority=pick(row, "priority", "normal"),
            status=coerce_enum(TaskStatus, pick(row, "status"), TaskStatus.ACTIVE),
            deadline=pick(row, "deadline", ""),
            estimated_hours=pick(row, "estimated_hours"),
            brief=pick(row, "brief", ""),
            asset_links=as_tuple(pick(row, "asset_links")),
            sop_reference=pick(row, "sop_reference"),
            activity_log=parse_log(pick(row, "activity_log")),
            notes=pick(row, "notes", ""),
            delivered_on_time=pick(row, "delivered_on_time"),
            linked_post_id=pick(row, "linked_post_id"),
            created_at=pick(row, "created_at", ""),
            updated_at=pick(row, "updated_at", ""),
        )
