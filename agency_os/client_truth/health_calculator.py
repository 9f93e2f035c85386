"""
Health Calculator - Compute client relationship health.

Computed from the client's active tasks, evaluated top-down:
- critical: overdue >= 3 or no task activity for more than 14 days. A client
  with no active tasks has no activity at all, so it lands here.
- at-risk:  overdue >= 1 or no activity for more than 7 days
- healthy:  otherwise

The stored ``relationship_health`` field is a manual override. Read
paths show ``resolve_health(stored, computed)``: whichever is worse.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime

from ..contracts import HEALTH_SCORES, THRESHOLDS
from ..models import Client, HealthStatus, Snapshot, Task, TaskStatus
from ..models.base import parse_date, parse_timestamp, utc_now

logger = logging.getLogger(__name__)

_SEVERITY = {HealthStatus.HEALTHY: 0, HealthStatus.AT_RISK: 1, HealthStatus.CRITICAL: 2}


@dataclass
class ClientHealth:
    client_id: int
    client_name: str
    status: HealthStatus
    health_score: int
    overdue_count: int
    days_since_activity: int | None  # None when there are no active tasks
    task_count: int
    last_activity: str | None
    stored: HealthStatus
    effective: HealthStatus

    def to_dict(self) -> dict:
        return {
            "clientId": self.client_id,
            "clientName": self.client_name,
            "status": self.status.value,
            "healthScore": self.health_score,
            "overdueCount": self.overdue_count,
            "daysSinceActivity": self.days_since_activity,
            "taskCount": self.task_count,
            "lastActivity": self.last_activity,
            "stored": self.stored.value,
            "effective": self.effective.value,
        }


def resolve_health(stored: HealthStatus, computed: HealthStatus) -> HealthStatus:
    """The worse of the manual and the computed health."""
    return max(stored, computed, key=_SEVERITY.__getitem__)


def is_overdue(task: Task, today: date) -> bool:
    if task.status != TaskStatus.ACTIVE or task.current_stage == task.terminal_stage:
        return False
    deadline = parse_date(task.deadline)
    return deadline is not None and deadline < today


def last_activity(tasks: list[Task]) -> datetime | None:
    stamps = [parse_timestamp(t.updated_at) for t in tasks]
    stamps = [s for s in stamps if s is not None]
    return max(stamps) if stamps else None


class HealthCalculator:
    """
    Computes client health from a snapshot.

    Stateless apart from the injected clock and thresholds; build one per
    read and throw it away.
    """

    def __init__(
        self,
        snapshot: Snapshot,
        now: datetime | None = None,
        thresholds: dict[str, float] | None = None,
    ):
        self.snapshot = snapshot
        self.now = now or utc_now()
        self.thresholds = thresholds or THRESHOLDS

    def classify(self, overdue: int, days_since: int | None) -> HealthStatus:
        """``days_since`` is None when there are no active tasks, i.e. infinitely idle."""
        t = self.thresholds
        inactive = math.inf if days_since is None else days_since
        if overdue >= t["health_critical_overdue"] or inactive > t["health_critical_inactive_days"]:
            return HealthStatus.CRITICAL
        if overdue >= t["health_at_risk_overdue"] or inactive > t["health_at_risk_inactive_days"]:
            return HealthStatus.AT_RISK
        return HealthStatus.HEALTHY

    def compute(self, client: Client) -> ClientHealth:
        tasks = [
            t for t in self.snapshot.tasks
            if t.client_id == client.id and t.status == TaskStatus.ACTIVE
        ]
        today = self.now.date()
        overdue = sum(1 for t in tasks if is_overdue(t, today))
        latest = last_activity(tasks)
        days_since = (self.now - latest).days if latest else None

        status = self.classify(overdue, days_since)
        return ClientHealth(
            client_id=client.id,
            client_name=client.name,
            status=status,
            health_score=HEALTH_SCORES[status.value],
            overdue_count=overdue,
            days_since_activity=days_since,
            task_count=len(tasks),
            last_activity=latest.isoformat() if latest else None,
            stored=client.relationship_health,
            effective=resolve_health(client.relationship_health, status),
        )

    def compute_health_score(self, client_id: int) -> ClientHealth | None:
        client = self.snapshot.client(client_id)
        if client is None:
            logger.debug("Health requested for unknown client %s", client_id)
            return None
        return self.compute(client)

    def compute_all(self) -> list[ClientHealth]:
        return [self.compute(c) for c in self.snapshot.clients]


def compute_health(snapshot: Snapshot, client: Client, now: datetime | None = None) -> HealthStatus:
    """Computed health label for one client."""
    return HealthCalculator(snapshot, now).compute(client).status
