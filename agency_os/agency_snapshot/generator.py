"""
Agency Snapshot Generator - the derived views the dashboard renders.

Everything here is recomputed from the current Snapshot on every read
and nothing is stored.

Sections:
- badges: sidebar counters per workspace
- kpis: command-center tiles
- onboarding: checklist summary
- health: client counts per effective health status
- roster: one row per client with computed health
"""

import logging
from collections import Counter
from datetime import datetime

from ..client_truth import HealthCalculator
from ..contracts import ONBOARDING_PROGRESS_MAX, THRESHOLDS
from ..models import PUBLISHED, ClientStatus, HealthStatus, OnboardingState, Snapshot, TaskStatus
from ..models.base import utc_now
from ..queries import is_open, overdue

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (ClientStatus.ACTIVE_SPRINT, ClientStatus.RETAINER)
PIPELINE_STATUSES = (ClientStatus.LEAD, ClientStatus.DISCOVERY)


class AgencySnapshotGenerator:
    """
    Builds dashboard views from a Snapshot.

    Snapshot structure:
    - meta: generation time
    - badges: command, client, fulfillment, content, onboarding
    - kpis: cash collected, active sprints, pipeline leads, friction alerts, tiers
    - onboarding: total, blocked, near complete, completed, average progress
    - health: healthy, at-risk, critical
    - roster: per-client rows
    """

    NEAR_COMPLETE = 8

    def __init__(
        self,
        snapshot: Snapshot,
        now: datetime | None = None,
        thresholds: dict[str, float] | None = None,
    ):
        self.snapshot = snapshot
        self.now = now or utc_now()
        self.thresholds = thresholds or THRESHOLDS

    def friction_alerts(self) -> int:
        return len(overdue(self.snapshot, self.now.date()))

    def badge_counts(self) -> dict[str, int]:
        s = self.snapshot
        return {
            "command": self.friction_alerts(),
            "client": sum(1 for c in s.clients if c.status in ACTIVE_STATUSES),
            "fulfillment": sum(1 for t in s.tasks if t.status == TaskStatus.ACTIVE),
            "content": sum(1 for p in s.posts if p.status != PUBLISHED),
            "onboarding": sum(1 for o in s.onboardings if o.status != OnboardingState.COMPLETED),
        }

    def dashboard_kpis(self) -> dict:
        s = self.snapshot
        active = [c for c in s.clients if c.status in ACTIVE_STATUSES]
        return {
            "cashCollected": sum(c.ltv or 0 for c in active),
            "activeSprints": len(active),
            "pipelineLeads": sum(1 for c in s.clients if c.status in PIPELINE_STATUSES),
            "frictionAlerts": self.friction_alerts(),
            "openTasks": sum(1 for t in s.tasks if is_open(t)),
            "tierDistribution": dict(Counter(c.tier for c in s.clients if c.tier)),
        }

    def onboarding_summary(self) -> dict:
        protocols = self.snapshot.onboardings
        total = len(protocols)
        return {
            "total": total,
            "blocked": sum(1 for o in protocols if o.status == OnboardingState.BLOCKED),
            "nearComplete": sum(
                1 for o in protocols if self.NEAR_COMPLETE <= o.progress < ONBOARDING_PROGRESS_MAX
            ),
            "completed": sum(1 for o in protocols if o.progress >= ONBOARDING_PROGRESS_MAX),
            "averageProgress": round(sum(o.progress for o in protocols) / total, 1) if total else 0.0,
        }

    def health_summary(self) -> dict[str, int]:
        calc = HealthCalculator(self.snapshot, self.now, self.thresholds)
        counts = Counter(h.effective.value for h in calc.compute_all())
        return {s.value: counts[s.value] for s in HealthStatus}

    def roster(self, status: str | None = None, query: str = "") -> list[dict]:
        """Client rows, optionally filtered by status and a name/niche/contact search."""
        calc = HealthCalculator(self.snapshot, self.now, self.thresholds)
        needle = query.strip().lower()
        rows = []
        for client in self.snapshot.clients:
            if status and client.status != status:
                continue
            haystack = (client.name, client.niche, client.contact_name)
            if needle and not any(needle in (h or "").lower() for h in haystack):
                continue
            health = calc.compute(client)
            rows.append(
                {
                    "id": client.id,
                    "name": client.name,
                    "status": client.status.value,
                    "tier": client.tier,
                    "ltv": client.ltv,
                    "health": health.effective.value,
                    "computedHealth": health.status.value,
                    "healthScore": health.health_score,
                    "overdueCount": health.overdue_count,
                    "lastActivity": _activity_label(health.days_since_activity),
                    "onboardingStatus": client.onboarding_status.value,
                }
            )
        return rows

    def generate(self) -> dict:
        logger.debug("Generating agency snapshot for %d clients", len(self.snapshot.clients))
        return {
            "meta": {"generatedAt": self.now.isoformat()},
            "badges": self.badge_counts(),
            "kpis": self.dashboard_kpis(),
            "onboarding": self.onboarding_summary(),
            "health": self.health_summary(),
            "roster": self.roster(),
        }


def _activity_label(days: int | None) -> str:
    if days is None:
        return "No activity"
    if days == 0:
        return "Today"
    if days == 1:
        return "1 day ago"
    return f"{days} days ago"
