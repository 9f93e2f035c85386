"""Tests for the derived dashboard views."""

from agency_os.agency_snapshot import AgencySnapshotGenerator
from agency_os.models import HealthStatus, OnboardingProtocol, OnboardingState
from agency_os.transitions import AddTask, UpdateClient
from tests.fixtures import NOW, make_task, run


def _generator(snapshot):
    return AgencySnapshotGenerator(snapshot, NOW)


class TestBadgesAndKpis:
    def test_seed_badges(self, seeded):
        assert _generator(seeded).badge_counts() == {
            "command": 0,
            "client": 1,
            "fulfillment": 1,
            "content": 1,
            "onboarding": 0,
        }

    def test_seed_kpis(self, seeded):
        kpis = _generator(seeded).dashboard_kpis()
        assert kpis["cashCollected"] == 150000
        assert kpis["activeSprints"] == 1
        assert kpis["pipelineLeads"] == 1
        assert kpis["frictionAlerts"] == 0
        assert kpis["openTasks"] == 1
        assert kpis["tierDistribution"] == {"Tier 2: 60-Day Sprint": 1, "Tier 3: Market Dominance": 1}

    def test_friction_counts_overdue_open_tasks(self, seeded):
        snap = seeded.with_(tasks=(*seeded.tasks, make_task(2, deadline="2026-02-01")))
        gen = _generator(snap)
        assert gen.friction_alerts() == 1
        assert gen.badge_counts()["command"] == 1

    def test_retainer_counts_as_active(self, seeded):
        snap = run(seeded, UpdateClient(2, {"status": "Retainer", "ltv": 50000})).snapshot
        kpis = _generator(snap).dashboard_kpis()
        assert kpis["activeSprints"] == 2
        assert kpis["cashCollected"] == 200000
        assert kpis["pipelineLeads"] == 0


class TestOnboardingSummary:
    def test_empty(self, seeded):
        summary = _generator(seeded).onboarding_summary()
        assert summary == {"total": 0, "blocked": 0, "nearComplete": 0, "completed": 0, "averageProgress": 0.0}

    def test_counts(self, seeded):
        protocols = (
            OnboardingProtocol(id="a", client_id=1, progress=10, status=OnboardingState.COMPLETED),
            OnboardingProtocol(id="b", client_id=2, progress=8),
            OnboardingProtocol(id="c", client_id=3, progress=3, status=OnboardingState.BLOCKED),
        )
        summary = _generator(seeded.with_(onboardings=protocols)).onboarding_summary()
        assert summary["total"] == 3
        assert summary["blocked"] == 1
        assert summary["nearComplete"] == 1
        assert summary["completed"] == 1
        assert summary["averageProgress"] == 7.0


class TestRoster:
    def test_rows_carry_health(self, seeded):
        rows = {r["id"]: r for r in _generator(seeded).roster()}
        assert rows[1]["health"] == "healthy"
        assert rows[1]["lastActivity"] == "Today"
        assert rows[2]["health"] == "critical"
        assert rows[2]["lastActivity"] == "No activity"

    def test_effective_health_shown(self, seeded):
        snap = run(seeded, UpdateClient(1, {"relationshipHealth": "critical"})).snapshot
        row = _generator(snap).roster()[0]
        assert row["health"] == HealthStatus.CRITICAL
        assert row["computedHealth"] == "healthy"

    def test_status_and_query_filters(self, seeded):
        gen = _generator(seeded)
        assert [r["id"] for r in gen.roster(status="Discovery")] == [2]
        assert [r["id"] for r in gen.roster(query="cultural")] == [1]
        assert [r["id"] for r in gen.roster(query="fatima")] == [2]
        assert gen.roster(query="nobody") == []

    def test_generate_bundles_sections(self, seeded):
        snap = run(seeded, AddTask({"clientId": 2, "name": "Proposal", "deadline": "2026-03-03"})).snapshot
        doc = _generator(snap).generate()
        assert set(doc) == {"meta", "badges", "kpis", "onboarding", "health", "roster"}
        assert doc["kpis"]["openTasks"] == 2
        assert doc["health"] == {"healthy": 2, "at-risk": 0, "critical": 0}

    def test_health_summary_counts_effective_status(self, seeded):
        assert _generator(seeded).health_summary() == {"healthy": 1, "at-risk": 0, "critical": 1}
        snap = run(seeded, UpdateClient(1, {"relationshipHealth": "at-risk"})).snapshot
        assert _generator(snap).health_summary() == {"healthy": 0, "at-risk": 1, "critical": 1}
