"""
Tests for client lifecycle transitions.

Covers install, status triggers (exactly one per change), timeline
ordering and the delete cascade.
"""

import pytest

from agency_os.models import (
    ClientStatus,
    EventKind,
    HealthStatus,
    KnowledgeCategory,
    KnowledgeEntry,
    OnboardingState,
    Snapshot,
    TaskStatus,
)
from agency_os.transitions import (
    AddClient,
    AddTimelineEvent,
    DeleteClient,
    UpdateClient,
    apply,
)
from tests.fixtures import NOW, make_client, make_task, run


# =============================================================================
# ADD CLIENT
# =============================================================================


class TestAddClient:
    def test_assigns_next_id_and_stamps(self, seeded):
        result = run(seeded, AddClient({"name": "Acme", "status": "Lead", "id": 99}))
        assert result.created_id == 3
        client = result.snapshot.client(3)
        assert client.name == "Acme"
        assert client.created_at == "2026-03-02T10:00:00.000Z"
        assert client.updated_at == client.created_at

    def test_default_install_event(self, seeded):
        client = run(seeded, AddClient({"name": "Acme"})).snapshot.client(3)
        assert len(client.timeline) == 1
        assert client.timeline[0].id == 1
        assert client.timeline[0].event == "Client installed via revenue gate on 2026-03-02"
        assert client.timeline[0].type == EventKind.SYSTEM

    def test_supplied_timeline_kept(self, seeded):
        draft = {"name": "Acme", "timeline": [{"id": 1, "date": "2026-01-01", "event": "Imported"}]}
        client = run(seeded, AddClient(draft)).snapshot.client(3)
        assert [e.event for e in client.timeline] == ["Imported"]

    def test_active_sprint_install_creates_onboarding(self, seeded):
        result = run(seeded, AddClient({"name": "Acme", "status": "Active Sprint"}))
        protocol = result.snapshot.onboarding_for(3)
        assert protocol is not None
        assert protocol.id == f"obs-3-{int(NOW.timestamp() * 1000)}"
        assert len(protocol.steps) == 10
        assert protocol.progress == 0
        assert protocol.status == OnboardingState.ON_TRACK

    def test_lead_install_has_no_onboarding(self, seeded):
        result = run(seeded, AddClient({"name": "Acme"}))
        assert result.snapshot.onboarding_for(3) is None

    def test_input_snapshot_untouched(self, seeded):
        run(seeded, AddClient({"name": "Acme"}))
        assert len(seeded.clients) == 2


# =============================================================================
# UPDATE CLIENT
# =============================================================================


class TestUpdateClient:
    def test_plain_patch_bumps_updated_at(self, seeded):
        snap = run(seeded, UpdateClient(2, {"notes": "Follow up Friday"})).snapshot
        client = snap.client(2)
        assert client.notes == "Follow up Friday"
        assert client.updated_at == "2026-03-02T10:00:00.000Z"
        assert len(client.timeline) == 1

    def test_protected_fields_dropped(self, seeded):
        snap = run(seeded, UpdateClient(2, {"id": 50, "timeline": [], "name": "YZ"})).snapshot
        client = snap.client(2)
        assert client.id == 2
        assert client.name == "YZ"
        assert len(client.timeline) == 1

    def test_snake_case_keys_accepted(self, seeded):
        snap = run(seeded, UpdateClient(2, {"contact_name": "Fatima"})).snapshot
        assert snap.client(2).contact_name == "Fatima"

    def test_unknown_client_is_noop(self, seeded):
        result = run(seeded, UpdateClient(404, {"name": "x"}))
        assert result.snapshot == seeded

    def test_unknown_status_ignored(self, seeded):
        snap = run(seeded, UpdateClient(2, {"status": "Paused", "notes": "n"})).snapshot
        assert snap.client(2).status == ClientStatus.DISCOVERY
        assert snap.client(2).notes == "n"

    def test_null_values_do_not_reset_fields(self):
        client = make_client(
            1, name="Mozart House", status=ClientStatus.RETAINER, relationship_health=HealthStatus.CRITICAL
        )
        snap = Snapshot(clients=(client,))
        patch = {"status": None, "name": None, "relationshipHealth": None, "notes": "x"}
        updated = run(snap, UpdateClient(1, patch)).snapshot.client(1)
        assert updated.status == ClientStatus.RETAINER
        assert updated.name == "Mozart House"
        assert updated.relationship_health == HealthStatus.CRITICAL
        assert updated.notes == "x"
        assert updated.timeline == ()

    def test_activate_sprint_creates_one_onboarding_and_event(self, seeded):
        snap = run(seeded, UpdateClient(2, {"status": "Active Sprint"})).snapshot
        assert sum(1 for o in snap.onboardings if o.client_id == 2) == 1
        client = snap.client(2)
        assert client.timeline[0].event == "Sprint activated on 2026-03-02"
        assert client.timeline[0].id == 2

    def test_reactivation_does_not_duplicate_onboarding(self, seeded):
        snap = run(seeded, UpdateClient(2, {"status": "Active Sprint"})).snapshot
        snap = run(snap, UpdateClient(2, {"status": "Discovery"})).snapshot
        snap = run(snap, UpdateClient(2, {"status": "Active Sprint"})).snapshot
        assert sum(1 for o in snap.onboardings if o.client_id == 2) == 1

    def test_same_status_fires_nothing(self, seeded):
        snap = run(seeded, UpdateClient(1, {"status": "Active Sprint"})).snapshot
        assert snap.client(1).timeline == seeded.client(1).timeline
        assert snap.onboardings == ()

    def test_retainer_deploys_active_tasks(self, seeded):
        snap = run(seeded, UpdateClient(1, {"status": "Retainer"})).snapshot
        task = snap.task(1)
        assert task.status == TaskStatus.DEPLOYED
        assert task.current_stage == "IN PRODUCTION"
        assert snap.client(1).timeline[0].event == "Converted to retainer on 2026-03-02"

    def test_closed_cancels_active_tasks_only(self, seeded):
        done = make_task(2, client_id=1, status=TaskStatus.DEPLOYED)
        other = make_task(3, client_id=2)
        snap = seeded.with_(tasks=(*seeded.tasks, done, other))
        snap = run(snap, UpdateClient(1, {"status": "Closed"})).snapshot
        assert snap.task(1).status == TaskStatus.CANCELLED
        assert snap.task(2).status == TaskStatus.DEPLOYED
        assert snap.task(3).status == TaskStatus.ACTIVE
        assert snap.client(1).timeline[0].event == "Account closed on 2026-03-02"

    def test_discovery_event(self):
        snap = Snapshot(clients=(make_client(1),))
        snap = run(snap, UpdateClient(1, {"status": "Discovery"})).snapshot
        assert snap.client(1).timeline[0].event == "Discovery phase started on 2026-03-02"

    def test_back_to_lead_has_no_event(self):
        snap = Snapshot(clients=(make_client(1, status=ClientStatus.DISCOVERY),))
        snap = run(snap, UpdateClient(1, {"status": "Lead"})).snapshot
        assert snap.client(1).status == ClientStatus.LEAD
        assert snap.client(1).timeline == ()


# =============================================================================
# TIMELINE
# =============================================================================


class TestTimeline:
    def test_manual_event_prepended_with_next_id(self, seeded):
        snap = run(seeded, AddTimelineEvent(1, "Invoice sent", EventKind.MANUAL)).snapshot
        timeline = snap.client(1).timeline
        assert timeline[0].id == 4
        assert timeline[0].event == "Invoice sent"
        assert timeline[0].type == EventKind.MANUAL
        assert timeline[0].date == "2026-03-02T10:00:00.000Z"
        assert [e.id for e in timeline[1:]] == [3, 2, 1]

    def test_ids_are_per_client(self, seeded):
        snap = run(seeded, AddTimelineEvent(2, "Call booked")).snapshot
        assert snap.client(2).timeline[0].id == 2

    def test_unknown_client_is_noop(self, seeded):
        assert run(seeded, AddTimelineEvent(9, "x")).snapshot == seeded


# =============================================================================
# DELETE CLIENT
# =============================================================================


class TestDeleteClient:
    def test_cascades_to_owned_records(self, seeded):
        notes = KnowledgeEntry(
            id=500, title="Mozart notes", category=KnowledgeCategory.CLIENT_KNOWLEDGE_BASE, linked_client_id=1
        )
        brand = KnowledgeEntry(
            id=501, title="Mozart brand", category=KnowledgeCategory.BRAND_STANDARD, linked_client_id=1
        )
        snap = seeded.with_(protocols=(*seeded.protocols, notes, brand))
        snap = run(snap, UpdateClient(1, {"status": "Discovery"})).snapshot
        snap = run(snap, UpdateClient(1, {"status": "Active Sprint"})).snapshot
        assert snap.onboarding_for(1) is not None

        snap = run(snap, DeleteClient(1)).snapshot
        assert snap.client(1) is None
        assert [t for t in snap.tasks if t.client_id == 1] == []
        assert [p for p in snap.posts if p.client_id == 1] == []
        assert snap.onboarding_for(1) is None
        assert snap.protocol(500) is None
        assert snap.protocol(501) is not None
        assert snap.client(2) is not None

    def test_unknown_client_is_noop(self, seeded):
        assert run(seeded, DeleteClient(99)).snapshot == seeded


class TestReducer:
    def test_unknown_command_raises_type_error(self, seeded):
        with pytest.raises(TypeError):
            apply(seeded, object(), now=NOW)
