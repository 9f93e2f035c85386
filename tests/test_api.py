"""
Agency API Tests

Tests for api/agency_router.py endpoints through FastAPI's TestClient.
The store is seeded with the fixed-clock snapshot and persists to a
temp SQLite file.
"""

import pytest
from fastapi.testclient import TestClient

from agency_os.models import OnboardingState
from agency_os.persistence import PersistenceBridge, SnapshotStore
from agency_os.state_store import get_store, init_store
from api.server import create_app
from tests.fixtures import NOW

CEO = {"X-Access-Phrase": "north star"}
TEAM = {"X-Access-Phrase": "daily grind"}


@pytest.fixture
def local_store(db_path):
    return SnapshotStore(db_path)


@pytest.fixture
def api(seeded, local_store):
    """Client against a fresh, not yet initialized workspace."""
    bridge = PersistenceBridge(local_store)
    init_store(seeded, on_change=bridge.save, clock=lambda: NOW)
    return TestClient(create_app(bridge=bridge, bootstrap=False))


@pytest.fixture
def client(api):
    """Client against an initialized workspace."""
    response = api.post("/api/setup", json={"elevated_phrase": "north star", "standard_phrase": "daily grind"})
    assert response.status_code == 200
    return api


# =============================================================================
# SETUP / AUTH
# =============================================================================


class TestSetupAndAuth:
    def test_health_is_public(self, api):
        response = api.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["initialized"] is False

    def test_requests_rejected_before_setup(self, api):
        assert api.get("/api/clients", headers=CEO).status_code == 401

    def test_setup_once(self, client):
        again = client.post("/api/setup", json={"elevated_phrase": "a", "standard_phrase": "b"})
        assert again.status_code == 409

    def test_setup_rejects_identical_phrases(self, api):
        response = api.post("/api/setup", json={"elevated_phrase": "same", "standard_phrase": "same"})
        assert response.status_code == 422
        assert not get_store().snapshot.settings.initialized

    def test_setup_requires_both_fields(self, api):
        assert api.post("/api/setup", json={"elevated_phrase": "x"}).status_code == 422

    def test_wrong_phrase(self, client):
        assert client.get("/api/clients", headers={"X-Access-Phrase": "guess"}).status_code == 401
        assert client.get("/api/clients").status_code == 401

    def test_session_level(self, client):
        assert client.get("/api/session", headers=CEO).json() == {"level": "ceo"}
        assert client.get("/api/session", headers=TEAM).json() == {"level": "team"}

    def test_snapshot_hides_hashes(self, client):
        doc = client.get("/api/snapshot", headers=TEAM).json()
        assert "accessPhraseHashes" not in doc["settings"]
        assert doc["settings"]["initialized"] is True
        assert len(doc["clients"]) == 2

    def test_request_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "req-test-1"})
        assert response.headers["x-request-id"] == "req-test-1"
        assert client.get("/api/health").headers["x-request-id"].startswith("req-")


# =============================================================================
# CLIENTS
# =============================================================================


class TestClientEndpoints:
    def test_create_and_fetch(self, client):
        response = client.post("/api/clients", json={"name": "Acme", "status": "Lead"}, headers=TEAM)
        assert response.status_code == 201
        assert response.json() == {"id": 3}
        fetched = client.get("/api/clients/3", headers=TEAM).json()
        assert fetched["name"] == "Acme"
        assert fetched["timeline"][0]["event"] == "Client installed via revenue gate on 2026-03-02"

    def test_list_filter(self, client):
        data = client.get("/api/clients", params={"status": "Discovery"}, headers=TEAM).json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "YZ Corp"

    def test_patch_and_missing(self, client):
        assert client.patch("/api/clients/2", json={"notes": "Signed"}, headers=TEAM).status_code == 200
        assert get_store().snapshot.client(2).notes == "Signed"
        assert client.patch("/api/clients/99", json={"notes": "x"}, headers=TEAM).status_code == 404
        assert client.get("/api/clients/99", headers=TEAM).status_code == 404

    def test_null_patch_keeps_status(self, client):
        response = client.patch("/api/clients/1", json={"status": None, "notes": "Renewal call"}, headers=TEAM)
        assert response.status_code == 200
        stored = get_store().snapshot.client(1)
        assert stored.status == "Active Sprint"
        assert stored.notes == "Renewal call"

    def test_timeline_event(self, client):
        response = client.post("/api/clients/1/timeline", json={"text": "Invoice sent"}, headers=TEAM)
        assert response.status_code == 200
        event = get_store().snapshot.client(1).timeline[0]
        assert (event.event, event.type) == ("Invoice sent", "manual")

    def test_delete(self, client):
        assert client.delete("/api/clients/1", headers=TEAM).status_code == 200
        snap = get_store().snapshot
        assert snap.client(1) is None
        assert snap.tasks == ()

    def test_sprint_generation(self, client):
        response = client.post("/api/clients/2/sprint", headers=CEO)
        assert response.status_code == 201
        assert response.json()["ids"] == [2, 3, 4, 5, 6, 7, 8]

    def test_monthly_posts(self, client):
        body = {
            "rows": [
                {
                    "platform": "instagram",
                    "post_type": "Reel",
                    "hook_idea": "Studio tour",
                    "date": "2026-03-11",
                    "assigned_to": "Video Editor",
                }
            ]
        }
        response = client.post("/api/clients/1/monthly-posts", json=body, headers=TEAM)
        assert response.json()["ids"] == [2]
        assert get_store().snapshot.post(2).content_pillar == "Other"

    def test_health_and_knowledge(self, client):
        health = client.get("/api/clients/2/health", headers=TEAM).json()
        assert health["status"] == "critical"
        assert client.get("/api/clients/42/health", headers=TEAM).status_code == 404
        assert client.get("/api/clients/1/knowledge", headers=TEAM).json()["total"] == 0

    def test_changes_are_persisted(self, client, local_store):
        client.post("/api/clients", json={"name": "Acme"}, headers=TEAM)
        doc = local_store.load_document()
        assert [c["name"] for c in doc["clients"]] == ["Mozart House", "YZ Corp", "Acme"]
        assert doc["settings"]["initialized"] is True


# =============================================================================
# TASKS / POSTS
# =============================================================================


class TestTaskEndpoints:
    def test_team_can_move_to_review(self, client):
        response = client.post("/api/tasks/1/advance", json={"stage": "REVIEW"}, headers=TEAM)
        assert response.status_code == 200
        task = get_store().snapshot.task(1)
        assert task.current_stage == "REVIEW"
        assert task.activity_log[-1].author == "team"

    def test_team_can_move_to_client_approval(self, client):
        response = client.post("/api/tasks/1/advance", json={"stage": "CLIENT APPROVAL"}, headers=TEAM)
        assert response.status_code == 200
        assert get_store().snapshot.task(1).current_stage == "CLIENT APPROVAL"

    def test_team_cannot_deploy(self, client):
        response = client.post("/api/tasks/1/advance", json={"stage": "DEPLOYED"}, headers=TEAM)
        assert response.status_code == 403
        assert get_store().snapshot.task(1).current_stage == "IN PRODUCTION"

    def test_ceo_deploys(self, client):
        client.post("/api/tasks/1/advance", json={"stage": "DEPLOYED"}, headers=CEO)
        assert get_store().snapshot.task(1).status == "deployed"

    def test_team_can_note_on_gated_stage(self, client):
        client.post("/api/tasks/1/advance", json={"stage": "CEO APPROVAL"}, headers=CEO)
        response = client.post(
            "/api/tasks/1/advance", json={"stage": "CEO APPROVAL", "note": "Ready"}, headers=TEAM
        )
        assert response.status_code == 200
        assert get_store().snapshot.task(1).activity_log[-1].type == "note"

    def test_create_and_mine(self, client):
        draft = {"clientId": 2, "name": "Proposal deck", "assignedNode": "Art Director", "deadline": "2026-03-02"}
        assert client.post("/api/tasks", json=draft, headers=TEAM).json() == {"id": 2}
        mine = client.get("/api/tasks/mine", params={"node": "Art Director"}, headers=TEAM).json()
        assert [t["id"] for t in mine["dueToday"]] == [2]
        assert [t["id"] for t in mine["dueThisWeek"]] == [1]

    def test_team_cannot_create_at_gated_stage(self, client):
        draft = {"clientId": 2, "name": "x", "currentStage": "DEPLOYED"}
        assert client.post("/api/tasks", json=draft, headers=TEAM).status_code == 403

    def test_missing_task(self, client):
        assert client.patch("/api/tasks/9", json={"notes": "x"}, headers=TEAM).status_code == 404
        assert client.post("/api/tasks/9/advance", json={"stage": "REVIEW"}, headers=TEAM).status_code == 404


class TestPostEndpoints:
    def test_team_can_publish(self, client):
        assert client.post("/api/posts/1/advance", json={"stage": "PUBLISHED"}, headers=TEAM).status_code == 200
        post = get_store().snapshot.post(1)
        assert post.status == "PUBLISHED"
        assert post.activity_log[-1].author == "team"
        assert post.published_date == "2026-03-02"

    def test_performance_breakout(self, client):
        client.post("/api/posts/1/advance", json={"stage": "PUBLISHED"}, headers=CEO)
        perf = {"performance": {"reach": 500, "saves": 40, "shares": 5}}
        assert client.patch("/api/posts/1", json=perf, headers=TEAM).status_code == 200
        results = client.get("/api/protocols", params={"q": "Top Performer"}, headers=TEAM).json()
        assert results["total"] == 1
        assert client.get("/api/clients/1/knowledge", headers=TEAM).json()["total"] == 1

    def test_create_post(self, client):
        response = client.post("/api/posts", json={"clientId": 1, "hook": "Hello"}, headers=TEAM)
        assert response.json() == {"id": 2}
        listed = client.get("/api/posts", params={"client_id": 1}, headers=TEAM).json()
        assert listed["total"] == 2

    def test_team_can_create_post_at_any_stage(self, client):
        draft = {"clientId": 1, "hook": "Launch recap", "status": "SCHEDULED"}
        assert client.post("/api/posts", json=draft, headers=TEAM).status_code == 201
        assert get_store().snapshot.post(2).status == "SCHEDULED"


# =============================================================================
# KNOWLEDGE / ONBOARDING / VIEWS
# =============================================================================


class TestKnowledgeEndpoints:
    def test_search_and_copy(self, client):
        results = client.get("/api/protocols", params={"category": "ai-prompt"}, headers=TEAM).json()
        assert results["total"] == 9
        copied = client.post("/api/protocols/204/copy", headers=TEAM).json()
        assert copied == {"success": True, "copyCount": 1}

    def test_crud(self, client):
        created = client.post("/api/protocols", json={"title": "New SOP", "category": "sop"}, headers=TEAM).json()
        entry_id = created["id"]
        client.patch(f"/api/protocols/{entry_id}", json={"content": "Step 1"}, headers=TEAM)
        assert get_store().snapshot.protocol(entry_id).content == "Step 1"
        assert client.delete(f"/api/protocols/{entry_id}", headers=TEAM).status_code == 200
        assert client.delete(f"/api/protocols/{entry_id}", headers=TEAM).status_code == 404

    def test_related(self, client):
        related = client.get("/api/protocols/202/related", headers=TEAM).json()
        assert [e["id"] for e in related["items"]] == [105]


class TestOnboardingEndpoints:
    @pytest.fixture
    def protocol_id(self, client):
        client.patch("/api/clients/2", json={"status": "Active Sprint"}, headers=CEO)
        return get_store().snapshot.onboarding_for(2).id

    def test_team_step(self, client, protocol_id):
        response = client.patch(f"/api/onboardings/{protocol_id}/steps/2", json={"completed": True}, headers=TEAM)
        assert response.status_code == 200
        assert get_store().snapshot.onboarding(protocol_id).progress == 1

    def test_ceo_step_gated(self, client, protocol_id):
        url = f"/api/onboardings/{protocol_id}/steps/5"
        assert client.patch(url, json={"completed": True}, headers=TEAM).status_code == 403
        assert client.patch(url, json={"completed": True}, headers=CEO).status_code == 200

    def test_missing_step_or_protocol(self, client, protocol_id):
        assert client.patch(f"/api/onboardings/{protocol_id}/steps/99", json={"completed": True}, headers=CEO).status_code == 404
        assert client.patch("/api/onboardings/nope/steps/1", json={"completed": True}, headers=CEO).status_code == 404

    def test_blocked_flag(self, client, protocol_id):
        client.put(f"/api/onboardings/{protocol_id}/blocked", json={"blocked": True}, headers=TEAM)
        assert get_store().snapshot.onboarding(protocol_id).status == OnboardingState.BLOCKED
        assert client.get("/api/dashboard", headers=TEAM).json()["onboarding"]["blocked"] == 1


class TestViews:
    def test_roster(self, client):
        data = client.get("/api/roster", headers=TEAM).json()
        assert data["total"] == 2
        assert {r["name"]: r["health"] for r in data["items"]} == {"Mozart House": "healthy", "YZ Corp": "critical"}

    def test_badges(self, client):
        assert client.get("/api/badges", headers=TEAM).json()["client"] == 1

    def test_dashboard(self, client):
        data = client.get("/api/dashboard", headers=CEO).json()
        assert set(data) == {"kpis", "onboarding", "badges"}
        assert data["kpis"]["activeSprints"] == 1

    def test_agency_view(self, client):
        data = client.get("/api/agency", headers=TEAM).json()
        assert set(data) == {"meta", "badges", "kpis", "onboarding", "health", "roster"}
        assert data["health"] == {"healthy": 1, "at-risk": 0, "critical": 1}
        assert [r["name"] for r in data["roster"]] == ["Mozart House", "YZ Corp"]

    def test_client_open_tasks(self, client):
        assert client.get("/api/clients/1/tasks", headers=TEAM).json()["total"] == 1
        client.post("/api/tasks/1/advance", json={"stage": "DEPLOYED"}, headers=CEO)
        assert client.get("/api/clients/1/tasks", headers=TEAM).json() == {"items": [], "total": 0}
        assert client.get("/api/clients/9/tasks", headers=TEAM).status_code == 404


class TestBootstrap:
    def test_lifespan_loads_through_bridge(self, local_store):
        app = create_app(bridge=PersistenceBridge(local_store))
        with TestClient(app) as http:
            assert http.get("/api/health").json()["initialized"] is False
            assert len(get_store().snapshot.clients) == 2
