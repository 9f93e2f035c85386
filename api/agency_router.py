"""
Agency API Router - REST endpoints over the state container.

Every mutation authenticates the operator, checks existence and
capability, then dispatches exactly one command. Reads are recomputed
from the current snapshot on every request.

Endpoints:
- GET  /api/health, POST /api/setup, GET /api/session
- GET  /api/snapshot
- Clients:    /api/clients[/{id}[/timeline|/sprint|/monthly-posts|/health|/knowledge|/tasks]]
- Tasks:      /api/tasks, /api/tasks/mine, /api/tasks/{id}[/advance]
- Posts:      /api/posts, /api/posts/{id}[/advance]
- Knowledge:  /api/protocols[/{id}[/copy|/related]]
- Onboarding: /api/onboardings/{id}/steps/{step_id}, /api/onboardings/{id}/blocked
- Views:      /api/agency, /api/roster, /api/badges, /api/dashboard
"""

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from agency_os.agency_snapshot import AgencySnapshotGenerator
from agency_os.client_truth import HealthCalculator
from agency_os.knowledge import client_knowledge, related_entries, search_entries
from agency_os.models import EventKind, OperatorLevel, Snapshot, utc_now
from agency_os.queries import for_client, my_tasks
from agency_os.security import AccessSetupError, can_advance_to, can_complete_step, initialize_access
from agency_os.state_store import get_store

from api.auth import require_elevated_for, require_operator
from api.response_models import (
    BlockedRequest,
    CreatedManyResponse,
    CreatedResponse,
    HealthResponse,
    ListResponse,
    MonthlyPlanRequest,
    MutationResponse,
    SessionResponse,
    SetupRequest,
    StageRequest,
    StepRequest,
    TimelineEventRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["agency"])


def _snapshot() -> Snapshot:
    return get_store().snapshot


def _not_found(kind: str, entity_id) -> HTTPException:
    logger.info(f"{kind} {entity_id} not found")
    return HTTPException(status_code=404, detail=f"{kind} {entity_id} not found")


def _require_client(client_id: int) -> None:
    if _snapshot().client(client_id) is None:
        raise _not_found("Client", client_id)


def _check_draft_stage(level: OperatorLevel, stage: str | None) -> None:
    if stage:
        require_elevated_for(can_advance_to(level, stage), f"create tasks at {stage}")


# ==== Health / session ====


@router.get("/health", response_model=HealthResponse)
def health(request: Request):
    """Liveness plus persistence state; never requires a phrase."""
    bridge = getattr(request.app.state, "bridge", None)
    online = bridge.online if bridge is not None else False
    return HealthResponse(
        status="healthy" if online else "degraded",
        initialized=_snapshot().settings.initialized,
        persistence="online" if online else "offline",
        timestamp=utc_now().isoformat(),
    )


@router.post("/setup", response_model=MutationResponse)
def setup(body: SetupRequest):
    """First-time passphrase setup. Refused once the workspace is initialized."""
    if _snapshot().settings.initialized:
        raise HTTPException(status_code=409, detail="Access phrases already configured")
    try:
        elevated_hash, standard_hash = initialize_access(body.elevated_phrase, body.standard_phrase)
    except AccessSetupError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    get_store().initialize_access(elevated_hash, standard_hash)
    logger.info("Workspace access initialized")
    return MutationResponse(success=True)


@router.get("/session", response_model=SessionResponse)
def session(level: OperatorLevel = Depends(require_operator)):
    return SessionResponse(level=level.value)


@router.get("/snapshot")
def snapshot(level: OperatorLevel = Depends(require_operator)):
    """The full persisted document. Passphrase hashes are never returned."""
    doc = _snapshot().to_dict()
    doc["settings"].pop("accessPhraseHashes", None)
    return doc


# ==== Clients ====


@router.get("/clients", response_model=ListResponse)
def list_clients(
    status: str | None = Query(None, description="Filter by pipeline status"),
    level: OperatorLevel = Depends(require_operator),
):
    clients = [c.to_dict() for c in _snapshot().clients if not status or c.status == status]
    return ListResponse(items=clients, total=len(clients))


@router.post("/clients", response_model=CreatedResponse, status_code=201)
def add_client(draft: dict = Body(...), level: OperatorLevel = Depends(require_operator)):
    return CreatedResponse(id=get_store().add_client(draft))


@router.get("/clients/{client_id}")
def get_client(client_id: int, level: OperatorLevel = Depends(require_operator)):
    client = _snapshot().client(client_id)
    if client is None:
        raise _not_found("Client", client_id)
    return client.to_dict()


@router.patch("/clients/{client_id}", response_model=MutationResponse)
def update_client(client_id: int, patch: dict = Body(...), level: OperatorLevel = Depends(require_operator)):
    _require_client(client_id)
    get_store().update_client(client_id, patch)
    return MutationResponse(success=True)


@router.delete("/clients/{client_id}", response_model=MutationResponse)
def delete_client(client_id: int, level: OperatorLevel = Depends(require_operator)):
    _require_client(client_id)
    get_store().delete_client(client_id)
    return MutationResponse(success=True)


@router.post("/clients/{client_id}/timeline", response_model=MutationResponse)
def add_timeline_event(
    client_id: int, body: TimelineEventRequest, level: OperatorLevel = Depends(require_operator)
):
    _require_client(client_id)
    get_store().add_timeline_event(client_id, body.text, EventKind(body.kind))
    return MutationResponse(success=True)


@router.post("/clients/{client_id}/sprint", response_model=CreatedManyResponse, status_code=201)
def generate_sprint(client_id: int, level: OperatorLevel = Depends(require_operator)):
    _require_client(client_id)
    return CreatedManyResponse(ids=get_store().generate_sprint_tasks(client_id))


@router.post("/clients/{client_id}/monthly-posts", response_model=CreatedManyResponse, status_code=201)
def generate_monthly_posts(
    client_id: int, body: MonthlyPlanRequest, level: OperatorLevel = Depends(require_operator)
):
    _require_client(client_id)
    rows = [row.to_row() for row in body.rows]
    return CreatedManyResponse(ids=get_store().generate_monthly_posts(client_id, rows))


@router.get("/clients/{client_id}/health")
def client_health(client_id: int, level: OperatorLevel = Depends(require_operator)):
    store = get_store()
    result = HealthCalculator(store.snapshot, store.now(), store.thresholds).compute_health_score(client_id)
    if result is None:
        raise _not_found("Client", client_id)
    return result.to_dict()


@router.get("/clients/{client_id}/knowledge", response_model=ListResponse)
def client_knowledge_entries(client_id: int, level: OperatorLevel = Depends(require_operator)):
    _require_client(client_id)
    entries = [e.to_dict() for e in client_knowledge(_snapshot().protocols, client_id)]
    return ListResponse(items=entries, total=len(entries))


@router.get("/clients/{client_id}/tasks", response_model=ListResponse)
def client_open_tasks(client_id: int, level: OperatorLevel = Depends(require_operator)):
    """Open work for one client: active and not yet at its terminal stage."""
    _require_client(client_id)
    tasks = [t.to_dict() for t in for_client(_snapshot(), client_id)]
    return ListResponse(items=tasks, total=len(tasks))


# ==== Tasks ====


@router.get("/tasks", response_model=ListResponse)
def list_tasks(
    client_id: int | None = Query(None),
    node: str | None = Query(None, description="Assigned node"),
    level: OperatorLevel = Depends(require_operator),
):
    tasks = [
        t.to_dict()
        for t in _snapshot().tasks
        if (client_id is None or t.client_id == client_id) and (not node or t.assigned_node == node)
    ]
    return ListResponse(items=tasks, total=len(tasks))


@router.get("/tasks/mine")
def tasks_mine(node: str = Query(..., min_length=1), level: OperatorLevel = Depends(require_operator)):
    """Personal queue for one node, bucketed by deadline."""
    store = get_store()
    return my_tasks(store.snapshot, node, store.now()).to_dict()


@router.post("/tasks", response_model=CreatedResponse, status_code=201)
def add_task(draft: dict = Body(...), level: OperatorLevel = Depends(require_operator)):
    _check_draft_stage(level, draft.get("currentStage") or draft.get("current_stage"))
    return CreatedResponse(id=get_store().add_task(draft, author=level))


@router.patch("/tasks/{task_id}", response_model=MutationResponse)
def update_task(task_id: int, patch: dict = Body(...), level: OperatorLevel = Depends(require_operator)):
    if _snapshot().task(task_id) is None:
        raise _not_found("Task", task_id)
    get_store().update_task(task_id, patch)
    return MutationResponse(success=True)


@router.post("/tasks/{task_id}/advance", response_model=MutationResponse)
def advance_task(task_id: int, body: StageRequest, level: OperatorLevel = Depends(require_operator)):
    task = _snapshot().task(task_id)
    if task is None:
        raise _not_found("Task", task_id)
    if body.stage != task.current_stage:
        require_elevated_for(can_advance_to(level, body.stage), f"move tasks to {body.stage}")
    get_store().advance_task_stage(task_id, body.stage, level, body.note)
    return MutationResponse(success=True)


# ==== Posts ====


@router.get("/posts", response_model=ListResponse)
def list_posts(client_id: int | None = Query(None), level: OperatorLevel = Depends(require_operator)):
    posts = [p.to_dict() for p in _snapshot().posts if client_id is None or p.client_id == client_id]
    return ListResponse(items=posts, total=len(posts))


@router.post("/posts", response_model=CreatedResponse, status_code=201)
def add_post(draft: dict = Body(...), level: OperatorLevel = Depends(require_operator)):
    return CreatedResponse(id=get_store().add_post(draft, author=level))


@router.patch("/posts/{post_id}", response_model=MutationResponse)
def update_post(post_id: int, patch: dict = Body(...), level: OperatorLevel = Depends(require_operator)):
    if _snapshot().post(post_id) is None:
        raise _not_found("Post", post_id)
    get_store().update_post(post_id, patch)
    return MutationResponse(success=True)


@router.post("/posts/{post_id}/advance", response_model=MutationResponse)
def advance_post(post_id: int, body: StageRequest, level: OperatorLevel = Depends(require_operator)):
    if _snapshot().post(post_id) is None:
        raise _not_found("Post", post_id)
    get_store().advance_post_stage(post_id, body.stage, level, body.note)
    return MutationResponse(success=True)


# ==== Knowledge ====


@router.get("/protocols", response_model=ListResponse)
def search_protocols(
    q: str = Query("", description="Substring of title or content"),
    category: str | None = Query(None),
    pillar: str | None = Query(None),
    client_id: int | None = Query(None),
    level: OperatorLevel = Depends(require_operator),
):
    entries = search_entries(_snapshot().protocols, q, category, pillar, client_id)
    return ListResponse(items=[e.to_dict() for e in entries], total=len(entries))


@router.post("/protocols", response_model=CreatedResponse, status_code=201)
def add_protocol(draft: dict = Body(...), level: OperatorLevel = Depends(require_operator)):
    return CreatedResponse(id=get_store().add_protocol(draft))


@router.patch("/protocols/{entry_id}", response_model=MutationResponse)
def update_protocol(entry_id: int, patch: dict = Body(...), level: OperatorLevel = Depends(require_operator)):
    if _snapshot().protocol(entry_id) is None:
        raise _not_found("Protocol", entry_id)
    get_store().update_protocol(entry_id, patch)
    return MutationResponse(success=True)


@router.delete("/protocols/{entry_id}", response_model=MutationResponse)
def delete_protocol(entry_id: int, level: OperatorLevel = Depends(require_operator)):
    if _snapshot().protocol(entry_id) is None:
        raise _not_found("Protocol", entry_id)
    get_store().delete_protocol(entry_id)
    return MutationResponse(success=True)


@router.post("/protocols/{entry_id}/copy", response_model=MutationResponse)
def copy_prompt(entry_id: int, level: OperatorLevel = Depends(require_operator)):
    """Record one use of a prompt; the client copies the content itself."""
    if _snapshot().protocol(entry_id) is None:
        raise _not_found("Protocol", entry_id)
    get_store().record_prompt_usage(entry_id)
    return MutationResponse(success=True, copyCount=_snapshot().protocol(entry_id).copy_count)


@router.get("/protocols/{entry_id}/related", response_model=ListResponse)
def related_protocols(entry_id: int, level: OperatorLevel = Depends(require_operator)):
    snap = _snapshot()
    entry = snap.protocol(entry_id)
    if entry is None:
        raise _not_found("Protocol", entry_id)
    entries = related_entries(snap.protocols, entry)
    return ListResponse(items=[e.to_dict() for e in entries], total=len(entries))


# ==== Onboarding ====


@router.patch("/onboardings/{protocol_id}/steps/{step_id}", response_model=MutationResponse)
def update_onboarding_step(
    protocol_id: str, step_id: str, body: StepRequest, level: OperatorLevel = Depends(require_operator)
):
    protocol = _snapshot().onboarding(protocol_id)
    if protocol is None:
        raise _not_found("Onboarding", protocol_id)
    step = protocol.step(step_id)
    if step is None:
        raise _not_found("Step", step_id)
    require_elevated_for(can_complete_step(level, step), f"update step {step_id}")
    get_store().update_onboarding_step(protocol_id, step_id, body.completed)
    return MutationResponse(success=True)


@router.put("/onboardings/{protocol_id}/blocked", response_model=MutationResponse)
def set_onboarding_blocked(
    protocol_id: str, body: BlockedRequest, level: OperatorLevel = Depends(require_operator)
):
    if _snapshot().onboarding(protocol_id) is None:
        raise _not_found("Onboarding", protocol_id)
    get_store().set_onboarding_blocked(protocol_id, body.blocked)
    return MutationResponse(success=True)


# ==== Views ====


def _generator() -> AgencySnapshotGenerator:
    store = get_store()
    return AgencySnapshotGenerator(store.snapshot, store.now(), store.thresholds)


@router.get("/agency")
def agency(level: OperatorLevel = Depends(require_operator)):
    """Every dashboard section in one payload."""
    return _generator().generate()


@router.get("/roster", response_model=ListResponse)
def roster(
    status: str | None = Query(None),
    q: str = Query(""),
    level: OperatorLevel = Depends(require_operator),
):
    rows = _generator().roster(status, q)
    return ListResponse(items=rows, total=len(rows))


@router.get("/badges")
def badges(level: OperatorLevel = Depends(require_operator)):
    return _generator().badge_counts()


@router.get("/dashboard")
def dashboard(level: OperatorLevel = Depends(require_operator)):
    gen = _generator()
    return {"kpis": gen.dashboard_kpis(), "onboarding": gen.onboarding_summary(), "badges": gen.badge_counts()}
