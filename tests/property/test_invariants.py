"""
Property-based tests for core invariants using Hypothesis.

These tests stress id allocation and the at-most-once triggers with
random command sequences.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from agency_os.ids import allocate_ids, next_id
from agency_os.models import POST_PIPELINE, PUBLISHED, TASK_PIPELINE, ClientStatus, OperatorLevel, Snapshot
from agency_os.transitions import (
    AddClient,
    AdvancePostStage,
    AdvanceTaskStage,
    DeleteClient,
    UpdateClient,
    UpdatePost,
)
from tests.fixtures import make_client, run, seeded_snapshot

# ============================================================================
# Identifier allocation
# ============================================================================


@given(st.lists(st.integers(min_value=1, max_value=10_000), max_size=50))
def test_next_id_exceeds_every_existing_id(ids):
    new_id = next_id(ids)
    assert all(new_id > i for i in ids)


@given(st.lists(st.integers(min_value=1, max_value=10_000), max_size=50), st.integers(min_value=0, max_value=20))
def test_allocated_block_is_contiguous_and_fresh(ids, count):
    block = allocate_ids(ids, count)
    assert len(block) == count
    assert block == list(range(next_id(ids), next_id(ids) + count))
    assert not set(block) & set(ids)


@settings(max_examples=50, deadline=None)
@given(st.lists(st.one_of(st.just("add"), st.integers(min_value=1, max_value=12)), max_size=25))
def test_client_ids_unique_under_adds_and_deletes(ops):
    snap = Snapshot()
    for op in ops:
        if op == "add":
            snap = run(snap, AddClient({"name": "x"})).snapshot
        else:
            snap = run(snap, DeleteClient(op)).snapshot
        ids = [c.id for c in snap.clients]
        assert len(ids) == len(set(ids))


# ============================================================================
# At-most-once triggers
# ============================================================================

STATUSES = [s.value for s in ClientStatus]


@settings(max_examples=50, deadline=None)
@given(st.lists(st.sampled_from(STATUSES), max_size=15))
def test_at_most_one_onboarding_per_client(statuses):
    snap = Snapshot(clients=(make_client(1),))
    for status in statuses:
        snap = run(snap, UpdateClient(1, {"status": status})).snapshot
        assert sum(1 for o in snap.onboardings if o.client_id == 1) <= 1


@settings(max_examples=50, deadline=None)
@given(st.lists(st.sampled_from(STATUSES), max_size=15))
def test_each_status_change_adds_at_most_one_event(statuses):
    snap = Snapshot(clients=(make_client(1),))
    for status in statuses:
        before = len(snap.client(1).timeline)
        snap = run(snap, UpdateClient(1, {"status": status})).snapshot
        assert len(snap.client(1).timeline) - before <= 1


@settings(max_examples=50, deadline=None)
@given(st.lists(st.sampled_from(TASK_PIPELINE), max_size=20))
def test_task_stage_stays_in_pipeline_and_log_grows(stages):
    snap = seeded_snapshot()
    for stage in stages:
        before = len(snap.task(1).activity_log)
        snap = run(snap, AdvanceTaskStage(1, stage, OperatorLevel.ELEVATED)).snapshot
        task = snap.task(1)
        assert task.current_stage in task.stage_pipeline
        assert len(task.activity_log) == before + 1


@settings(max_examples=50, deadline=None)
@given(
    st.lists(st.sampled_from(POST_PIPELINE), max_size=12),
    st.lists(st.tuples(st.integers(0, 5000), st.integers(0, 500), st.integers(0, 500)), max_size=5),
)
def test_breakout_captured_at_most_once(stages, perf_logs):
    snap = seeded_snapshot()
    baseline = len(snap.protocols)
    for stage in (*stages, PUBLISHED):
        snap = run(snap, AdvancePostStage(1, stage, OperatorLevel.ELEVATED)).snapshot
    for reach, saves, shares in perf_logs:
        snap = run(snap, UpdatePost(1, {"performance": {"reach": reach, "saves": saves, "shares": shares}})).snapshot
        assert len(snap.protocols) - baseline <= 1
